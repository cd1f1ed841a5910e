from gif2aart.aart import load_frames, save_frames
from gif2aart.cli import diff_stats, main
from gif2aart.models import Cell, OutputFrame


def test_convert_writes_aart(three_frame_gif, tmp_path):
    out = tmp_path / "out.aart"
    code = main(["convert", three_frame_gif, "-o", str(out), "--width", "6", "--height", "3", "--method", "dither"])
    assert code == 0
    frames = load_frames(out)
    assert len(frames) == 3
    assert (frames[0].width, frames[0].height) == (6, 3)


def test_convert_missing_source_fails(tmp_path):
    assert main(["convert", str(tmp_path / "missing.gif"), "-o", str(tmp_path / "x.aart")]) == 1


def test_convert_rejects_bad_size(three_frame_gif, tmp_path):
    assert main(["convert", three_frame_gif, "-o", str(tmp_path / "x.aart"), "--width", "0"]) == 1


def test_config_seeds_defaults(three_frame_gif, tmp_path, monkeypatch):
    cfg = tmp_path / "config.yaml"
    cfg.write_text("converter:\n  default_width: 5\n  default_height: 2\n", encoding="utf-8")
    monkeypatch.setenv("GIF2AART_CONFIG", str(cfg))
    out = tmp_path / "out.aart"
    assert main(["convert", three_frame_gif, "-o", str(out)]) == 0
    assert load_frames(out)[0].width == 5


def test_analyze(three_frame_gif, capsys):
    assert main(["analyze", three_frame_gif]) == 0
    text = capsys.readouterr().out
    assert "Total Frames: 3" in text
    assert "Loop Count: 0" in text
    assert "Size: 8x6" in text


def test_diff(three_frame_gif, tmp_path, capsys):
    out = tmp_path / "out.aart"
    main(["convert", three_frame_gif, "-o", str(out), "--width", "4", "--height", "2", "--color"])
    capsys.readouterr()
    assert main(["diff", str(out), "0", "2"]) == 0
    text = capsys.readouterr().out
    assert "Total cells:      8" in text
    assert main(["diff", str(out), "0", "9"]) == 1


def test_diff_stats():
    a = OutputFrame(2, 1, [[Cell("a", "#FFFFFF", "#000000"), Cell("b", "#FFFFFF", "#000000")]])
    b = OutputFrame(2, 1, [[Cell("a", "#000000", "#000000"), Cell("c", "#FFFFFF", "#000000")]])
    assert diff_stats(a, b) == (2, 2, 1, 1)


def test_diff_rejects_negative_index(three_frame_gif, tmp_path, capsys):
    out = tmp_path / "out.aart"
    main(["convert", three_frame_gif, "-o", str(out), "--width", "4", "--height", "2"])
    assert main(["diff", str(out), "-1"]) == 1
    assert main(["diff", str(out), "0", "-3"]) == 1
    assert "out of range" in capsys.readouterr().err


def test_diff_map_counts_background_changes(tmp_path, capsys):
    a = OutputFrame(2, 1, [[Cell("a", "#FFFFFF", "#000000"), Cell("b", "#FFFFFF", "#000000")]])
    b = OutputFrame(2, 1, [[Cell("a", "#FFFFFF", "#112233"), Cell("b", "#FFFFFF", "#000000")]])
    path = save_frames([a, b], tmp_path / "bg.aart")
    assert diff_stats(a, b) == (2, 1, 0, 1)
    assert main(["diff", str(path)]) == 0
    assert capsys.readouterr().out.rstrip().splitlines()[-1] == "X·"


def test_diff_malformed_file_exits_cleanly(tmp_path):
    path = tmp_path / "broken.aart"
    path.write_text('{"canvas": {"width": 2, "height": 1}, "frames": null}', encoding="utf-8")
    assert main(["diff", str(path)]) == 1


def test_unreadable_config_exits_cleanly(three_frame_gif, tmp_path, monkeypatch):
    monkeypatch.setenv("GIF2AART_CONFIG", str(tmp_path))
    assert main(["analyze", three_frame_gif]) == 1
