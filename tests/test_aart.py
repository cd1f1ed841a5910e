import json

import pytest

from gif2aart.aart import frames_from_dict, load_frames, save_frames, to_aart_dict
from gif2aart.errors import DecodeFailure, SourceUnavailable
from gif2aart.models import Cell, OutputFrame


def make_frame(char="#", duration=100):
    cells = [[Cell(char, "#FFFFFF", "#000000") for _ in range(3)] for _ in range(2)]
    return OutputFrame(width=3, height=2, cells=cells, duration=duration)


def test_dict_layout():
    data = to_aart_dict([make_frame(), make_frame("@", 50)], title="t", source="cat.gif")
    assert data["version"] == "1.0"
    assert data["canvas"] == {"width": 3, "height": 2}
    assert data["metadata"]["title"] == "t"
    assert data["metadata"]["source"] == "cat.gif"
    assert [f["index"] for f in data["frames"]] == [0, 1]
    assert data["frames"][1]["duration"] == 50
    assert data["frames"][1]["cells"][0][0] == {"char": "@", "fg": "#FFFFFF", "bg": "#000000"}


def test_no_frames():
    with pytest.raises(ValueError):
        to_aart_dict([])


def test_save_and_load(tmp_path):
    frames = [make_frame("█"), make_frame("░", 40)]
    path = save_frames(frames, tmp_path / "out.aart")
    assert json.loads(path.read_text(encoding="utf-8"))["metadata"]["title"] == "out.aart"
    assert load_frames(path) == frames


def test_wrong_grid_is_rejected():
    data = to_aart_dict([make_frame()])
    data["frames"][0]["cells"].pop()
    with pytest.raises(DecodeFailure):
        frames_from_dict(data)


def test_load_errors(tmp_path):
    with pytest.raises(SourceUnavailable):
        load_frames(tmp_path / "missing.aart")
    broken = tmp_path / "broken.aart"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(DecodeFailure):
        load_frames(broken)


def _with(**frame_overrides):
    data = to_aart_dict([make_frame()])
    data["frames"][0].update(frame_overrides)
    return data


@pytest.mark.parametrize("data", [
    {"canvas": {"width": 3, "height": 2}, "frames": None},
    {"canvas": {"width": 3, "height": 2}, "frames": [[1]]},
    _with(cells=[[1, 2, 3], [4, 5, 6]]),
    _with(cells="###"),
    _with(cells=[None, None]),
    _with(duration="x"),
    _with(duration=True),
    _with(duration=None),
])
def test_malformed_frames_are_decode_failures(data):
    with pytest.raises(DecodeFailure):
        frames_from_dict(data)


@pytest.mark.parametrize("duration", [0, -40])
def test_non_positive_duration_is_rejected(duration):
    with pytest.raises(DecodeFailure, match="duration"):
        frames_from_dict(_with(duration=duration))
