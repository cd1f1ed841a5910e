#!/usr/bin/env python3
"""
cli.py

gif2aart - convert animated GIFs into glyph frames.

Usage:
  gif2aart convert input.gif -o out.aart --width 80 --height 24 --method block --color
  gif2aart analyze input.gif
  gif2aart diff out.aart 0 1
  gif2aart play input.gif --loops 0
"""

from pathlib import Path
import argparse
import logging
import sys

from .aart import load_frames, save_frames
from .config import load_config
from .converter import convert_gif_to_frames
from .errors import ConversionError
from .loader import is_url, load_animation
from .models import AspectRatio, ColorMode, ConversionOptions, Disposal, Method
from .render import play

log = logging.getLogger("gif2aart")

DISPOSAL_LABELS = {
    Disposal.NONE: "no disposal",
    Disposal.DO_NOT_DISPOSE: "do not dispose",
    Disposal.RESTORE_BACKGROUND: "restore to background",
    Disposal.RESTORE_PREVIOUS: "restore to previous",
}
ANALYZE_FRAMES = 10
DIFF_ROWS = 40


# ---------------- commands ----------------
def _options_from_args(args):
    return ConversionOptions(
        width=args.width,
        height=args.height,
        fps=args.fps,
        method=args.method,
        ratio=args.ratio,
        chars=args.chars,
        color_mode=ColorMode.FULL_RGB if args.color else ColorMode.MONOCHROME,
    )


def _log_progress(current, total, message):
    log.info("[%3d%%] %s", current * 100 // total, message)


def _default_output(source):
    name = source.rstrip("/").rsplit("/", 1)[-1] if is_url(source) else Path(source).name
    return Path(Path(name).stem or "converted").with_suffix(".aart")


def cmd_convert(args):
    options = _options_from_args(args)
    frames = convert_gif_to_frames(args.source, options, progress=_log_progress, timeout=args.timeout)
    out = Path(args.out) if args.out else _default_output(args.source)
    save_frames(frames, out, source=args.source)
    print(f"Saved {len(frames)} frames ({options.width}x{options.height}) -> {out}")
    return 0


def cmd_analyze(args):
    animation = load_animation(args.source, timeout=args.timeout)
    frames = animation.frames

    print("GIF Analysis")
    print("============\n")
    print(f"Total Frames: {len(frames)}")
    print(f"Loop Count: {animation.loop_count} (0 = infinite)")
    print(f"Screen: {animation.screen_width}x{animation.screen_height}")
    print("\nFrame Details:")

    for i, frame in enumerate(frames[:ANALYZE_FRAMES]):
        alpha_min = frame.image.getchannel("A").getextrema()[0]
        print(f"\nFrame {i}:")
        print(f"  Size: {frame.width}x{frame.height} at ({frame.left},{frame.top})")
        print(f"  Delay: {frame.delay} ({frame.delay * 10:.1f}ms)")
        print(f"  Disposal: {frame.disposal.value} ({DISPOSAL_LABELS[frame.disposal]})")
        print(f"  Has transparency: {alpha_min == 0}")
        if i < 3:
            print("  Sample pixels (first row):")
            px = frame.image.load()
            for x in range(min(10, frame.width)):
                print(f"    [{x},0]: rgba={px[x, 0]}")

    if len(frames) > ANALYZE_FRAMES:
        print(f"\n... and {len(frames) - ANALYZE_FRAMES} more frames")
    return 0


def cells_differ(a, b):
    return a.char != b.char or a.fg != b.fg or a.bg != b.bg


def diff_stats(f1, f2):
    """(total, different, glyph-only diffs, color diffs) over the overlapping cells."""
    total = diff = char_diff = color_diff = 0
    for row1, row2 in zip(f1.cells, f2.cells):
        for c1, c2 in zip(row1, row2):
            total += 1
            if c1.char != c2.char:
                char_diff += 1
            if c1.fg != c2.fg or c1.bg != c2.bg:
                color_diff += 1
            if cells_differ(c1, c2):
                diff += 1
    return total, diff, char_diff, color_diff


def cmd_diff(args):
    frames = load_frames(args.file)
    for index in (args.frame1, args.frame2):
        if not 0 <= index < len(frames):
            print(f"Error: frame {index} out of range, file has {len(frames)} frames", file=sys.stderr)
            return 1

    f1, f2 = frames[args.frame1], frames[args.frame2]
    total, diff, char_diff, color_diff = diff_stats(f1, f2)
    pct = lambda n: n * 100 / total if total else 0.0

    print(f"Comparing Frame {args.frame1} vs Frame {args.frame2}")
    print(f"Canvas: {f1.width}x{f1.height}\n")
    print("Statistics:")
    print(f"  Total cells:      {total}")
    print(f"  Different cells:  {diff} ({pct(diff):.1f}%)")
    print(f"  Character diffs:  {char_diff} ({pct(char_diff):.1f}%)")
    print(f"  Color diffs:      {color_diff} ({pct(color_diff):.1f}%)\n")

    print("Difference map (X = different, · = same):")
    for row1, row2 in list(zip(f1.cells, f2.cells))[:DIFF_ROWS]:
        print("".join("X" if cells_differ(a, b) else "·" for a, b in zip(row1, row2)))
    return 0


def cmd_play(args):
    if not is_url(args.source) and Path(args.source).suffix == ".aart":
        frames = load_frames(args.source)
    else:
        frames = convert_gif_to_frames(args.source, _options_from_args(args), timeout=args.timeout)
    try:
        play(frames, loops=args.loops, align=args.align, color=not args.no_color)
    except KeyboardInterrupt:
        print("\nExiting gif2aart…")
    return 0


# ---------------- CLI ----------------
def _add_conversion_args(p, cfg):
    p.add_argument("--width", type=int, default=cfg.default_width, help="Grid width (columns)")
    p.add_argument("--height", type=int, default=cfg.default_height, help="Grid height (lines)")
    p.add_argument("--fps", type=int, default=cfg.default_fps, help="Fallback FPS for frames without a delay")
    p.add_argument("--method", choices=[m.value for m in Method], default=cfg.default_method)
    p.add_argument("--ratio", choices=[r.value for r in AspectRatio], default=cfg.default_ratio)
    p.add_argument("--chars", default=cfg.default_chars, help="Custom glyph ramp, sparse -> dense")
    p.add_argument("--color", action="store_true", default=cfg.use_colors, help="Keep full RGB colors")


def build_parser(cfg):
    p = argparse.ArgumentParser(prog="gif2aart", description="gif2aart - animated GIF to glyph frames")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.add_argument("--timeout", type=float, default=cfg.http_timeout, help="HTTP timeout (seconds)")
    sub = p.add_subparsers(dest="command", required=True)

    convert = sub.add_parser("convert", help="Convert a GIF and save it as .aart")
    convert.add_argument("source", help="GIF path or http(s) URL")
    convert.add_argument("--out", "-o", help="Output .aart path")
    _add_conversion_args(convert, cfg)
    convert.set_defaults(func=cmd_convert)

    analyze = sub.add_parser("analyze", help="Print frame, delay and disposal details")
    analyze.add_argument("source")
    analyze.set_defaults(func=cmd_analyze)

    diff = sub.add_parser("diff", help="Compare two frames of an .aart file")
    diff.add_argument("file")
    diff.add_argument("frame1", type=int, nargs="?", default=0)
    diff.add_argument("frame2", type=int, nargs="?", default=1)
    diff.set_defaults(func=cmd_diff)

    play_p = sub.add_parser("play", help="Preview a GIF or .aart file in the terminal")
    play_p.add_argument("source")
    play_p.add_argument("--loops", type=int, default=1, help="0 = loop forever")
    play_p.add_argument("--align", choices=["left", "center"], default="left")
    play_p.add_argument("--no-color", action="store_true")
    _add_conversion_args(play_p, cfg)
    play_p.set_defaults(func=cmd_play)
    return p


def main(argv=None):
    logging.basicConfig(level=logging.INFO, format="%(levelname)s: %(message)s")
    try:
        cfg = load_config()
        args = build_parser(cfg).parse_args(argv)
        if args.verbose:
            logging.getLogger().setLevel(logging.DEBUG)
        return args.func(args)
    except ConversionError as e:
        log.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
