"""
render.py

Terminal preview of converted frames.

Provides:
    frame_to_ansi_lines(frame)  -> list of 24-bit ANSI rows
    visible_width / truncate_ansi / pad_ansi  (wide-char aware via wcwidth)
    play(frames, loops)         -> draws frames in place, honoring durations
"""

import re
import shutil
import sys
import time

from wcwidth import wcswidth, wcwidth

ANSI_RE = re.compile(r'\x1b\[[0-9;]*m')
RESET = "\033[0m"
HOME_CLEAR = "\033[H\033[J"
HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"


# ---------------- colors ----------------
def hex_to_rgb(h):
    if not h:
        return None
    s = h.strip().lstrip("#")
    if len(s) == 3:
        s = "".join(c * 2 for c in s)
    if len(s) != 6:
        return None
    try:
        return tuple(int(s[i:i + 2], 16) for i in (0, 2, 4))
    except ValueError:
        return None


def rgb_to_ansi(rgb):
    if not rgb:
        return ""
    r, g, b = rgb
    return f"\033[38;2;{r};{g};{b}m"


# ---------------- width handling ----------------
def _char_width(ch: str) -> int:
    w = wcwidth(ch)
    return w if w > 0 else 0


def visible_width(s: str) -> int:
    clean = ANSI_RE.sub("", s)
    w = wcswidth(clean)
    if w >= 0:
        return w
    return sum(_char_width(ch) for ch in clean)


def truncate_ansi(s: str, target: int) -> str:
    if visible_width(s) <= target:
        return s
    out = []
    vis = 0
    i = 0
    while i < len(s) and vis < target:
        if s[i] == "\x1b":
            m = ANSI_RE.match(s, i)
            if m:
                out.append(m.group(0))
                i = m.end(0)
                continue
        ch = s[i]
        ch_w = _char_width(ch)
        if vis + ch_w > target:
            break
        out.append(ch)
        vis += ch_w
        i += 1
    out.append(RESET)
    return "".join(out)


def pad_ansi(s: str, target: int, align="left") -> str:
    cur = visible_width(s)
    if cur >= target:
        return truncate_ansi(s, target)
    pad = target - cur
    if align == "center":
        left = pad // 2
        right = pad - left
        return (" " * left) + s + (" " * right)
    return s + (" " * pad)


# ---------------- frames ----------------
def frame_to_ansi_lines(frame, color=True):
    """One string per row; each glyph wrapped in its foreground color."""
    rows = []
    for row in frame.cells:
        line = []
        for cell in row:
            rgb = hex_to_rgb(cell.fg) if color else None
            if rgb and cell.char != " ":
                line.append(f"{rgb_to_ansi(rgb)}{cell.char}{RESET}")
            else:
                line.append(cell.char)
        rows.append("".join(line))
    return rows


def play(frames, loops=1, align="left", color=True, out=None, sleep=time.sleep):
    """
    Draw frames in place. `loops` <= 0 repeats until interrupted.
    """
    out = out or sys.stdout
    if not frames:
        return 0
    rendered = [frame_to_ansi_lines(f, color=color) for f in frames]
    box_w = shutil.get_terminal_size().columns if align == "center" else frames[0].width

    shown = 0
    out.write(HIDE_CURSOR)
    try:
        loop = 0
        while loops <= 0 or loop < loops:
            for frame, lines in zip(frames, rendered):
                out.write(HOME_CLEAR)
                for line in lines:
                    out.write(pad_ansi(line, box_w, align) + "\n")
                out.flush()
                shown += 1
                sleep(frame.duration / 1000)
            loop += 1
    finally:
        out.write(SHOW_CURSOR)
        out.flush()
    return shown
