"""
aart.py

Reads and writes the .aart JSON container:

    {
      "version": "1.0",
      "metadata": {"title", "created", "modified", "source"},
      "canvas": {"width", "height"},
      "frames": [{"index", "duration", "cells": [[{"char", "fg", "bg"}]]}]
    }

Every frame's grid must match the canvas size.
"""

from datetime import datetime
import json
import logging
from pathlib import Path
from typing import List

from .errors import DecodeFailure, SourceUnavailable
from .models import Cell, OutputFrame

log = logging.getLogger(__name__)

FORMAT_VERSION = "1.0"


def _timestamp() -> str:
    return datetime.now().astimezone().isoformat(timespec="seconds")


def to_aart_dict(frames: List[OutputFrame], title: str = "", source: str = "converted") -> dict:
    if not frames:
        raise ValueError("no frames to save")

    now = _timestamp()
    return {
        "version": FORMAT_VERSION,
        "metadata": {"title": title, "created": now, "modified": now, "source": source},
        "canvas": {"width": frames[0].width, "height": frames[0].height},
        "frames": [
            {
                "index": i,
                "duration": frame.duration,
                "cells": [
                    [{"char": c.char, "fg": c.fg, "bg": c.bg} for c in row]
                    for row in frame.cells
                ],
            }
            for i, frame in enumerate(frames)
        ],
    }


def save_frames(frames: List[OutputFrame], path, title=None, source="converted") -> Path:
    path = Path(path).expanduser()
    data = to_aart_dict(frames, title=title if title is not None else path.name, source=source)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
    log.info("Saved %d frames to %s", len(frames), path)
    return path


def _cell_from_dict(c, where) -> Cell:
    if not isinstance(c, dict):
        raise DecodeFailure(f"{where}: cell is not an object")
    return Cell(c.get("char", " "), c.get("fg", ""), c.get("bg", ""))


def _frame_from_dict(raw, i, width, height) -> OutputFrame:
    if not isinstance(raw, dict):
        raise DecodeFailure(f"frame {i}: not an object")
    rows = raw.get("cells", [])
    if not isinstance(rows, list) or len(rows) != height:
        got = len(rows) if isinstance(rows, list) else type(rows).__name__
        raise DecodeFailure(f"frame {i}: wrong height {got}, expected {height}")
    cells = []
    for y, row in enumerate(rows):
        if not isinstance(row, list) or len(row) != width:
            got = len(row) if isinstance(row, list) else type(row).__name__
            raise DecodeFailure(f"frame {i}, row {y}: wrong width {got}, expected {width}")
        cells.append([_cell_from_dict(c, f"frame {i}, row {y}, col {x}") for x, c in enumerate(row)])

    duration = raw.get("duration")
    if not isinstance(duration, int) or isinstance(duration, bool):
        raise DecodeFailure(f"frame {i}: duration must be an integer, got {duration!r}")
    if duration <= 0:
        raise DecodeFailure(f"frame {i}: duration must be positive, got {duration}")
    return OutputFrame(width=width, height=height, cells=cells, duration=duration)


def frames_from_dict(data: dict) -> List[OutputFrame]:
    try:
        width = int(data["canvas"]["width"])
        height = int(data["canvas"]["height"])
        raw_frames = data["frames"]
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeFailure(f"malformed .aart data: {e}") from e
    if width <= 0 or height <= 0:
        raise DecodeFailure(f"invalid canvas dimensions: {width}x{height}")
    if not isinstance(raw_frames, list):
        raise DecodeFailure(f"frames must be a list, got {type(raw_frames).__name__}")

    return [_frame_from_dict(raw, i, width, height) for i, raw in enumerate(raw_frames)]


def load_frames(path) -> List[OutputFrame]:
    path = Path(path).expanduser()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise SourceUnavailable(f"failed to read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise DecodeFailure(f"failed to parse .aart file {path}: {e}") from e
    return frames_from_dict(data)
