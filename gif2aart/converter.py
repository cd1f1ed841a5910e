"""
converter.py

Animated image -> list of OutputFrames.

    load -> composite -> resample -> glyph map -> assemble

Single pass, strictly in source order: compositing frame i needs the
canvas and disposal of frame i-1. Either every frame converts or the call
raises; there are no partial results.
"""

import logging
from typing import Callable, List, Optional

from .compositor import composite_all
from .errors import ConversionCancelled
from .glyphs import image_to_cells
from .loader import DEFAULT_TIMEOUT, load_animation
from .models import Animation, ConversionOptions, OutputFrame
from .resample import resample

log = logging.getLogger(__name__)

ProgressSink = Callable[[int, int, str], None]

PROGRESS_TOTAL = 100
SMALL_ANIMATION = 50  # below this many frames, report on every frame
REPORT_EVERY = 10


def frame_duration(delay: int, fps: int) -> int:
    """Milliseconds for a frame with `delay` in 1/100 s; 0 falls back to 1000 // fps."""
    if delay > 0:
        return delay * 10
    return max(1, 1000 // fps)


def _report(progress, current, message):
    log.debug("[%3d%%] %s", current, message)
    if progress is not None:
        progress(current, PROGRESS_TOTAL, message)


def _check_cancel(cancel, index, total):
    if cancel is not None and cancel.is_set():
        raise ConversionCancelled(f"conversion cancelled at frame {index + 1}/{total}")


def convert_animation(
    animation: Animation,
    options: ConversionOptions,
    progress: Optional[ProgressSink] = None,
    cancel=None,
) -> List[OutputFrame]:
    """Convert already decoded frames. Reports 10..90%; the caller owns 0 and 100."""
    total = len(animation.frames)
    _report(progress, 10, f"Processing {total} frames...")

    frames = []
    canvases = composite_all(animation.frames)
    for i, (raw, canvas) in enumerate(zip(animation.frames, canvases)):
        _check_cancel(cancel, i, total)
        if i % REPORT_EVERY == 0 or total < SMALL_ANIMATION:
            _report(progress, 10 + i * 80 // total, f"Converting frame {i + 1}/{total}...")

        resized = resample(canvas, options.width, options.height, options.ratio)
        frames.append(OutputFrame(
            width=options.width,
            height=options.height,
            cells=image_to_cells(resized, options),
            duration=frame_duration(raw.delay, options.fps),
        ))
    return frames


def convert_gif_to_frames(
    source: str,
    options: ConversionOptions,
    progress: Optional[ProgressSink] = None,
    cancel=None,
    timeout: float = DEFAULT_TIMEOUT,
) -> List[OutputFrame]:
    """
    Convert an animated image (file path or http/https URL) to glyph frames.

    Args:
        source: local path or URL
        options: validated ConversionOptions
        progress: optional sink called as progress(current, 100, message);
                  a sink with a fail(message) method is also told when
                  the conversion raises
        cancel: optional object with is_set() (e.g. threading.Event),
                checked before every frame
        timeout: HTTP timeout in seconds

    Raises:
        SourceUnavailable, DecodeFailure, ConversionCancelled
    """
    _report(progress, 0, "Loading GIF...")
    try:
        animation = load_animation(source, timeout=timeout)
        frames = convert_animation(animation, options, progress=progress, cancel=cancel)
    except Exception as e:
        fail = getattr(progress, "fail", None)
        if fail is not None:
            fail(f"Failed: {e}")
        raise
    _report(progress, PROGRESS_TOTAL, "Complete!")
    log.info("Converted %d frames from %s at %dx%d (%s)", len(frames), source,
             options.width, options.height, options.method.value)
    return frames


def import_gif(source: str, width: int, height: int, fps: int, method: str, ratio: str) -> List[OutputFrame]:
    """Shorthand with string options and no progress reporting."""
    return convert_gif_to_frames(
        source,
        ConversionOptions(width=width, height=height, fps=fps, method=method, ratio=ratio),
    )
