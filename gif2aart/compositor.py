"""
compositor.py

Turns raw frames into full canvas-sized rasters.

The only state carried from frame to frame is the previous canvas plus that
frame's disposal. It lives in an immutable CompositeState that callers fold
over the frame list, so every step can be tested on its own.

Rules:
  - frame 0, or any frame after a RESTORE_BACKGROUND frame, is used as-is
    (placed on a fully transparent canvas, no blending)
  - otherwise every pixel with alpha > 0 overwrites the previous canvas,
    alpha == 0 leaves it alone
  - RESTORE_PREVIOUS behaves like DO_NOT_DISPOSE
  - the canvas keeps frame 0's bounding box; later frames are clipped to it
"""

from dataclasses import dataclass
import logging
from typing import Iterable, Iterator, Optional, Tuple

from PIL import Image

from .models import Disposal, RasterFrame

log = logging.getLogger(__name__)

TRANSPARENT = (0, 0, 0, 0)


@dataclass(frozen=True)
class CompositeState:
    canvas: Image.Image
    disposal: Disposal
    origin: Tuple[int, int]  # frame 0's (left, top) on the logical screen


def opaque_mask(image: Image.Image) -> Image.Image:
    """Binary mask: 255 wherever alpha is non-zero."""
    return image.getchannel("A").point(lambda a: 255 if a else 0)


def composite(state: Optional[CompositeState], frame: RasterFrame) -> CompositeState:
    if state is None:
        return CompositeState(
            canvas=frame.image.convert("RGBA"),
            disposal=frame.disposal,
            origin=(frame.left, frame.top),
        )

    offset = (frame.left - state.origin[0], frame.top - state.origin[1])
    if state.disposal is Disposal.RESTORE_BACKGROUND:
        canvas = Image.new("RGBA", state.canvas.size, TRANSPARENT)
        canvas.paste(frame.image, offset)
    else:
        canvas = state.canvas.copy()
        canvas.paste(frame.image, offset, opaque_mask(frame.image))

    log.debug("Composited %dx%d frame at %s (previous disposal %s)",
              frame.width, frame.height, offset, state.disposal.value)
    return CompositeState(canvas=canvas, disposal=frame.disposal, origin=state.origin)


def composite_all(frames: Iterable[RasterFrame]) -> Iterator[Image.Image]:
    """Yield the composited canvas of every frame, in source order."""
    state = None
    for frame in frames:
        state = composite(state, frame)
        yield state.canvas
