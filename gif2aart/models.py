"""
models.py

Plain data passed between the pipeline stages:

    RasterFrame   raw decoded frame (own bounding box, disposal, delay)
    Animation     every raw frame of a source plus its loop count
    ConversionOptions
    Cell / OutputFrame   the glyph grid handed back to the caller
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from PIL import Image

from .errors import InvalidOptions


# ---------------- enums ----------------
class Disposal(Enum):
    """What happens to the canvas after a frame has been shown."""
    NONE = "none"
    DO_NOT_DISPOSE = "do_not_dispose"
    RESTORE_BACKGROUND = "restore_background"
    RESTORE_PREVIOUS = "restore_previous"


class Method(Enum):
    LUMINOSITY = "luminosity"
    BLOCK = "block"
    EDGE = "edge"
    DITHER = "dither"


class AspectRatio(Enum):
    FILL = "fill"          # stretch to the grid
    FIT = "fit"            # keep proportions, letterbox
    ORIGINAL = "original"  # native size, centred


class ColorMode(Enum):
    MONOCHROME = "mono"
    FULL_RGB = "rgb"


def _coerce(enum_cls, value, name):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(str(value).lower())
    except ValueError:
        choices = ", ".join(m.value for m in enum_cls)
        raise InvalidOptions(f"unknown {name} {value!r} (expected one of: {choices})") from None


def _positive_int(value, name):
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidOptions(f"{name} must be a positive integer, got {value!r}")
    return value


# ---------------- source side ----------------
@dataclass
class RasterFrame:
    """One raw frame as stored in the source, before compositing.

    `image` is RGBA and only covers the frame's own bounding box, placed at
    (`left`, `top`) on the logical screen. `delay` is in 1/100 s.
    """
    image: Image.Image
    left: int = 0
    top: int = 0
    disposal: Disposal = Disposal.NONE
    delay: int = 0

    @property
    def width(self) -> int:
        return self.image.width

    @property
    def height(self) -> int:
        return self.image.height

    @property
    def size(self):
        return self.image.size


@dataclass
class Animation:
    frames: List[RasterFrame]
    loop_count: int = -1  # 0 = forever, -1 = no loop extension
    screen_width: int = 0
    screen_height: int = 0

    @property
    def canvas_size(self):
        return self.frames[0].size


# ---------------- options ----------------
@dataclass
class ConversionOptions:
    """Target grid and glyph mapping settings. Validated on creation;
    string values for the enum fields are accepted and coerced."""
    width: int
    height: int
    fps: int = 10
    method: Method = Method.LUMINOSITY
    ratio: AspectRatio = AspectRatio.FILL
    chars: Optional[str] = None
    color_mode: ColorMode = ColorMode.MONOCHROME

    def __post_init__(self):
        _positive_int(self.width, "width")
        _positive_int(self.height, "height")
        _positive_int(self.fps, "fps")
        self.method = _coerce(Method, self.method, "method")
        self.ratio = _coerce(AspectRatio, self.ratio, "aspect ratio")
        self.color_mode = _coerce(ColorMode, self.color_mode, "color mode")
        if self.chars is not None and not self.chars:
            raise InvalidOptions("custom character ramp must not be empty")

    @property
    def use_colors(self) -> bool:
        return self.color_mode is ColorMode.FULL_RGB


# ---------------- output side ----------------
@dataclass(frozen=True)
class Cell:
    char: str
    fg: str
    bg: str


@dataclass
class OutputFrame:
    width: int
    height: int
    cells: List[List[Cell]] = field(default_factory=list)
    duration: int = 100  # milliseconds

    def row_text(self, y: int) -> str:
        return "".join(cell.char for cell in self.cells[y])

    def text(self) -> str:
        return "\n".join(self.row_text(y) for y in range(self.height))
