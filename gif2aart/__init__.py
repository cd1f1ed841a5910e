"""gif2aart - animated GIF to timed glyph frames."""

from .converter import convert_animation, convert_gif_to_frames, frame_duration, import_gif
from .errors import (
    ConversionCancelled,
    ConversionError,
    DecodeFailure,
    InvalidOptions,
    SourceUnavailable,
)
from .models import (
    Animation,
    AspectRatio,
    Cell,
    ColorMode,
    ConversionOptions,
    Disposal,
    Method,
    OutputFrame,
    RasterFrame,
)
from .progress import ProgressChannel, ProgressEvent

__version__ = "0.1.0"
