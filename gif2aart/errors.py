"""
errors.py

Typed failures raised by the converter. Every error aborts the whole
conversion; callers decide whether to retry or how to report it.
"""


class ConversionError(Exception):
    """Base class for everything the converter raises on purpose."""


class SourceUnavailable(ConversionError):
    """The file is missing or unreadable, or the URL could not be fetched."""


class DecodeFailure(ConversionError):
    """The bytes are not a decodable (animated) image."""


class InvalidOptions(ConversionError):
    """Conversion options or config values are out of range."""


class ConversionCancelled(ConversionError):
    """The caller asked the conversion to stop between frames."""
