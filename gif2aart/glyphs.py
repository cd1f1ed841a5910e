"""
glyphs.py

Maps RGBA samples to (glyph, foreground, background) cells.

Every method is a brightness ramp ordered sparse -> dense and indexed the
same way: index = lum * len(ramp) // 256, clamped to the last glyph.
"edge" and "dither" are plain brightness bands, not edge detection or
error diffusion.
"""

from typing import List, Optional

from PIL import Image

from .models import Cell, ColorMode, ConversionOptions, Method

# ---------------- ramps ----------------
LUMINOSITY_RAMP = " ·`.,:;-~=+*oxOX#%&@█"
BLOCK_RAMP = " ░▒▓█"
EDGE_RAMP = " ·─━"
DITHER_RAMP = " ·:░▒▓█"

RAMPS = {
    Method.LUMINOSITY: LUMINOSITY_RAMP,
    Method.BLOCK: BLOCK_RAMP,
    Method.EDGE: EDGE_RAMP,
    Method.DITHER: DITHER_RAMP,
}

NO_BACKGROUND = "#000000"
TRANSPARENT_FG = "#FFFFFF"
ALPHA_CUTOFF = 128
GRAY_LEVELS = 16


# ---------------- brightness ----------------
def luminosity(r: int, g: int, b: int) -> int:
    """floor(0.299 R + 0.587 G + 0.114 B), computed exactly."""
    return (299 * r + 587 * g + 114 * b) // 1000


def quantize_gray(lum: int) -> int:
    """Snap to one of 16 gray levels (0, 17, ..., 255)."""
    return (lum // GRAY_LEVELS) * 17


def to_hex(r: int, g: int, b: int) -> str:
    return f"#{r:02X}{g:02X}{b:02X}"


# ---------------- glyph selection ----------------
def ramp_for(method: Method, chars: Optional[str] = None) -> str:
    # a custom ramp only replaces the luminosity ramp
    if method is Method.LUMINOSITY and chars:
        return chars
    return RAMPS[method]


def ramp_index(lum: int, length: int) -> int:
    return min(lum * length // 256, length - 1)


def glyph_for(method: Method, lum: int, chars: Optional[str] = None) -> str:
    ramp = ramp_for(method, chars)
    return ramp[ramp_index(lum, len(ramp))]


# ---------------- cells ----------------
def convert_pixel(r, g, b, a, options: ConversionOptions) -> Cell:
    if a < ALPHA_CUTOFF:
        return Cell(" ", TRANSPARENT_FG, NO_BACKGROUND)

    lum = luminosity(r, g, b)
    char = glyph_for(options.method, lum, options.chars)
    if options.color_mode is ColorMode.FULL_RGB:
        fg = to_hex(r, g, b)
    else:
        gray = quantize_gray(lum)
        fg = to_hex(gray, gray, gray)
    return Cell(char, fg, NO_BACKGROUND)


def image_to_cells(image: Image.Image, options: ConversionOptions) -> List[List[Cell]]:
    """Row-major cell grid with one cell per pixel of `image`."""
    rgba = image.convert("RGBA")
    px = rgba.load()
    rows = []
    for y in range(rgba.height):
        line = []
        for x in range(rgba.width):
            r, g, b, a = px[x, y]
            line.append(convert_pixel(r, g, b, a, options))
        rows.append(line)
    return rows
