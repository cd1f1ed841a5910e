"""
resample.py

Scales a composited canvas onto the target grid with Lanczos filtering.
Whatever the aspect policy, the result is an RGBA image of exactly
width x height; letterbox padding is transparent.
"""

from PIL import Image

from .models import AspectRatio

TRANSPARENT = (0, 0, 0, 0)


def fit_size(src_w, src_h, box_w, box_h):
    """Largest size with the source proportions that fits inside the box."""
    scale = min(box_w / src_w, box_h / src_h)
    w = min(box_w, max(1, round(src_w * scale)))
    h = min(box_h, max(1, round(src_h * scale)))
    return w, h


def _centered(image, width, height):
    out = Image.new("RGBA", (width, height), TRANSPARENT)
    out.paste(image, ((width - image.width) // 2, (height - image.height) // 2))
    return out


def resample(image: Image.Image, width: int, height: int, ratio: AspectRatio = AspectRatio.FILL) -> Image.Image:
    image = image.convert("RGBA")

    if ratio is AspectRatio.FIT:
        w, h = fit_size(image.width, image.height, width, height)
        return _centered(image.resize((w, h), Image.LANCZOS), width, height)

    if ratio is AspectRatio.ORIGINAL:
        if image.size == (width, height):
            return image
        return _centered(image, width, height)

    return image.resize((width, height), Image.LANCZOS)
