import pytest
from PIL import Image

from gif2aart.models import AspectRatio
from gif2aart.resample import fit_size, resample

RED = (255, 0, 0, 255)


@pytest.mark.parametrize("ratio", list(AspectRatio))
@pytest.mark.parametrize("src,dst", [((10, 10), (3, 7)), ((2, 2), (1, 1)), ((5, 40), (20, 4))])
def test_output_is_always_target_size(ratio, src, dst):
    out = resample(Image.new("RGBA", src, RED), dst[0], dst[1], ratio)
    assert out.size == dst
    assert out.mode == "RGBA"


def test_fill_stretches_everything():
    out = resample(Image.new("RGBA", (10, 2), RED), 4, 4, AspectRatio.FILL)
    assert out.getpixel((0, 0))[3] == 255
    assert out.getpixel((3, 3))[3] == 255


def test_fit_letterboxes_with_transparency():
    out = resample(Image.new("RGBA", (4, 2), RED), 4, 4, AspectRatio.FIT)
    assert out.getpixel((0, 0))[3] == 0
    assert out.getpixel((0, 3))[3] == 0
    assert out.getpixel((0, 1)) == RED
    assert out.getpixel((3, 2)) == RED


def test_original_centres_without_scaling():
    out = resample(Image.new("RGBA", (2, 2), RED), 4, 4, AspectRatio.ORIGINAL)
    assert out.getpixel((0, 0))[3] == 0
    assert out.getpixel((1, 1)) == RED
    assert out.getpixel((2, 2)) == RED
    assert out.getpixel((3, 3))[3] == 0


def test_original_crops_larger_sources():
    src = Image.new("RGBA", (6, 6), (0, 0, 0, 255))
    src.putpixel((3, 3), RED)
    out = resample(src, 2, 2, AspectRatio.ORIGINAL)
    # centre 2x2 window starts at (2, 2)
    assert out.getpixel((1, 1)) == RED


def test_fit_size():
    assert fit_size(4, 2, 4, 4) == (4, 2)
    assert fit_size(100, 1, 10, 10) == (10, 1)
    assert fit_size(1, 1, 3, 5) == (3, 3)
