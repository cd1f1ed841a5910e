import pytest
from PIL import Image


def save_gif(path, colors, size=(4, 4), duration=100, disposal=0, loop=0):
    """Write an animated GIF with one solid frame per color."""
    frames = [Image.new("RGB", size, c) for c in colors]
    kwargs = {"save_all": True, "append_images": frames[1:], "duration": duration, "disposal": disposal}
    if loop is not None:
        kwargs["loop"] = loop
    frames[0].save(path, format="GIF", **kwargs)
    return path


@pytest.fixture
def gif_factory(tmp_path):
    counter = {"n": 0}

    def make(colors, **kwargs):
        counter["n"] += 1
        return str(save_gif(tmp_path / f"anim_{counter['n']}.gif", colors, **kwargs))

    return make


@pytest.fixture
def white_gif(gif_factory):
    return gif_factory([(255, 255, 255)], size=(2, 2))


@pytest.fixture
def three_frame_gif(gif_factory):
    return gif_factory([(255, 0, 0), (0, 255, 0), (0, 0, 255)], size=(8, 6), duration=[100, 200, 0])


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("GIF2AART_CONFIG", str(tmp_path / "no-such-config.yaml"))
