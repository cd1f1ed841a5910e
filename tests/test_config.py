import pytest

from gif2aart.config import ConverterConfig, config_path, load_config
from gif2aart.errors import InvalidOptions


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "nope.yaml") == ConverterConfig()


def test_env_var_selects_path(tmp_path, monkeypatch):
    path = tmp_path / "custom.yaml"
    monkeypatch.setenv("GIF2AART_CONFIG", str(path))
    assert config_path() == path


def test_values_are_read(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "converter:\n"
        "  default_width: 40\n"
        "  default_method: edge\n"
        "  default_chars: ' .oO'\n"
        "  use_colors: true\n"
        "  something_else: 1\n",
        encoding="utf-8",
    )
    cfg = load_config(path)
    assert cfg.default_width == 40
    assert cfg.default_height == 24
    assert cfg.default_method == "edge"
    assert cfg.default_chars == " .oO"
    assert cfg.use_colors is True


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("", encoding="utf-8")
    assert load_config(path) == ConverterConfig()


@pytest.mark.parametrize("body", [
    "converter:\n  default_width: 0\n",
    "converter:\n  default_method: sobel\n",
    "converter:\n  default_ratio: zoom\n",
    "converter:\n  http_timeout: -1\n",
    "converter: [1, 2]\n",
    "converter: {default_width: [\n",
])
def test_invalid_values(tmp_path, body):
    path = tmp_path / "config.yaml"
    path.write_text(body, encoding="utf-8")
    with pytest.raises(InvalidOptions):
        load_config(path)


def test_unreadable_path_is_invalid(tmp_path):
    with pytest.raises(InvalidOptions, match="cannot read config"):
        load_config(tmp_path)


def test_undecodable_file_is_invalid(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_bytes(b"converter:\n  default_chars: '\xff\xfe'\n")
    with pytest.raises(InvalidOptions):
        load_config(path)
