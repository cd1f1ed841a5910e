"""
config.py

Optional YAML defaults for the command line.

Looked up at $GIF2AART_CONFIG, else ~/.config/gif2aart/config.yaml.
A missing file just means built-in defaults.

    converter:
      default_width: 80
      default_height: 24
      default_fps: 10
      default_method: block      # luminosity | block | edge | dither
      default_ratio: fill        # fill | fit | original
      default_chars: " .:-=+*#%@"
      use_colors: false
      http_timeout: 30
"""

from dataclasses import dataclass, fields
import logging
import os
from pathlib import Path
from typing import Optional

import yaml

from .errors import InvalidOptions
from .models import AspectRatio, Method

log = logging.getLogger(__name__)

ENV_VAR = "GIF2AART_CONFIG"
DEFAULT_CONFIG_PATH = "~/.config/gif2aart/config.yaml"


@dataclass
class ConverterConfig:
    default_width: int = 80
    default_height: int = 24
    default_fps: int = 10
    default_method: str = Method.BLOCK.value
    default_ratio: str = AspectRatio.FILL.value
    default_chars: Optional[str] = None
    use_colors: bool = False
    http_timeout: float = 30.0


def config_path() -> Path:
    return Path(os.environ.get(ENV_VAR) or DEFAULT_CONFIG_PATH).expanduser()


def _validate(cfg: ConverterConfig, path) -> ConverterConfig:
    for name in ("default_width", "default_height", "default_fps"):
        value = getattr(cfg, name)
        if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
            raise InvalidOptions(f"{path}: converter.{name} must be a positive integer, got {value!r}")
    if cfg.default_method not in {m.value for m in Method}:
        raise InvalidOptions(f"{path}: unknown converter.default_method {cfg.default_method!r}")
    if cfg.default_ratio not in {r.value for r in AspectRatio}:
        raise InvalidOptions(f"{path}: unknown converter.default_ratio {cfg.default_ratio!r}")
    if cfg.default_chars is not None and (not isinstance(cfg.default_chars, str) or not cfg.default_chars):
        raise InvalidOptions(f"{path}: converter.default_chars must be a non-empty string")
    if not isinstance(cfg.use_colors, bool):
        raise InvalidOptions(f"{path}: converter.use_colors must be true or false")
    if isinstance(cfg.http_timeout, bool) or not isinstance(cfg.http_timeout, (int, float)) or cfg.http_timeout <= 0:
        raise InvalidOptions(f"{path}: converter.http_timeout must be a positive number")
    return cfg


def load_config(path=None) -> ConverterConfig:
    path = Path(path).expanduser() if path else config_path()
    if not path.exists():
        log.debug("No config at %s, using defaults", path)
        return ConverterConfig()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise InvalidOptions(f"YAML parsing error in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidOptions(f"cannot read config {path}: {e}") from e

    section = data.get("converter", {}) if isinstance(data, dict) else None
    if not isinstance(section, dict):
        raise InvalidOptions(f"{path}: 'converter' must be a mapping")

    known = {f.name for f in fields(ConverterConfig)}
    for key in section:
        if key not in known:
            log.warning("Ignoring unknown config key converter.%s in %s", key, path)
    cfg = ConverterConfig(**{k: v for k, v in section.items() if k in known})
    log.debug("Loaded config: %s", path)
    return _validate(cfg, path)
