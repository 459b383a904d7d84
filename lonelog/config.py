"""
Highlighting configuration.

Values come from built-in defaults, then an optional YAML file, then
environment variables; later sources override earlier ones.

Example YAML:

    enable_editor_highlighting: true
    enable_reading_highlighting: false
    colors:
      action: "#3b82f6"
      tag: "#c2410c"
"""

import logging
import os
import re
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from lonelog.exceptions import ConfigError
from lonelog.notation.tokenizer import TokenType

logger = logging.getLogger(__name__)

ENV_COLOR_PREFIX = "LONELOG_COLOR_"
ENV_HIGHLIGHT = "LONELOG_HIGHLIGHT"

_color_regex = re.compile(r'^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')


def _validate_color(key: str, value: Any) -> str:
    if not isinstance(value, str) or not _color_regex.match(value.strip()):
        raise ConfigError(f"Invalid color for '{key}': {value!r} (expected #rgb or #rrggbb)")
    digits = value.strip()[1:].lower()
    if len(digits) == 3:
        digits = "".join(c * 2 for c in digits)
    return f"#{digits}"


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in ("true", "1", "yes", "on"):
        return True
    if isinstance(value, str) and value.strip().lower() in ("false", "0", "no", "off"):
        return False
    raise ConfigError(f"Invalid boolean for '{key}': {value!r}")


@dataclass
class ColorScheme:
    """Display color per highlighted token type."""

    action: str = "#3b82f6"       # blue
    question: str = "#8b5cf6"     # purple
    dice: str = "#22c55e"         # green
    consequence: str = "#ef4444"  # red
    result: str = "#ca8a04"       # yellow
    tag: str = "#c2410c"          # orange

    def color_for(self, token_type: TokenType) -> Optional[str]:
        """Color for a token type, None for plain text."""
        if token_type is TokenType.TEXT:
            return None
        return getattr(self, token_type.value)

    def updated(self, colors: Mapping[str, Any]) -> "ColorScheme":
        """Return a copy with some colors replaced."""
        known = {f.name for f in fields(self)}
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        for key, value in colors.items():
            if key not in known:
                raise ConfigError(f"Unknown color key '{key}'")
            values[key] = _validate_color(key, value)
        return ColorScheme(**values)


@dataclass
class LonelogConfig:
    """Highlighting toggles and colors."""

    enable_editor_highlighting: bool = True
    enable_reading_highlighting: bool = True
    colors: ColorScheme = field(default_factory=ColorScheme)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any],
                  base: Optional["LonelogConfig"] = None) -> "LonelogConfig":
        """Create config from a mapping, layered over ``base`` (defaults if None)."""
        config = base or cls()
        known = {"enable_editor_highlighting", "enable_reading_highlighting", "colors"}
        unknown = set(data) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")

        colors = data.get("colors") or {}
        if not isinstance(colors, Mapping):
            raise ConfigError("'colors' must be a mapping of token type to color")

        return cls(
            enable_editor_highlighting=_parse_bool(
                "enable_editor_highlighting",
                data.get("enable_editor_highlighting", config.enable_editor_highlighting),
            ),
            enable_reading_highlighting=_parse_bool(
                "enable_reading_highlighting",
                data.get("enable_reading_highlighting", config.enable_reading_highlighting),
            ),
            colors=config.colors.updated(colors),
        )

    @classmethod
    def from_yaml(cls, path: Union[str, Path],
                  base: Optional["LonelogConfig"] = None) -> "LonelogConfig":
        """Load config from a YAML file.

        Raises:
            ConfigError: If the file cannot be read or holds invalid values
        """
        path = Path(path)
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Cannot read config file {path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing YAML file {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file {path} must contain a mapping")

        logger.debug("Loaded highlight config from %s", path)
        return cls.from_dict(data, base=base)

    def with_env(self, environ: Optional[Mapping[str, str]] = None) -> "LonelogConfig":
        """Apply LONELOG_COLOR_<TYPE> and LONELOG_HIGHLIGHT overrides."""
        environ = os.environ if environ is None else environ
        data: Dict[str, Any] = {}

        colors = {
            key[len(ENV_COLOR_PREFIX):].lower(): value
            for key, value in environ.items()
            if key.startswith(ENV_COLOR_PREFIX)
        }
        if colors:
            data["colors"] = colors

        if ENV_HIGHLIGHT in environ:
            enabled = _parse_bool(ENV_HIGHLIGHT, environ[ENV_HIGHLIGHT])
            data["enable_editor_highlighting"] = enabled
            data["enable_reading_highlighting"] = enabled

        if not data:
            return self
        logger.debug("Applying highlight overrides from environment: %s", sorted(data))
        return LonelogConfig.from_dict(data, base=self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "enable_editor_highlighting": self.enable_editor_highlighting,
            "enable_reading_highlighting": self.enable_reading_highlighting,
            "colors": {f.name: getattr(self.colors, f.name) for f in fields(self.colors)},
        }


def load_config(path: Optional[Union[str, Path]] = None,
                environ: Optional[Mapping[str, str]] = None) -> LonelogConfig:
    """Resolve the effective config: defaults, then ``path``, then environment."""
    config = LonelogConfig()
    if path is not None:
        config = LonelogConfig.from_yaml(path, base=config)
    return config.with_env(environ)
