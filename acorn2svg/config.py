"""Configuration for acorn2svg.

Settings are read from a YAML file. Lookup order when no explicit path is
given:

1. ``$ACORN2SVG_CONFIG``
2. ``./acorn2svg.yaml``
3. ``~/.config/acorn2svg/config.yaml``

A missing file means defaults. Example::

    precision: 3
    embed_images: true
    font_faces: false
    log_level: INFO
"""

from __future__ import annotations

import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

from acorn2svg.exceptions import ConfigError

ENV_VAR = "ACORN2SVG_CONFIG"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Config:
    """Conversion settings.

    Attributes:
        precision: Decimal places rendered before trimming numbers (1-10).
        embed_images: Embed raster layers as data URIs instead of files.
        image_dir: Directory for re-encoded raster images; defaults to
            ``<output stem>_images`` next to the output file.
        font_faces: Emit ``<font-face>`` definitions for fonts in use.
        text_length: Emit ``textLength`` hints on simple text spans.
        prune_groups: Collapse attribute-less single-child groups.
        layer_ids: Give layer groups an ``id`` derived from the layer name.
        log_level: Logging level name.
    """

    precision: int = 4
    embed_images: bool = False
    image_dir: Path | None = None
    font_faces: bool = True
    text_length: bool = True
    prune_groups: bool = True
    layer_ids: bool = False
    log_level: str = "WARNING"

    @classmethod
    def default_paths(cls) -> list[Path]:
        paths = []
        env = os.environ.get(ENV_VAR)
        if env:
            paths.append(Path(env))
        paths.append(Path.cwd() / "acorn2svg.yaml")
        paths.append(Path.home() / ".config" / "acorn2svg" / "config.yaml")
        return paths

    @classmethod
    def load(cls, path: Path | None = None) -> Config:
        """Load configuration from ``path`` or the first default that exists.

        Raises:
            FileNotFoundError: An explicit ``path`` does not exist.
            ConfigError: The file is not valid YAML or has invalid values.
        """
        if path is not None:
            if not path.exists():
                raise FileNotFoundError(f"Config file not found: {path}")
            return cls.from_file(path)
        for candidate in cls.default_paths():
            if candidate.is_file():
                return cls.from_file(candidate)
        return cls()

    @classmethod
    def from_file(cls, path: Path) -> Config:
        try:
            data = yaml.safe_load(path.read_text(encoding="utf-8"))
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"{path}: expected a mapping at top level")
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Config:
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError(f"{unknown[0]}: unknown setting")

        values: dict[str, Any] = {}
        for key, value in data.items():
            values[key] = _validate(key, value)
        return cls(**values)

    def merged(self, **overrides: Any) -> Config:
        """Return a copy with every non-``None`` override applied."""
        changes = {k: _validate(k, v) for k, v in overrides.items() if v is not None}
        return replace(self, **changes)


def _validate(key: str, value: Any) -> Any:
    if key == "precision":
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"precision: expected integer, got {type(value).__name__}")
        if not 1 <= value <= 10:
            raise ConfigError("precision: must be between 1 and 10")
        return value
    if key == "image_dir":
        if value is None:
            return None
        if not isinstance(value, (str, Path)):
            raise ConfigError(f"image_dir: expected path, got {type(value).__name__}")
        return Path(value).expanduser()
    if key == "log_level":
        if not isinstance(value, str) or value.upper() not in LOG_LEVELS:
            raise ConfigError(f"log_level: must be one of {', '.join(LOG_LEVELS)}")
        return value.upper()
    if not isinstance(value, bool):
        raise ConfigError(f"{key}: expected boolean, got {type(value).__name__}")
    return value
