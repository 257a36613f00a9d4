"""Per-run generation state.

A ``GenerationContext`` owns everything a conversion run accumulates: the
shadow and font caches, the sequence used for shadow-casting element ids,
layer ids already handed out, and the recoverable problems reported along
the way. It is threaded through every rendering call, so independent runs
never share state.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field

from acorn2svg.config import Config
from acorn2svg.decode import ValueDecoder
from acorn2svg.exceptions import ErrorKind
from acorn2svg.fonts.attributes import FontCache
from acorn2svg.images import ImageWriter
from acorn2svg.shadows import ShadowCache
from acorn2svg.svg.numbers import format_number
from acorn2svg.text.layout import LayoutManager, SimpleLayoutManager

logger = logging.getLogger(__name__)

_XML_ID_START = re.compile(r"^[A-Za-z_]")
_XML_ID_INVALID = re.compile(r"[^A-Za-z0-9_.-]+")


@dataclass(frozen=True)
class Diagnostic:
    """A recoverable problem met during conversion."""

    kind: ErrorKind
    message: str

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


@dataclass
class GenerationContext:
    config: Config = field(default_factory=Config)
    decoder: ValueDecoder = field(default_factory=ValueDecoder)
    layout: LayoutManager = field(default_factory=SimpleLayoutManager)
    images: ImageWriter | None = None
    shadows: ShadowCache | None = None
    fonts: FontCache = field(default_factory=FontCache)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    layer_count: int = 0
    image_count: int = 0
    _graphic_sequence: int = 0
    _layer_ids: set[str] = field(default_factory=set)

    def __post_init__(self) -> None:
        if self.shadows is None:
            self.shadows = ShadowCache(self.fmt)
        if self.images is None:
            self.images = ImageWriter(embed=True)

    def fmt(self, value: float, suffix: str | None = None) -> str:
        """Format a number with the configured precision."""
        return format_number(value, suffix, self.config.precision)

    def warn(self, kind: ErrorKind, message: str) -> None:
        """Record and log a recoverable problem."""
        self.diagnostics.append(Diagnostic(kind, message))
        logger.warning("%s", message)

    def next_graphic_id(self) -> str:
        """Sequential id for an element referenced by a shadow ``<use>``."""
        self._graphic_sequence += 1
        return f"graphic{self._graphic_sequence}"

    def layer_id(self, name: str) -> str | None:
        """Turn a layer name into a unique XML id, or ``None`` if empty."""
        base = _XML_ID_INVALID.sub("-", name.strip()).strip("-")
        if not base:
            return None
        if not _XML_ID_START.match(base):
            base = f"layer-{base}"
        candidate = base
        n = 1
        while candidate in self._layer_ids or re.fullmatch(r"(graphic|shadow)\d+", candidate):
            n += 1
            candidate = f"{base}-{n}"
        self._layer_ids.add(candidate)
        return candidate

    @property
    def warnings(self) -> list[Diagnostic]:
        return list(self.diagnostics)
