"""Document model shared by the conversion stages.

Layer records come from the store, shape records from shape-layer property
lists. All records are immutable once built; the only mutable state of a
conversion run lives in ``acorn2svg.context.GenerationContext``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, Flag, auto
from typing import NamedTuple, Union


class Point(NamedTuple):
    x: float
    y: float


class Size(NamedTuple):
    width: float
    height: float


class Rect(NamedTuple):
    x: float
    y: float
    width: float
    height: float

    @property
    def origin(self) -> Point:
        return Point(self.x, self.y)

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)


ZERO_RECT = Rect(0.0, 0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Color:
    """An sRGB color with alpha, components in [0, 1]."""

    red: float
    green: float
    blue: float
    alpha: float = 1.0


BLACK = Color(0.0, 0.0, 0.0, 1.0)


# ---------------------------------------------------------------------------
# Layers
# ---------------------------------------------------------------------------

SHAPE_LAYER_UTI = "com.flyingmeat.acorn.shapelayer"

LayerID = Union[bytes, str]


@dataclass(frozen=True)
class LayerRecord:
    """One flat layer row as yielded by a record store."""

    id: LayerID
    parent_id: LayerID | None
    uti: str
    name: str = ""
    visible: bool = True
    frame: Rect = ZERO_RECT


@dataclass
class LayerNode:
    """A layer in the document hierarchy.

    Only the synthetic root has ``id=None``. Children keep the store's
    sequence order.
    """

    id: LayerID | None
    name: str
    uti: str | None = None
    frame: Rect = ZERO_RECT
    visible: bool = True
    children: list[LayerNode] = field(default_factory=list)

    @property
    def is_root(self) -> bool:
        return self.id is None

    @property
    def is_shape_layer(self) -> bool:
        return self.uti == SHAPE_LAYER_UTI

    def walk(self):
        """Yield this node and its descendants depth-first."""
        yield self
        for child in self.children:
            yield from child.walk()


# ---------------------------------------------------------------------------
# Path operations
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MoveTo:
    point: Point


@dataclass(frozen=True)
class LineTo:
    point: Point


@dataclass(frozen=True)
class CurveTo:
    control1: Point
    control2: Point
    point: Point


@dataclass(frozen=True)
class ClosePath:
    pass


PathOp = Union[MoveTo, LineTo, CurveTo, ClosePath]


# ---------------------------------------------------------------------------
# Fonts and text
# ---------------------------------------------------------------------------


class FontTraits(Flag):
    NONE = 0
    ITALIC = auto()
    BOLD = auto()
    EXPANDED = auto()
    CONDENSED = auto()


class FontClass(str, Enum):
    """Font family classification (the high bits of AppKit symbolic traits)."""

    UNKNOWN = "unknown"
    OLDSTYLE_SERIFS = "oldstyle-serifs"
    TRANSITIONAL_SERIFS = "transitional-serifs"
    MODERN_SERIFS = "modern-serifs"
    CLARENDON_SERIFS = "clarendon-serifs"
    SLAB_SERIFS = "slab-serifs"
    FREEFORM_SERIFS = "freeform-serifs"
    SANS_SERIF = "sans-serif"
    ORNAMENTALS = "ornamentals"
    SCRIPTS = "scripts"
    SYMBOLIC = "symbolic"

    @property
    def is_serif(self) -> bool:
        return self in (
            FontClass.OLDSTYLE_SERIFS,
            FontClass.TRANSITIONAL_SERIFS,
            FontClass.MODERN_SERIFS,
            FontClass.CLARENDON_SERIFS,
            FontClass.SLAB_SERIFS,
        )


@dataclass(frozen=True)
class FontMetrics:
    """Font-wide metrics in font units (see ``acorn2svg.fonts.metrics``)."""

    units_per_em: int = 1000
    ascent: float = 800.0
    descent: float = -200.0
    cap_height: float = 700.0
    x_height: float = 500.0
    italic_angle: float = 0.0
    underline_position: float = -100.0
    underline_thickness: float = 50.0
    default_advance: float = 600.0
    advances: dict[str, float] = field(default_factory=dict, compare=False, hash=False)

    def advance_for(self, char: str) -> float:
        return self.advances.get(char, self.default_advance)


@dataclass(frozen=True)
class FontDescriptor:
    """A concrete font at a point size.

    ``weight`` uses the AppKit scale: 0..15 with 5 as the regular weight.
    """

    name: str
    family: str
    size: float = 12.0
    weight: int = 5
    traits: FontTraits = FontTraits.NONE
    family_class: FontClass = FontClass.UNKNOWN
    fixed_pitch: bool = False
    metrics: FontMetrics | None = field(default=None, compare=False, hash=False)


@dataclass(frozen=True)
class FontAttributes:
    """SVG font properties derived from a font, independent of its size."""

    style: str | None
    weight: str
    stretch: str | None
    family: str

    def items(self) -> list[tuple[str, str]]:
        """Attribute name/value pairs in emission order."""
        pairs = [
            ("font-style", self.style),
            ("font-weight", self.weight),
            ("font-stretch", self.stretch),
            ("font-family", self.family),
        ]
        return [(k, v) for k, v in pairs if v is not None]


@dataclass(frozen=True)
class TextRun:
    """A character range with uniform font and color."""

    start: int
    length: int
    font: FontDescriptor | None = None
    color: Color | None = None

    @property
    def stop(self) -> int:
        return self.start + self.length


@dataclass(frozen=True)
class RichText:
    string: str
    runs: tuple[TextRun, ...] = ()


@dataclass(frozen=True)
class LineFragment:
    """A laid-out line: its rectangle (top-down) and the glyphs it holds."""

    rect: Rect
    glyphs: range


@dataclass
class TextSpan:
    """A positioned piece of text, one per (run x line fragment)."""

    text: str
    font: FontDescriptor | None
    color: Color | None
    x: list[float]
    y: list[float]
    text_length: float | None = None

    @property
    def anchored(self) -> bool:
        """True when one anchor position covers the whole span."""
        return len(self.x) == 1


# ---------------------------------------------------------------------------
# Shapes
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ShadowDescriptor:
    """The parameters that identify one reusable drop-shadow filter."""

    color: Color
    blur_radius: float


@dataclass(frozen=True)
class Shadow:
    descriptor: ShadowDescriptor
    offset: Size = Size(0.0, 0.0)


@dataclass(frozen=True)
class Fill:
    color: Color | None


@dataclass(frozen=True)
class Stroke:
    color: Color | None
    width: float
    line_join: int | None = None


@dataclass(frozen=True)
class Group:
    children: tuple[ShapeRecord, ...] = ()


@dataclass(frozen=True)
class Rectangle:
    bounds: Rect
    corner_radius: float | None = None
    fill: Fill | None = None
    stroke: Stroke | None = None
    shadow: Shadow | None = None


@dataclass(frozen=True)
class TextArea:
    bounds: Rect
    text: RichText


@dataclass(frozen=True)
class PathShape:
    bounds: Rect
    path: tuple[PathOp, ...]
    fill: Fill | None = None
    stroke: Stroke | None = None
    shadow: Shadow | None = None
    kind: str = "Line"


ShapeRecord = Union[Group, Rectangle, TextArea, PathShape]
