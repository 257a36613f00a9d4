"""Shape-layer graphics.

A shape layer's property list holds a ``TSShapeLayer`` dictionary whose
``GraphicsList`` contains one dictionary per graphic. ``parse_graphic``
turns those dictionaries into shape records and ``render_shape`` draws the
records into the output tree, one element (plus an optional shadow
``<use>``) per graphic.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from acorn2svg.context import GenerationContext
from acorn2svg.exceptions import DecodeError, ErrorKind, MalformedInputError
from acorn2svg.geometry import Frame, bool_for_key, float_for_key, parse_rect, parse_size
from acorn2svg.model import (
    ZERO_RECT,
    Fill,
    Group,
    PathShape,
    Rectangle,
    Shadow,
    ShadowDescriptor,
    ShapeRecord,
    Size,
    Stroke,
    TextArea,
)
from acorn2svg.paint import MIN_STROKE_WIDTH, apply_fill_stroke, apply_paint, parse_line_join
from acorn2svg.paths import encode_path
from acorn2svg.shadows import MIN_SHADOW_ALPHA, add_shadow
from acorn2svg.svg.numbers import format_numbers
from acorn2svg.svg.tree import Element
from acorn2svg.text.flatten import flatten_text

logger = logging.getLogger(__name__)

# Corner radii at or below this draw square corners
MIN_CORNER_RADIUS = 1e-5

_COMMON_KEYS = frozenset(
    {
        "Class",
        "AntiAlias",
        "BlendMode",
        "Bounds",
        "CornerRadius",
        "CustomStrokeStyleDash",
        "CustomStrokeStyleGap",
        "DrawsFill",
        "DrawsStroke",
        "FillColor",
        "HasCornerRadius",
        "HasShadow",
        "LineJoinStyle",
        "RotationAngle",
        "ShadowBlurRadius",
        "ShadowColor",
        "ShadowOffset",
        "StrokeColor",
        "StrokeStyle",
    }
)

KNOWN_KEYS = {
    "TSShapeLayer": frozenset({"class", "GraphicsList", "compositingMode", "layerName", "opacity", "visible"}),
    "Rectangle": _COMMON_KEYS | {"GradientConfig", "StrokeLineWidth"},
    "TextArea": _COMMON_KEYS | {"KeepBoundsWhenEditing", "RTFD", "TextStrokeWidth"},
    "ArrowShape": _COMMON_KEYS | {"EndPoint", "Path", "PointLength", "StartPoint", "StrokeLineWidth"},
    "Line": _COMMON_KEYS | {"FMPath", "Path", "StrokeLineWidth"},
}


def graphic_class(obj: Mapping[str, Any]) -> str | None:
    return obj.get("Class") or obj.get("class")


def warn_unknown_keys(obj: Mapping[str, Any], cls: str, ctx: GenerationContext) -> None:
    allowed = KNOWN_KEYS[cls]
    for key in obj:
        if key not in allowed:
            ctx.warn(ErrorKind.UNKNOWN_FEATURE, f'Unknown key "{key}" (in {cls}), ignoring')


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------


def parse_graphic(obj: Any, ctx: GenerationContext) -> ShapeRecord | None:
    """Build the shape record for one graphic dictionary.

    Returns ``None`` for graphics that draw nothing and for unknown classes
    (which are reported as warnings).

    Raises:
        MalformedInputError: A required value is missing or unparseable.
    """
    if not isinstance(obj, Mapping):
        raise MalformedInputError("Shape graphic is not a dictionary", {"type": type(obj).__name__})

    cls = graphic_class(obj)
    match cls:
        case "TSShapeLayer":
            warn_unknown_keys(obj, cls, ctx)
            graphics = obj.get("GraphicsList") or []
            children = (parse_graphic(child, ctx) for child in graphics)
            return Group(tuple(child for child in children if child is not None))
        case "Rectangle":
            warn_unknown_keys(obj, cls, ctx)
            return _parse_rectangle(obj, ctx)
        case "TextArea":
            warn_unknown_keys(obj, cls, ctx)
            return _parse_text_area(obj, ctx)
        case "ArrowShape" | "Line":
            warn_unknown_keys(obj, cls, ctx)
            return _parse_path_shape(obj, cls, ctx)
        case _:
            ctx.warn(ErrorKind.UNKNOWN_FEATURE, f'Unknown shape class "{cls}", ignoring')
            return None


def _decode_color(obj: Mapping[str, Any], key: str, what: str, ctx: GenerationContext):
    value = obj.get(key)
    if value is None:
        ctx.warn(ErrorKind.UNKNOWN_FEATURE, f"Unknown {what}: no {key} given")
        return None
    try:
        return ctx.decoder.color(value)
    except DecodeError as e:
        ctx.warn(ErrorKind.UNKNOWN_FEATURE, f"Unknown {what}: {e}")
        return None


def _parse_paint(obj: Mapping[str, Any], ctx: GenerationContext) -> tuple[Fill | None, Stroke | None]:
    fill = None
    if bool_for_key(obj, "DrawsFill"):
        fill = Fill(_decode_color(obj, "FillColor", "paint", ctx))

    stroke = None
    if bool_for_key(obj, "DrawsStroke"):
        width = float_for_key(obj, "StrokeLineWidth")
        if width > MIN_STROKE_WIDTH:
            color = _decode_color(obj, "StrokeColor", "paint", ctx)
            stroke = Stroke(color, width, parse_line_join(obj.get("LineJoinStyle")))
        else:
            stroke = Stroke(None, width)
    return fill, stroke


def parse_shadow(obj: Mapping[str, Any], ctx: GenerationContext) -> Shadow | None:
    """Read a graphic's drop shadow, or ``None`` when it casts none."""
    if not bool_for_key(obj, "HasShadow"):
        return None
    color = _decode_color(obj, "ShadowColor", "shadow paint", ctx)
    if color is None or color.alpha < MIN_SHADOW_ALPHA:
        return None
    blur = float_for_key(obj, "ShadowBlurRadius")
    offset = Size(0.0, 0.0)
    if obj.get("ShadowOffset") is not None:
        offset = parse_size(obj["ShadowOffset"])
    return Shadow(ShadowDescriptor(color, blur), offset)


def _parse_rectangle(obj: Mapping[str, Any], ctx: GenerationContext) -> Rectangle | None:
    fill, stroke = _parse_paint(obj, ctx)
    if fill is None and stroke is None:
        return None
    radius = None
    if bool_for_key(obj, "HasCornerRadius"):
        radius = float_for_key(obj, "CornerRadius")
    return Rectangle(
        bounds=parse_rect(obj.get("Bounds")),
        corner_radius=radius,
        fill=fill,
        stroke=stroke,
        shadow=parse_shadow(obj, ctx),
    )


def _parse_text_area(obj: Mapping[str, Any], ctx: GenerationContext) -> TextArea:
    bounds = parse_rect(obj.get("Bounds"))
    if obj.get("RTFD") is None:
        raise MalformedInputError("TextArea has no RTFD contents")
    try:
        text = ctx.decoder.rich_text(obj["RTFD"])
    except DecodeError as e:
        raise MalformedInputError(f"Cannot read TextArea contents: {e}") from e
    return TextArea(bounds, text)


def _parse_path_shape(obj: Mapping[str, Any], cls: str, ctx: GenerationContext) -> PathShape | None:
    fill, stroke = _parse_paint(obj, ctx)
    if fill is None and stroke is None:
        return None
    if obj.get("Path") is None:
        raise MalformedInputError(f"{cls} has no Path")
    try:
        path = ctx.decoder.path(obj["Path"])
    except DecodeError as e:
        raise MalformedInputError(f"Cannot read {cls} path: {e}") from e
    bounds = parse_rect(obj["Bounds"]) if obj.get("Bounds") is not None else ZERO_RECT
    return PathShape(
        bounds=bounds,
        path=tuple(path),
        fill=fill,
        stroke=stroke,
        shadow=parse_shadow(obj, ctx),
        kind=cls,
    )


def iter_text_areas(shape: ShapeRecord | None):
    """Yield the text areas in a shape record tree."""
    match shape:
        case Group(children=children):
            for child in children:
                yield from iter_text_areas(child)
        case TextArea():
            yield shape


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------


def render_shape(shape: ShapeRecord, frame: Frame, parent: Element, ctx: GenerationContext) -> None:
    """Append the elements drawing ``shape`` to ``parent``."""
    match shape:
        case Group(children=children):
            group = parent.append(Element("g"))
            for child in children:
                render_shape(child, frame, group, ctx)
        case Rectangle():
            _render_rectangle(shape, frame, parent, ctx)
        case TextArea():
            _render_text_area(shape, frame, parent, ctx)
        case PathShape():
            _render_path_shape(shape, frame, parent, ctx)
        case _:
            raise TypeError(f"Not a shape record: {shape!r}")


def _render_rectangle(shape: Rectangle, frame: Frame, parent: Element, ctx: GenerationContext) -> None:
    if shape.fill is None and shape.stroke is None:
        return
    rect = Element("rect")
    add_shadow(parent, rect, shape.shadow, ctx)
    parent.append(rect)

    b = shape.bounds
    rect.set("x", ctx.fmt(frame.translate_x(b.x)))
    rect.set("y", ctx.fmt(frame.translate_y(b.y + b.height)))
    rect.set("width", ctx.fmt(b.width))
    rect.set("height", ctx.fmt(b.height))
    if shape.corner_radius is not None and shape.corner_radius > MIN_CORNER_RADIUS:
        rect.set("rx", ctx.fmt(shape.corner_radius))
        rect.set("ry", ctx.fmt(shape.corner_radius))

    apply_fill_stroke(rect, shape.fill, shape.stroke, ctx.fmt)


def _render_text_area(shape: TextArea, frame: Frame, parent: Element, ctx: GenerationContext) -> None:
    text = parent.append(Element("text"))
    b = shape.bounds
    x = ctx.fmt(frame.translate_x(b.x))
    y = ctx.fmt(frame.translate_y(b.y + b.height))
    text.set("transform", f"translate({x} {y})")

    # glyph positions are measured from the container's top edge already
    layout = ctx.layout.layout(shape.text, b.size)
    for span in flatten_text(shape.text, layout, ctx.config.text_length):
        tspan = text.append(Element("tspan"))
        tspan.text = span.text
        if span.font is not None:
            ctx.fonts.apply(tspan, span.font, ctx.fmt)
        if span.color is not None:
            apply_paint(tspan, "fill", "fill-opacity", span.color, ctx.fmt)
        tspan.set("x", format_numbers(span.x, ctx.config.precision))
        tspan.set("y", format_numbers(span.y, ctx.config.precision))
        if span.text_length is not None:
            tspan.set("textLength", ctx.fmt(span.text_length))


def _render_path_shape(shape: PathShape, frame: Frame, parent: Element, ctx: GenerationContext) -> None:
    if shape.fill is None and shape.stroke is None:
        return
    path = Element("path")
    add_shadow(parent, path, shape.shadow, ctx)
    parent.append(path)
    d = encode_path(
        shape.path,
        frame,
        ctx.config.precision,
        warn=lambda message: ctx.warn(ErrorKind.UNKNOWN_FEATURE, message),
    )
    path.set("d", d)
    apply_fill_stroke(path, shape.fill, shape.stroke, ctx.fmt)
