#!/usr/bin/env python3
"""
Acorn to SVG conversion driver.

Walks the layer hierarchy of a record store depth-first, renders shape
layers and raster layers into an output tree, adds the shared definitions
(shadow filters, font faces) and normalizes the result.

Usage:
    converter = Acorn2SVGConverter()
    result = converter.convert_file("drawing.acorn", "drawing.svg")
    if not result.success:
        print(result.errors)
"""

from __future__ import annotations

import logging
import plistlib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

from acorn2svg.config import Config
from acorn2svg.context import Diagnostic, GenerationContext
from acorn2svg.decode import ValueDecoder
from acorn2svg.exceptions import Acorn2SVGError, ErrorKind, MalformedInputError, ResourceError
from acorn2svg.fonts.attributes import FontCache
from acorn2svg.geometry import Frame, layer_frame
from acorn2svg.images import ImageWriter
from acorn2svg.layers import build_layer_tree
from acorn2svg.model import LayerNode
from acorn2svg.shapes import iter_text_areas, parse_graphic, render_shape
from acorn2svg.store import LayerStore, SQLiteStore
from acorn2svg.svg.postprocess import assign_namespace_prefixes, prune_redundant_groups
from acorn2svg.svg.tree import SVG_NS, XLINK_NS, Element
from acorn2svg.svg.writer import serialize
from acorn2svg.text.layout import LayoutManager, SimpleLayoutManager

logger = logging.getLogger(__name__)


@dataclass
class ConversionResult:
    """Outcome of converting one file."""

    success: bool
    input_path: Path | None = None
    output_path: Path | None = None
    svg: str | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[Diagnostic] = field(default_factory=list)
    layer_count: int = 0
    shadow_count: int = 0
    font_count: int = 0
    image_count: int = 0


class Acorn2SVGConverter:
    """Converts Acorn documents to SVG.

    Args:
        config: Conversion settings; defaults to ``Config()``.
        log_level: Level for the package logger, if given.
        decoder: Decoder for property-list values.
        layout: Text layout manager used for text areas.
    """

    def __init__(
        self,
        config: Config | None = None,
        log_level: str | None = None,
        decoder: ValueDecoder | None = None,
        layout: LayoutManager | None = None,
    ) -> None:
        self.config = config or Config()
        self.decoder = decoder or ValueDecoder()
        self.layout = layout or SimpleLayoutManager()
        if log_level:
            logging.getLogger("acorn2svg").setLevel(log_level.upper())

    def new_context(self, images: ImageWriter | None = None) -> GenerationContext:
        """Fresh per-run state; images are embedded unless a writer is given."""
        return GenerationContext(
            config=self.config,
            decoder=self.decoder,
            layout=self.layout,
            images=images if images is not None else ImageWriter(embed=True),
        )

    def convert_store(self, store: LayerStore, ctx: GenerationContext | None = None) -> Element:
        """Build the qualified SVG tree for a store.

        Raises:
            MalformedInputError: Required input is missing or unparseable.
            NamespaceResolutionError: The tree cannot be qualified.
        """
        ctx = ctx or self.new_context()

        svg = Element("svg")
        svg.declare("", SVG_NS)
        svg.declare("xlink", XLINK_NS)
        svg.set("version", "1.0")

        size = store.document_size()
        document_height = 0.0
        if size.width > 0:
            svg.set("width", ctx.fmt(size.width, "pt"))
        if size.height > 0:
            svg.set("height", ctx.fmt(size.height, "pt"))
            document_height = size.height

        root = build_layer_tree(
            store.layers(),
            warn=lambda message: ctx.warn(ErrorKind.UNKNOWN_FEATURE, message),
        )
        for layer in root.children:
            self._render_layer(layer, svg, document_height, store, ctx)

        defs = Element("defs")
        for definition in ctx.shadows.filters():
            defs.append(definition)
        if self.config.font_faces:
            for face in ctx.fonts.font_faces(ctx.fmt):
                defs.append(face)
        if defs.children:
            svg.insert(0, defs)

        if self.config.prune_groups:
            svg = prune_redundant_groups(svg)
        return assign_namespace_prefixes(svg)

    def _render_layer(
        self,
        layer: LayerNode,
        parent: Element,
        document_height: float,
        store: LayerStore,
        ctx: GenerationContext,
    ) -> None:
        if not layer.visible:
            logger.debug("Skipping invisible layer %r", layer.name)
            return

        group = parent.append(Element("g"))
        if self.config.layer_ids and layer.name:
            layer_id = ctx.layer_id(layer.name)
            if layer_id:
                group.set("id", layer_id)
        ctx.layer_count += 1

        frame = layer_frame(document_height, layer.frame)
        data = store.layer_data(layer.id)
        if layer.is_shape_layer:
            shape = parse_graphic(self._shape_plist(layer, data), ctx)
            if shape is not None:
                render_shape(shape, frame, group, ctx)
        elif data is not None:
            self._render_image(layer, data, frame, group, ctx)
        elif not layer.children:
            ctx.warn(ErrorKind.RESOURCE_FAILURE, f"Layer {layer.name!r} has no data, skipping its image")

        # every layer is placed against the whole document, children included
        for child in layer.children:
            self._render_layer(child, group, document_height, store, ctx)

    def _shape_plist(self, layer: LayerNode, data: Any) -> Mapping[str, Any]:
        if isinstance(data, Mapping):
            return data
        if not isinstance(data, (bytes, bytearray)):
            raise MalformedInputError("Shape layer has no property list", {"layer": layer.name})
        try:
            value = plistlib.loads(bytes(data))
        except (plistlib.InvalidFileException, ExpatError, ValueError) as e:
            raise MalformedInputError("Could not parse plist for shape layer", {"layer": layer.name}) from e
        if not isinstance(value, Mapping):
            raise MalformedInputError("Shape layer plist is not a dictionary", {"layer": layer.name})
        return value

    def _render_image(
        self,
        layer: LayerNode,
        data: Any,
        frame: Frame,
        group: Element,
        ctx: GenerationContext,
    ) -> None:
        if not isinstance(data, (bytes, bytearray)):
            ctx.warn(ErrorKind.RESOURCE_FAILURE, f"Layer {layer.name!r} holds no image data")
            return
        try:
            href = ctx.images.write(bytes(data), layer.uti or "", layer.name)
        except ResourceError as e:
            ctx.warn(ErrorKind.RESOURCE_FAILURE, f"Could not convert image of layer {layer.name!r}: {e}")
            return

        image = group.append(Element("image"))
        image.set("href", href, XLINK_NS)
        if frame.origin_x != 0 or frame.origin_y != 0:
            image.set("x", ctx.fmt(frame.origin_x))
            image.set("y", ctx.fmt(frame.origin_y))
        image.set("width", ctx.fmt(frame.width))
        image.set("height", ctx.fmt(frame.height))
        ctx.image_count += 1

    def convert_to_string(self, store: LayerStore, ctx: GenerationContext | None = None) -> str:
        return serialize(self.convert_store(store, ctx))

    def collect_fonts(self, store: LayerStore) -> FontCache:
        """Map the fonts of every visible text area without rendering."""
        ctx = self.new_context()

        def visit(layer: LayerNode) -> None:
            if not layer.visible:
                return
            if layer.is_shape_layer:
                shape = parse_graphic(self._shape_plist(layer, store.layer_data(layer.id)), ctx)
                for area in iter_text_areas(shape):
                    for run in area.text.runs:
                        if run.font is not None:
                            ctx.fonts.attributes_for(run.font)
            for child in layer.children:
                visit(child)

        root = build_layer_tree(
            store.layers(),
            warn=lambda message: ctx.warn(ErrorKind.UNKNOWN_FEATURE, message),
        )
        for layer in root.children:
            visit(layer)
        return ctx.fonts

    def _image_writer(self, output_path: Path | None) -> ImageWriter:
        if self.config.embed_images or output_path is None:
            return ImageWriter(embed=True)
        if self.config.image_dir is not None:
            image_dir = self.config.image_dir
            try:
                href_base = image_dir.resolve().relative_to(output_path.parent.resolve()).as_posix()
            except ValueError:
                href_base = image_dir.resolve().as_uri()
            return ImageWriter(image_dir, href_base=href_base)
        image_dir = output_path.parent / f"{output_path.stem}_images"
        return ImageWriter(image_dir)

    def convert_file(self, input_path: str | Path, output_path: str | Path | None = None) -> ConversionResult:
        """Convert an ``.acorn`` file.

        Args:
            input_path: The Acorn image.
            output_path: Destination SVG; when omitted the document is only
                returned in ``ConversionResult.svg`` and images are embedded.

        Returns:
            The result; fatal problems are reported in ``errors`` rather
            than raised.
        """
        input_path = Path(input_path)
        output = Path(output_path) if output_path is not None else None
        result = ConversionResult(success=False, input_path=input_path, output_path=output)

        ctx = self.new_context(self._image_writer(output))
        try:
            with SQLiteStore(input_path) as store:
                svg = self.convert_to_string(store, ctx)
            if output is not None:
                output.parent.mkdir(parents=True, exist_ok=True)
                output.write_text(svg, encoding="utf-8")
                logger.info("Wrote %s", output)
            result.svg = svg
            result.success = True
        except Acorn2SVGError as e:
            logger.error("%s: %s", input_path, e)
            result.errors.append(str(e))
        except OSError as e:
            logger.error("%s: %s", input_path, e)
            result.errors.append(str(e))

        result.warnings = ctx.warnings
        result.layer_count = ctx.layer_count
        result.shadow_count = len(ctx.shadows)
        result.font_count = len(ctx.fonts)
        result.image_count = ctx.image_count
        return result
