"""Pytest configuration and shared fixtures for acorn2svg tests."""

import io
import plistlib
import sqlite3
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from acorn2svg.context import GenerationContext
from acorn2svg.model import SHAPE_LAYER_UTI
from acorn2svg.store import ACORN_APPLICATION_ID, ACORN_FILE_VERSION

PNG_UTI = "public.png"


@pytest.fixture
def ctx() -> GenerationContext:
    """Return a fresh generation context with default settings."""
    return GenerationContext()


@pytest.fixture
def png_data() -> bytes:
    """Return a small opaque red PNG image."""
    buffer = io.BytesIO()
    Image.new("RGBA", (4, 3), (255, 0, 0, 255)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def rectangle() -> Callable[..., dict[str, Any]]:
    """Return a factory for Rectangle graphic dictionaries.

    The default is a black filled, unstroked rectangle at (10, 20) of size
    100 x 50. Keyword arguments override or add keys.
    """

    def make(**overrides: Any) -> dict[str, Any]:
        graphic: dict[str, Any] = {
            "Class": "Rectangle",
            "Bounds": "{{10, 20}, {100, 50}}",
            "DrawsFill": True,
            "FillColor": [0.0, 0.0, 0.0, 1.0],
            "DrawsStroke": False,
            "StrokeLineWidth": 1.0,
        }
        graphic.update(overrides)
        return graphic

    return make


@pytest.fixture
def shape_layer() -> Callable[..., dict[str, Any]]:
    """Return a factory wrapping graphics in a TSShapeLayer dictionary."""

    def make(*graphics: dict[str, Any]) -> dict[str, Any]:
        return {"class": "TSShapeLayer", "GraphicsList": list(graphics)}

    return make


def _create_acorn(
    path: Path,
    layers: list[dict[str, Any]],
    size: tuple[float, float] | None,
    version: int | None,
    application_id: int,
) -> Path:
    conn = sqlite3.connect(path)
    try:
        conn.execute(f"PRAGMA application_id = {application_id}")
        conn.execute("CREATE TABLE image_attributes (name TEXT, value)")
        conn.execute(
            "CREATE TABLE layers (id TEXT, parent_id TEXT, uti TEXT, name TEXT, sequence INTEGER, data BLOB)"
        )
        conn.execute("CREATE TABLE layer_attributes (id TEXT, name TEXT, value)")
        if version is not None:
            conn.execute("INSERT INTO image_attributes VALUES ('acorn.fileVersion', ?)", (version,))
        if size is not None:
            conn.execute(
                "INSERT INTO image_attributes VALUES ('imageSize', ?)",
                (f"{{{size[0]:g}, {size[1]:g}}}",),
            )

        for sequence, layer in enumerate(layers):
            data = layer.get("data")
            if isinstance(data, dict):
                data = plistlib.dumps(data)
            conn.execute(
                "INSERT INTO layers VALUES (?, ?, ?, ?, ?, ?)",
                (
                    layer["id"],
                    layer.get("parent_id"),
                    layer.get("uti", SHAPE_LAYER_UTI),
                    layer.get("name", layer["id"]),
                    layer.get("sequence", sequence),
                    data,
                ),
            )
            if "visible" in layer:
                conn.execute(
                    "INSERT INTO layer_attributes VALUES (?, 'visible', ?)",
                    (layer["id"], layer["visible"]),
                )
            if "frame" in layer:
                conn.execute(
                    "INSERT INTO layer_attributes VALUES (?, 'frame', ?)",
                    (layer["id"], layer["frame"]),
                )
        conn.commit()
    finally:
        conn.close()
    return path


@pytest.fixture
def make_acorn(tmp_path: Path) -> Callable[..., Path]:
    """Return a factory that writes a minimal ``.acorn`` database.

    Each layer is a dict with ``id`` and optionally ``parent_id``, ``uti``
    (default: shape layer), ``name``, ``sequence``, ``data`` (bytes, or a
    dict stored as a binary plist), ``visible`` and ``frame``.
    """

    def make(
        layers: list[dict[str, Any]] | None = None,
        name: str = "image.acorn",
        size: tuple[float, float] | None = (200, 200),
        version: int | None = ACORN_FILE_VERSION,
        application_id: int = ACORN_APPLICATION_ID,
    ) -> Path:
        return _create_acorn(tmp_path / name, layers or [], size, version, application_id)

    return make
