"""Layer record stores.

An Acorn image is an SQLite database: document attributes in
``image_attributes``, one row per layer in ``layers`` (with its data blob)
and per-layer attributes in ``layer_attributes``.
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from acorn2svg.exceptions import MalformedInputError
from acorn2svg.geometry import parse_bool, parse_rect, parse_size
from acorn2svg.model import ZERO_RECT, LayerID, LayerRecord, Size

logger = logging.getLogger(__name__)

ACORN_APPLICATION_ID = 0x4163726E  # 'Acrn'
ACORN_FILE_VERSION = 4


class LayerStore(ABC):
    """Source of the document size, layer records and layer data."""

    @abstractmethod
    def document_size(self) -> Size:
        """Document size in points; zero components when unknown."""

    @abstractmethod
    def layers(self) -> list[LayerRecord]:
        """All layer records in sequence order."""

    @abstractmethod
    def layer_data(self, layer_id: LayerID) -> bytes | Mapping[str, Any] | None:
        """A layer's data: image bytes, a property list, or ``None``."""

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, *exc) -> None:
        self.close()


class MemoryStore(LayerStore):
    """A store built from in-memory records.

    ``data`` maps layer ids to image bytes, property-list bytes, or an
    already parsed shape-layer dictionary.
    """

    def __init__(
        self,
        size: Size | tuple[float, float],
        records: Iterable[LayerRecord] = (),
        data: Mapping[LayerID, bytes | Mapping[str, Any]] | None = None,
    ) -> None:
        self._size = Size(*size)
        self._records = list(records)
        self._data = dict(data or {})

    def document_size(self) -> Size:
        return self._size

    def layers(self) -> list[LayerRecord]:
        return list(self._records)

    def layer_data(self, layer_id: LayerID) -> bytes | Mapping[str, Any] | None:
        return self._data.get(layer_id)


class SQLiteStore(LayerStore):
    """Read-only access to an ``.acorn`` file.

    Raises:
        FileNotFoundError: The file does not exist.
        MalformedInputError: The file is not an SQLite database, not an Acorn
            image, or of an unsupported version.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        if not self.path.is_file():
            raise FileNotFoundError(f"Acorn file not found: {self.path}")
        uri = f"{self.path.resolve().as_uri()}?mode=ro"
        try:
            self._conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as e:
            raise MalformedInputError(f"{self.path}: cannot open", {"reason": str(e)}) from e
        try:
            self._check_format()
        except Exception:
            self._conn.close()
            raise

    def _check_format(self) -> None:
        try:
            row = self._conn.execute("PRAGMA application_id").fetchone()
        except sqlite3.DatabaseError as e:
            raise MalformedInputError(
                f"{self.path}: not a sqlite3 db, and therefore not an Acorn file", {"reason": str(e)}
            ) from e
        if row is None or row[0] != ACORN_APPLICATION_ID:
            found = hex(row[0]) if row else None
            raise MalformedInputError(f"{self.path}: does not look like an Acorn file", {"application_id": found})

        values = self._image_attribute("acorn.fileVersion")
        try:
            version_ok = len(values) == 1 and int(values[0]) == ACORN_FILE_VERSION
        except (TypeError, ValueError):
            version_ok = False
        if not version_ok:
            raise MalformedInputError(f"{self.path}: unexpected or missing acorn.fileVersion", {"found": values})

    def _image_attribute(self, name: str) -> list[Any]:
        try:
            rows = self._conn.execute("SELECT value FROM image_attributes WHERE name = ?", (name,)).fetchall()
        except sqlite3.Error as e:
            raise MalformedInputError(f"{self.path}: cannot read image attributes", {"reason": str(e)}) from e
        return [r[0] for r in rows]

    def _layer_attribute(self, layer_id: LayerID, name: str) -> list[Any]:
        try:
            rows = self._conn.execute(
                "SELECT value FROM layer_attributes WHERE id = ? AND name = ?",
                (layer_id, name),
            ).fetchall()
        except sqlite3.Error as e:
            raise MalformedInputError(f"{self.path}: cannot read layer attributes", {"reason": str(e)}) from e
        return [r[0] for r in rows]

    def document_size(self) -> Size:
        # TODO: read the dpi attribute and scale the size with it
        values = self._image_attribute("imageSize")
        if not values:
            return Size(0.0, 0.0)
        return parse_size(values[-1])

    def layers(self) -> list[LayerRecord]:
        try:
            rows = self._conn.execute("SELECT id, parent_id, uti, name FROM layers ORDER BY sequence ASC").fetchall()
        except sqlite3.Error as e:
            raise MalformedInputError(f"{self.path}: cannot read layers", {"reason": str(e)}) from e

        records = []
        for layer_id, parent_id, uti, name in rows:
            visible = all(parse_bool(v) for v in self._layer_attribute(layer_id, "visible"))
            frames = self._layer_attribute(layer_id, "frame")
            frame = parse_rect(frames[-1]) if frames else ZERO_RECT
            records.append(
                LayerRecord(
                    id=layer_id,
                    parent_id=parent_id,
                    uti=uti or "",
                    name=name or "",
                    visible=visible,
                    frame=frame,
                )
            )
        logger.debug("Read %d layers from %s", len(records), self.path)
        return records

    def layer_data(self, layer_id: LayerID) -> bytes | None:
        try:
            row = self._conn.execute("SELECT data FROM layers WHERE id = ?", (layer_id,)).fetchone()
        except sqlite3.Error as e:
            raise MalformedInputError(f"{self.path}: cannot read layer data", {"reason": str(e)}) from e
        if row is None:
            logger.warning("No rows returned for layer %r", layer_id)
            return None
        return row[0]

    def close(self) -> None:
        self._conn.close()
