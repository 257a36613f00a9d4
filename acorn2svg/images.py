"""Raster layer re-encoding.

Bitmap layers are decoded with Pillow and re-encoded as PNG, either into a
directory next to the SVG or inline as ``data:`` URIs. Identical layer data
is written once.
"""

from __future__ import annotations

import base64
import hashlib
import io
import logging
import re
from pathlib import Path

from PIL import Image, UnidentifiedImageError

from acorn2svg.exceptions import ResourceError

logger = logging.getLogger(__name__)

# Acorn names new bitmap layers "Bitmap Layer N"; such names make poor file names
DEFAULT_NAME_PREFIX = "Bitmap Layer "

PNG_MODES = {"1", "L", "LA", "I", "P", "RGB", "RGBA"}

_UNSAFE_FILENAME = re.compile(r"[^A-Za-z0-9._-]+")


class ImageWriter:
    """Turns raster layer data into ``href`` values for ``<image>`` elements.

    Args:
        output_dir: Directory receiving PNG files. Required unless
            ``embed`` is set; created on first write.
        embed: Inline images as base64 ``data:`` URIs instead.
        href_base: Prefix of written files' hrefs; defaults to the
            directory name, i.e. a sibling of the SVG file.
    """

    def __init__(self, output_dir: Path | None = None, embed: bool = False, href_base: str | None = None) -> None:
        if not embed and output_dir is None:
            raise ValueError("output_dir is required unless images are embedded")
        self.output_dir = Path(output_dir) if output_dir is not None else None
        self.embed = embed
        if href_base is None and self.output_dir is not None:
            href_base = self.output_dir.name
        self.href_base = href_base or ""
        self._by_digest: dict[str, str] = {}
        self._names: set[str] = set()
        self.written: list[Path] = []

    def __len__(self) -> int:
        return len(self._by_digest)

    def write(self, data: bytes, uti: str, name_hint: str | None = None) -> str:
        """Re-encode one layer's image data and return its href.

        Raises:
            ResourceError: The data cannot be decoded or the PNG cannot be
                written.
        """
        digest = hashlib.sha256(data).hexdigest()
        href = self._by_digest.get(digest)
        if href is not None:
            logger.debug("Reusing image %s for %s", href, name_hint)
            return href

        png = self._encode_png(data, uti)
        if self.embed:
            href = "data:image/png;base64," + base64.b64encode(png).decode("ascii")
        else:
            href = self._save(png, self._file_stem(name_hint, digest))
        self._by_digest[digest] = href
        return href

    def _encode_png(self, data: bytes, uti: str) -> bytes:
        try:
            with Image.open(io.BytesIO(data)) as image:
                image.load()
                if image.mode not in PNG_MODES:
                    image = image.convert("RGBA")
                output = io.BytesIO()
                image.save(output, format="PNG")
        except (UnidentifiedImageError, OSError, ValueError) as e:
            raise ResourceError(f"{uti} image data", {"reason": str(e)}) from e
        return output.getvalue()

    def _file_stem(self, name_hint: str | None, digest: str) -> str:
        stem = ""
        if name_hint and not name_hint.startswith(DEFAULT_NAME_PREFIX):
            stem = _UNSAFE_FILENAME.sub("_", name_hint).strip("._")
        if not stem:
            stem = f"img{digest[:12]}"
        candidate = stem
        n = 1
        while candidate in self._names:
            n += 1
            candidate = f"{stem}-{n}"
        self._names.add(candidate)
        return candidate

    def _save(self, png: bytes, stem: str) -> str:
        assert self.output_dir is not None
        filename = f"{stem}.png"
        path = self.output_dir / filename
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
            path.write_bytes(png)
        except OSError as e:
            raise ResourceError(str(path), {"reason": str(e)}) from e
        logger.info("Saving %s", path)
        self.written.append(path)
        return f"{self.href_base}/{filename}" if self.href_base else filename
