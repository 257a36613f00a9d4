"""acorn2svg: Convert layered Acorn images to SVG.

This library converts the layer tree of an Acorn document with:
- Shape layers rendered as rect, path and text elements
- Compact path data in the SVG coordinate space
- Shared drop-shadow filters and font-face definitions
- Raster layers re-encoded as PNG files or data URIs

Example:
    >>> from acorn2svg import Acorn2SVGConverter
    >>> converter = Acorn2SVGConverter()
    >>> converter.convert_file("drawing.acorn", "drawing.svg")
"""

from acorn2svg.config import Config
from acorn2svg.converter import Acorn2SVGConverter, ConversionResult
from acorn2svg.exceptions import (
    Acorn2SVGError,
    ConfigError,
    DecodeError,
    ErrorKind,
    MalformedInputError,
    NamespaceResolutionError,
    ResourceError,
)
from acorn2svg.store import LayerStore, MemoryStore, SQLiteStore

__version__ = "0.1.0"

__all__ = [
    # Main API
    "Acorn2SVGConverter",
    "ConversionResult",
    "Config",
    # Stores
    "LayerStore",
    "MemoryStore",
    "SQLiteStore",
    # Exceptions
    "Acorn2SVGError",
    "ConfigError",
    "DecodeError",
    "ErrorKind",
    "MalformedInputError",
    "NamespaceResolutionError",
    "ResourceError",
    # Metadata
    "__version__",
]
