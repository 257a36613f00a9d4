"""Exception hierarchy for acorn2svg.

Every error raised by the conversion engine derives from ``Acorn2SVGError``
and carries an ``ErrorKind`` so the driver can decide between aborting the
run and recording a warning:

- ``MALFORMED_INPUT``: a required attribute or blob is missing or unparseable
- ``UNKNOWN_FEATURE``: an unrecognized shape class or attribute key
- ``RESOURCE_FAILURE``: an image could not be decoded or re-encoded
- ``NAMESPACE_RESOLUTION``: the generated tree uses an undeclared namespace
"""

from __future__ import annotations

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of conversion problems."""

    MALFORMED_INPUT = "malformed-input"
    UNKNOWN_FEATURE = "unknown-feature"
    RESOURCE_FAILURE = "resource-failure"
    NAMESPACE_RESOLUTION = "namespace-resolution"
    CONFIGURATION = "configuration"

    @property
    def fatal(self) -> bool:
        """Whether problems of this kind abort the conversion."""
        return self in (
            ErrorKind.MALFORMED_INPUT,
            ErrorKind.NAMESPACE_RESOLUTION,
            ErrorKind.CONFIGURATION,
        )


class Acorn2SVGError(Exception):
    """Base class for all acorn2svg errors."""

    kind: ErrorKind = ErrorKind.MALFORMED_INPUT

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if not self.details:
            return self.message
        extra = ", ".join(f"{k}={v}" for k, v in self.details.items())
        return f"{self.message} ({extra})"


class MalformedInputError(Acorn2SVGError):
    """A required attribute or blob is missing or cannot be parsed."""

    kind = ErrorKind.MALFORMED_INPUT


class DecodeError(Acorn2SVGError):
    """A property-list value could not be decoded into a model object.

    Callers decide whether this is fatal (paths, rich text) or only worth a
    warning (paints, shadows).
    """

    kind = ErrorKind.MALFORMED_INPUT

    def __init__(self, what: str, value: Any, reason: str | None = None) -> None:
        self.what = what
        self.value_type = type(value).__name__
        message = f"Cannot decode {what} from a {self.value_type}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ResourceError(Acorn2SVGError):
    """An external resource (raster image data) could not be processed."""

    kind = ErrorKind.RESOURCE_FAILURE

    def __init__(self, resource: str, details: dict[str, Any] | None = None) -> None:
        self.resource = resource
        super().__init__(f"Could not process {resource}", details)


class NamespaceResolutionError(Acorn2SVGError):
    """A name in the generated tree cannot be qualified with a prefix."""

    kind = ErrorKind.NAMESPACE_RESOLUTION

    def __init__(self, message: str, name: str, namespace: str | None) -> None:
        self.name = name
        self.namespace = namespace
        super().__init__(message, {"name": name, "namespace": namespace})


class ConfigError(Acorn2SVGError):
    """Configuration file contains invalid values."""

    kind = ErrorKind.CONFIGURATION
