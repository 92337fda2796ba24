"""
Error types raised by the decode and export pipeline.
"""
from enum import Enum


class InkpatchError(Exception):
    """Base class for all pipeline failures surfaced to the caller."""


class DecodeErrorKind(Enum):
    """Why a source document could not be decoded."""

    CORRUPT = "corrupt"  # The PDF library could not parse the bytes
    UNSUPPORTED = "unsupported"  # Parsed, but there is no page to edit


class DecodeError(InkpatchError):
    """The source document cannot be rasterized. Terminal for that document."""

    def __init__(self, message: str, kind: DecodeErrorKind = DecodeErrorKind.CORRUPT):
        super().__init__(message)
        self.kind = kind

    @property
    def message(self) -> str:
        return str(self)


class ExportError(InkpatchError):
    """The edited document could not be serialized."""

    @property
    def message(self) -> str:
        return str(self)
