"""Core data models flowing through the bundling pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Union

from .errors import FilesystemError


class Encoding(str, Enum):
    """Content coding applied to a resource payload."""

    IDENTITY = "identity"
    GZIP = "gzip"
    DEFLATE = "deflate"


@dataclass(frozen=True)
class DiscoveredFile:
    """A regular file found under the bundle root."""

    logical_path: str
    absolute_path: Path
    modified_time: int
    mime_type: str
    size: int = 0

    def read_bytes(self) -> bytes:
        try:
            return self.absolute_path.read_bytes()
        except OSError as exc:
            raise FilesystemError(
                f"Failed to read resource {self.logical_path}: {exc}", self.absolute_path
            ) from exc


@dataclass(frozen=True)
class TransformedFile:
    """A discovered file whose payload was replaced by a converter.

    The logical path, modification time and MIME type always come from
    ``source``; only the bytes and their encoding change.
    """

    source: DiscoveredFile
    encoding: Encoding
    content: bytes

    @property
    def logical_path(self) -> str:
        return self.source.logical_path

    @property
    def modified_time(self) -> int:
        return self.source.modified_time

    @property
    def mime_type(self) -> str:
        return self.source.mime_type


ResourcePrototype = Union[DiscoveredFile, TransformedFile]


def source_file(prototype: ResourcePrototype) -> DiscoveredFile:
    """Return the discovered file underlying ``prototype``."""
    if isinstance(prototype, TransformedFile):
        return prototype.source
    return prototype


def payload(prototype: ResourcePrototype) -> bytes:
    """Return the bytes that should be embedded for ``prototype``."""
    if isinstance(prototype, TransformedFile):
        return prototype.content
    return prototype.read_bytes()


def encoding_of(prototype: ResourcePrototype) -> Encoding:
    if isinstance(prototype, TransformedFile):
        return prototype.encoding
    return Encoding.IDENTITY


__all__ = [
    "DiscoveredFile",
    "Encoding",
    "ResourcePrototype",
    "TransformedFile",
    "encoding_of",
    "payload",
    "source_file",
]
