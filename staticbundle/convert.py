"""Converters that recode resource payloads (compression and friends)."""

from __future__ import annotations

import gzip
import zlib
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, Iterator

from .errors import FilesystemError, UnsupportedResourceVariant
from .models import Encoding, ResourcePrototype, TransformedFile, encoding_of, payload, source_file
from .stream import ResourceStream


class Converter(ABC):
    """Contract for pure ``prototype -> prototype`` transformations."""

    @abstractmethod
    def convert(self, prototype: ResourcePrototype) -> ResourcePrototype:
        """Return the converted prototype or raise on failure."""


class NoopConverter(Converter):
    """Pass resources through unchanged."""

    def convert(self, prototype: ResourcePrototype) -> ResourcePrototype:
        return prototype


class FunctionConverter(Converter):
    """Adapt a plain callable to the :class:`Converter` contract."""

    def __init__(self, func: Callable[[ResourcePrototype], ResourcePrototype]) -> None:
        self._func = func

    def convert(self, prototype: ResourcePrototype) -> ResourcePrototype:
        return self._func(prototype)


class _EncodingConverter(Converter):
    encoding: Encoding = Encoding.IDENTITY

    def convert(self, prototype: ResourcePrototype) -> ResourcePrototype:
        current = encoding_of(prototype)
        if current is not Encoding.IDENTITY:
            raise UnsupportedResourceVariant(
                f"{prototype.logical_path} is already encoded as {current.value}; "
                f"cannot apply {self.encoding.value}"
            )
        return TransformedFile(
            source=source_file(prototype),
            encoding=self.encoding,
            content=self.encode(payload(prototype)),
        )

    def encode(self, data: bytes) -> bytes:
        return data


class IdentityConverter(_EncodingConverter):
    """Materialise the payload without changing it (``identity`` coding)."""


class GzipConverter(_EncodingConverter):
    """Gzip-compress payloads with a fixed header timestamp."""

    encoding = Encoding.GZIP

    def __init__(self, level: int = 9) -> None:
        self.level = level

    def encode(self, data: bytes) -> bytes:
        return gzip.compress(data, compresslevel=self.level, mtime=0)


class DeflateConverter(_EncodingConverter):
    """Compress payloads as a zlib stream (HTTP ``deflate``)."""

    encoding = Encoding.DEFLATE

    def __init__(self, level: int = 9) -> None:
        self.level = level

    def encode(self, data: bytes) -> bytes:
        return zlib.compress(data, self.level)


class ConvertAdapter(ResourceStream):
    """Lazily apply ``converter`` to every item of ``upstream``, failing fast."""

    def __init__(self, upstream: Iterable[object], converter: Converter) -> None:
        self.converter = converter
        super().__init__(self._convert_all(upstream))

    def _convert_all(self, upstream: Iterable[object]) -> Iterator[ResourcePrototype]:
        for item in upstream:
            if isinstance(item, FilesystemError):
                raise item
            yield self.converter.convert(item)  # type: ignore[arg-type]


_CONVERTERS: Dict[str, Callable[[], Converter]] = {
    "noop": NoopConverter,
    "identity": IdentityConverter,
    "gzip": GzipConverter,
    "deflate": DeflateConverter,
}

CONVERTER_NAMES = tuple(_CONVERTERS)


def converter_for(name: str) -> Converter:
    """Return a fresh converter registered under ``name``."""
    try:
        factory = _CONVERTERS[name.lower()]
    except KeyError:
        known = ", ".join(CONVERTER_NAMES)
        raise ValueError(f"Unknown converter '{name}' (expected one of: {known})") from None
    return factory()


def as_converter(value: object) -> Converter:
    if isinstance(value, Converter):
        return value
    if callable(value):
        return FunctionConverter(value)  # type: ignore[arg-type]
    raise TypeError("Converter must be a Converter instance or a callable")


__all__ = [
    "CONVERTER_NAMES",
    "ConvertAdapter",
    "Converter",
    "DeflateConverter",
    "FunctionConverter",
    "GzipConverter",
    "IdentityConverter",
    "NoopConverter",
    "as_converter",
    "converter_for",
]
