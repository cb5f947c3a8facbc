"""Chainable resource streams shared by discovery and conversion stages."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Iterator, Union

if TYPE_CHECKING:
    from .convert import ConvertAdapter, Converter
    from .generate import Generate
    from .storage import ResourceStorage


class ResourceStream:
    """Single-pass iterator of resource prototypes (or in-band errors).

    Subclasses hand an iterator to ``__init__``; once it is exhausted the
    stream stays exhausted.
    """

    def __init__(self, items: Iterator[Any]) -> None:
        self._items = items

    def __iter__(self) -> "ResourceStream":
        return self

    def __next__(self) -> Any:
        return next(self._items)

    def convert(self, converter: Union["Converter", Callable[..., Any]]) -> "ConvertAdapter":
        """Wrap this stream so every resource passes through ``converter``."""
        from .convert import ConvertAdapter, as_converter

        return ConvertAdapter(self, as_converter(converter))

    def compress(self, converter: "Converter") -> "ConvertAdapter":
        """Alias of :meth:`convert` reading naturally for compression converters."""
        return self.convert(converter)

    def generate(self, storage: "ResourceStorage") -> "Generate":
        """Bind this stream to the storage descriptor used for emission."""
        from .generate import Generate

        return Generate(self, storage)


__all__ = ["ResourceStream"]
