"""Runtime values referenced by generated resource modules.

Generated code imports the short aliases below, for example::

    from staticbundle.resource import new_resource as n

    def generate(r):
        r['index.html'] = n(b'<html>...</html>', 1700000000, 'text/html')
"""

from __future__ import annotations

import gzip
import zlib
from dataclasses import dataclass
from typing import Dict, Iterator, Optional


@dataclass(frozen=True)
class Resource:
    """Static file resource embedded into the program."""

    data: bytes
    modified: int
    mime_type: str


@dataclass(frozen=True)
class EncodedResource:
    """Static file resource stored with a content coding (gzip, deflate, identity)."""

    data: bytes
    modified: int
    mime_type: str
    encoding: str

    def decoded(self) -> bytes:
        """Return the original, uncompressed bytes."""
        if self.encoding == "identity":
            return self.data
        if self.encoding == "gzip":
            return gzip.decompress(self.data)
        if self.encoding == "deflate":
            return zlib.decompress(self.data)
        raise ValueError(f"Unknown resource encoding: {self.encoding}")


def new_resource(data: bytes, modified: int, mime_type: str) -> Resource:
    """Used internally by generated functions."""
    return Resource(data=data, modified=modified, mime_type=mime_type)


def new_encoded_resource(
    data: bytes, modified: int, mime_type: str, encoding: str
) -> EncodedResource:
    """Used internally by generated functions."""
    return EncodedResource(data=data, modified=modified, mime_type=mime_type, encoding=encoding)


class ResourceTree:
    """Trie of resources keyed by ``/``-separated logical path segments."""

    def __init__(self) -> None:
        self._children: Dict[str, ResourceTree] = {}
        self._resource: Optional[Resource] = None
        self._size = 0

    def insert(self, logical_path: str, resource: Resource) -> None:
        node = self
        trail = [self]
        for segment in logical_path.split("/"):
            node = node._children.setdefault(segment, ResourceTree())
            trail.append(node)
        if node._resource is None:
            for visited in trail:
                visited._size += 1
        node._resource = resource

    def get(self, logical_path: str) -> Optional[Resource]:
        node: Optional[ResourceTree] = self
        for segment in logical_path.split("/"):
            if node is None:
                return None
            node = node._children.get(segment)
        return node._resource if node is not None else None

    def children(self, prefix: str = "") -> list[str]:
        """Return the direct child segment names below ``prefix``."""
        node: Optional[ResourceTree] = self
        if prefix:
            for segment in prefix.strip("/").split("/"):
                node = node._children.get(segment) if node is not None else None
        if node is None:
            return []
        return sorted(node._children)

    def __getitem__(self, logical_path: str) -> Resource:
        resource = self.get(logical_path)
        if resource is None:
            raise KeyError(logical_path)
        return resource

    def __contains__(self, logical_path: object) -> bool:
        return isinstance(logical_path, str) and self.get(logical_path) is not None

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[str]:
        yield from self._walk("")

    def _walk(self, prefix: str) -> Iterator[str]:
        for name in sorted(self._children):
            child = self._children[name]
            path = f"{prefix}/{name}" if prefix else name
            if child._resource is not None:
                yield path
            yield from child._walk(path)


__all__ = [
    "EncodedResource",
    "Resource",
    "ResourceTree",
    "new_encoded_resource",
    "new_resource",
]
