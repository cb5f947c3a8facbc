"""Storage descriptors: how the generated index is typed, built and filled."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Callable, Dict, Tuple

from .errors import UnsupportedResourceVariant
from .models import Encoding, ResourcePrototype, encoding_of, payload

DEFAULT_VARIABLE_NAME = "r"

_RUNTIME_MODULE = "staticbundle.resource"


class ResourceStorage(ABC):
    """Policy describing the index type that generated code builds.

    Descriptors are stateless and shared by every unit of a generation run.
    """

    #: Annotation text for the index type in generated signatures.
    type_name: str = ""
    #: Expression constructing an empty index.
    constructor: str = ""
    #: Import lines required by every generated unit.
    imports: Tuple[str, ...] = ()
    variable_name: str = DEFAULT_VARIABLE_NAME

    @abstractmethod
    def supports(self, prototype: ResourcePrototype) -> bool:
        """Return True when ``prototype`` can be emitted by this descriptor."""

    @abstractmethod
    def format_insert(self, variable: str, prototype: ResourcePrototype) -> str:
        """Return the insertion statement for a supported prototype."""

    def insert_statement(self, variable: str, prototype: ResourcePrototype) -> str:
        if not self.supports(prototype):
            raise UnsupportedResourceVariant(
                f"{type(self).__name__} cannot emit {prototype.logical_path} "
                f"encoded as {encoding_of(prototype).value}"
            )
        return self.format_insert(variable, prototype)


class HashMapStorage(ResourceStorage):
    """``dict[str, Resource]`` keyed by logical path (unencoded payloads only)."""

    type_name = "Dict[str, Resource]"
    constructor = "{}"
    imports = (
        "from typing import Dict",
        f"from {_RUNTIME_MODULE} import Resource, new_resource as n",
    )

    def supports(self, prototype: ResourcePrototype) -> bool:
        return encoding_of(prototype) is Encoding.IDENTITY

    def format_insert(self, variable: str, prototype: ResourcePrototype) -> str:
        return (
            f"{variable}[{prototype.logical_path!r}] = "
            f"n({payload(prototype)!r}, {prototype.modified_time!r}, {prototype.mime_type!r})"
        )


class EncodedHashMapStorage(ResourceStorage):
    """``dict[str, EncodedResource]`` carrying the content coding per entry."""

    type_name = "Dict[str, EncodedResource]"
    constructor = "{}"
    imports = (
        "from typing import Dict",
        f"from {_RUNTIME_MODULE} import EncodedResource, new_encoded_resource as e",
    )

    def supports(self, prototype: ResourcePrototype) -> bool:
        return True

    def format_insert(self, variable: str, prototype: ResourcePrototype) -> str:
        return (
            f"{variable}[{prototype.logical_path!r}] = "
            f"e({payload(prototype)!r}, {prototype.modified_time!r}, "
            f"{prototype.mime_type!r}, {encoding_of(prototype).value!r})"
        )


class TreeStorage(ResourceStorage):
    """:class:`~staticbundle.resource.ResourceTree` trie keyed by path segments."""

    type_name = "ResourceTree"
    constructor = "ResourceTree()"
    imports = (f"from {_RUNTIME_MODULE} import ResourceTree, new_resource as n",)

    def supports(self, prototype: ResourcePrototype) -> bool:
        return encoding_of(prototype) is Encoding.IDENTITY

    def format_insert(self, variable: str, prototype: ResourcePrototype) -> str:
        return (
            f"{variable}.insert({prototype.logical_path!r}, "
            f"n({payload(prototype)!r}, {prototype.modified_time!r}, {prototype.mime_type!r}))"
        )


class ResourceStorages:
    """Factory helpers for the built-in storage descriptors."""

    _BY_NAME: Dict[str, Callable[[], ResourceStorage]] = {
        "hash_map": HashMapStorage,
        "encoded_hash_map": EncodedHashMapStorage,
        "tree": TreeStorage,
    }

    @staticmethod
    def hash_map() -> HashMapStorage:
        return HashMapStorage()

    @staticmethod
    def encoded_hash_map() -> EncodedHashMapStorage:
        return EncodedHashMapStorage()

    @staticmethod
    def tree() -> TreeStorage:
        return TreeStorage()

    @classmethod
    def names(cls) -> Tuple[str, ...]:
        return tuple(cls._BY_NAME)

    @classmethod
    def by_name(cls, name: str) -> ResourceStorage:
        try:
            factory = cls._BY_NAME[name.lower()]
        except KeyError:
            known = ", ".join(cls._BY_NAME)
            raise ValueError(f"Unknown storage '{name}' (expected one of: {known})") from None
        return factory()


__all__ = [
    "DEFAULT_VARIABLE_NAME",
    "EncodedHashMapStorage",
    "HashMapStorage",
    "ResourceStorage",
    "ResourceStorages",
    "TreeStorage",
]
