"""Exception hierarchy for staticbundle."""

from __future__ import annotations

from pathlib import Path


class StaticBundleError(RuntimeError):
    """Base class for every error raised while bundling resources."""


class FilesystemError(StaticBundleError):
    """Raised when a directory, file, or its metadata cannot be read."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        super().__init__(message)
        self.path = path


class DirectoryReadError(FilesystemError):
    """A directory could not be listed during discovery."""


class UnresolvedOutputLocation(StaticBundleError):
    """Raised when no output directory is configured or exported."""


class UnsupportedResourceVariant(StaticBundleError):
    """Raised when a storage or converter receives a resource it cannot emit."""


class ConfigError(StaticBundleError):
    """Raised when configuration or option values are invalid."""


__all__ = [
    "ConfigError",
    "DirectoryReadError",
    "FilesystemError",
    "StaticBundleError",
    "UnresolvedOutputLocation",
    "UnsupportedResourceVariant",
]
