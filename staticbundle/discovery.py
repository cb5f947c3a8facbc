"""Resource discovery: walking a root directory into discovered-file records."""

from __future__ import annotations

import mimetypes
import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Callable, Iterable, Iterator, List, Optional, Union

from .errors import DirectoryReadError, FilesystemError
from .logging import get_logger
from .models import DiscoveredFile, ResourcePrototype
from .stream import ResourceStream

PathFilter = Callable[[Path], bool]
MimeLookup = Callable[[Path], str]

_DEFAULT_MIME_TYPE = "application/octet-stream"

_logger = get_logger("discovery")


def guess_mime_type(path: Path) -> str:
    """Best-guess media type for ``path`` based on its extension."""
    mime_type, _ = mimetypes.guess_type(path.name, strict=False)
    return mime_type or _DEFAULT_MIME_TYPE


@dataclass
class ExcludeRule:
    """A gitignore-style exclusion pattern relative to the bundle root."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def parse_exclude_rule(pattern: str) -> ExcludeRule | None:
    pattern = pattern.strip()
    if not pattern or pattern.startswith("#"):
        return None

    negate = pattern.startswith("!")
    if negate:
        pattern = pattern[1:]

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return ExcludeRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def exclude_filter(root: Union[str, Path], patterns: Iterable[str]) -> PathFilter:
    """Build a discovery filter that rejects paths matching ``patterns``.

    Later rules override earlier ones, so ``!keep.map`` after ``*.map``
    re-includes a single file.
    """
    root_path = Path(root).expanduser().resolve()
    rules: List[ExcludeRule] = []
    for pattern in patterns:
        rule = parse_exclude_rule(pattern)
        if rule is not None:
            rules.append(rule)

    def _keep(path: Path) -> bool:
        try:
            rel_path = path.relative_to(root_path).as_posix()
        except ValueError:
            return True
        is_dir = path.is_dir()
        excluded = False
        for rule in rules:
            if rule.matches(rel_path, is_dir):
                excluded = not rule.negate
        return not excluded

    return _keep


def _modified_seconds(stat_result: os.stat_result) -> int:
    seconds = int(stat_result.st_mtime)
    return seconds if seconds > 0 else 0


DiscoveryItem = Union[ResourcePrototype, FilesystemError]


class ResourceFiles(ResourceStream):
    """Lazy, single-pass iterator over the regular files below ``root``.

    Directories are expanded depth-first in the order they are encountered,
    using an explicit stack of per-directory entry lists. Unreadable
    directories and files produce in-band :class:`FilesystemError` items
    instead of stopping the walk; converters and generators raise them.
    """

    def __init__(
        self,
        root: Union[str, Path],
        *,
        filter: Optional[PathFilter] = None,
        sort: bool = False,
        mime_lookup: Optional[MimeLookup] = None,
    ) -> None:
        root_path = Path(root).expanduser()
        if not root_path.exists():
            raise FilesystemError(f"Resource directory not found: {root}", root_path)
        if not root_path.is_dir():
            raise FilesystemError(f"Resource path is not a directory: {root}", root_path)

        self.root = root_path.resolve()
        self._filter = filter
        self._mime_lookup = mime_lookup or guess_mime_type
        items = self._walk()
        if sort:
            items = self._sorted(items)
        super().__init__(items)

    def _walk(self) -> Iterator[DiscoveryItem]:
        _logger.debug("Discovering resources below %s", self.root)
        stack: List[Iterator[os.DirEntry]] = []

        entries = self._list_directory(self.root)
        if isinstance(entries, FilesystemError):
            yield entries
            return
        stack.append(entries)

        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                continue

            path = Path(entry.path)
            if self._filter is not None and not self._filter(path):
                _logger.debug("Filtered out %s", path)
                continue

            try:
                is_dir = entry.is_dir()
                is_file = not is_dir and entry.is_file()
            except OSError as exc:
                yield FilesystemError(f"Failed to inspect {path}: {exc}", path)
                continue

            if is_dir:
                listing = self._list_directory(path)
                if isinstance(listing, FilesystemError):
                    yield listing
                else:
                    stack.append(listing)
                continue
            if not is_file:
                continue

            yield self._describe(path, entry)

    def _list_directory(self, directory: Path) -> Union[Iterator[os.DirEntry], FilesystemError]:
        try:
            with os.scandir(directory) as scanner:
                return iter(list(scanner))
        except OSError as exc:
            _logger.debug("Cannot read directory %s: %s", directory, exc)
            return DirectoryReadError(f"Failed to read directory {directory}: {exc}", directory)

    def _describe(self, path: Path, entry: os.DirEntry) -> DiscoveryItem:
        try:
            stat_result = entry.stat()
        except OSError as exc:
            return FilesystemError(f"Failed to read metadata for {path}: {exc}", path)

        logical_path = path.relative_to(self.root).as_posix()
        discovered = DiscoveredFile(
            logical_path=logical_path,
            absolute_path=path,
            modified_time=_modified_seconds(stat_result),
            mime_type=self._mime_lookup(path),
            size=stat_result.st_size,
        )
        _logger.debug("Discovered %s (%s)", logical_path, discovered.mime_type)
        return discovered

    @staticmethod
    def _sorted(items: Iterator[DiscoveryItem]) -> Iterator[DiscoveryItem]:
        failures: List[FilesystemError] = []
        resources: List[ResourcePrototype] = []
        for item in items:
            if isinstance(item, FilesystemError):
                failures.append(item)
            else:
                resources.append(item)
        yield from failures
        yield from sorted(resources, key=lambda resource: resource.logical_path)


__all__ = [
    "DiscoveryItem",
    "ExcludeRule",
    "MimeLookup",
    "PathFilter",
    "ResourceFiles",
    "exclude_filter",
    "guess_mime_type",
    "parse_exclude_rule",
]
