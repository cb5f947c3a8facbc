"""Tests for staticbundle.discovery."""

from __future__ import annotations

import os
from contextlib import contextmanager
from pathlib import Path
from typing import List

import pytest

from staticbundle import discovery
from staticbundle.discovery import ResourceFiles, exclude_filter, guess_mime_type
from staticbundle.errors import DirectoryReadError, FilesystemError
from staticbundle.models import DiscoveredFile
from tests._fixtures.tree_builder import FIXED_MTIME


def _paths(items) -> List[str]:
    return [item.logical_path for item in items]


def test_discovers_every_file_with_forward_slash_paths(asset_tree) -> None:
    asset_tree.write(
        {
            "index.html": "<html></html>",
            "css/site.css": "body {}",
            "js/vendor/lib.js": "export {}",
            "img/logo.png": b"\x89PNG\r\n",
        }
    )

    items = list(asset_tree.resources())

    assert all(isinstance(item, DiscoveredFile) for item in items)
    assert sorted(_paths(items)) == [
        "css/site.css",
        "img/logo.png",
        "index.html",
        "js/vendor/lib.js",
    ]


def test_directories_are_not_emitted(asset_tree) -> None:
    asset_tree.write({"a/b/c.txt": "c"})
    (asset_tree.path() / "empty").mkdir()

    assert _paths(asset_tree.resources()) == ["a/b/c.txt"]


def test_records_metadata(asset_tree) -> None:
    asset_tree.write({"page.html": "<p>hi</p>", "blob.unknownext": b"\x00\x01"})

    by_path = {item.logical_path: item for item in asset_tree.resources()}

    page = by_path["page.html"]
    assert page.modified_time == FIXED_MTIME
    assert page.mime_type == "text/html"
    assert page.size == len("<p>hi</p>")
    assert page.absolute_path == (asset_tree.path() / "page.html").resolve()
    assert page.read_bytes() == b"<p>hi</p>"
    assert by_path["blob.unknownext"].mime_type == "application/octet-stream"


def test_pre_epoch_modified_time_is_zero() -> None:
    before_epoch = os.stat_result((0, 0, 0, 0, 0, 0, 0, 0, -100, 0))
    after_epoch = os.stat_result((0, 0, 0, 0, 0, 0, 0, 0, FIXED_MTIME, 0))

    assert discovery._modified_seconds(before_epoch) == 0
    assert discovery._modified_seconds(after_epoch) == FIXED_MTIME


def test_custom_mime_lookup_is_used(asset_tree) -> None:
    asset_tree.write({"a.txt": "a"})

    (item,) = list(asset_tree.resources(mime_lookup=lambda path: "x-custom/" + path.suffix[1:]))

    assert item.mime_type == "x-custom/txt"


def test_filter_excludes_files_and_skips_directories(asset_tree) -> None:
    asset_tree.write(
        {
            "keep.txt": "k",
            "skip.map": "s",
            "node_modules/pkg/index.js": "x",
            "src/app.js": "a",
        }
    )
    seen: List[Path] = []

    def _filter(path: Path) -> bool:
        seen.append(path)
        return path.name != "node_modules" and path.suffix != ".map"

    paths = sorted(_paths(asset_tree.resources(filter=_filter)))

    assert paths == ["keep.txt", "src/app.js"]
    assert not any("pkg" in path.parts for path in seen)


def test_sort_mode_orders_by_logical_path(asset_tree) -> None:
    asset_tree.write({name: name for name in ["b.txt", "a/z.txt", "c/a.txt", "a.txt", "a-b.txt"]})

    paths = _paths(asset_tree.resources(sort=True))

    assert paths == sorted(paths)
    assert len(paths) == 5


def test_stream_is_single_pass(asset_tree) -> None:
    asset_tree.write({"a.txt": "a", "b.txt": "b"})
    files = asset_tree.resources()

    assert len(list(files)) == 2
    assert list(files) == []


def test_rejects_missing_root(tmp_path: Path) -> None:
    with pytest.raises(FilesystemError) as excinfo:
        ResourceFiles(tmp_path / "missing")

    assert "missing" in str(excinfo.value)


def test_rejects_file_root(tmp_path: Path) -> None:
    target = tmp_path / "file.txt"
    target.write_text("x", encoding="utf-8")

    with pytest.raises(FilesystemError):
        ResourceFiles(target)


def test_unreadable_directory_yields_error_and_continues(asset_tree, monkeypatch) -> None:
    asset_tree.write({"a.txt": "a", "broken/hidden.txt": "h", "ok/b.txt": "b"})
    broken = (asset_tree.path() / "broken").resolve()
    real_scandir = os.scandir

    def _scandir(path):
        if Path(path) == broken:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", _scandir)

    items = list(asset_tree.resources())

    errors = [item for item in items if isinstance(item, FilesystemError)]
    files = sorted(item.logical_path for item in items if isinstance(item, DiscoveredFile))
    assert len(errors) == 1
    assert isinstance(errors[0], DirectoryReadError)
    assert errors[0].path == broken
    assert files == ["a.txt", "ok/b.txt"]


class _UnstatableEntry:
    """Directory entry whose metadata lookup fails."""

    def __init__(self, entry: os.DirEntry) -> None:
        self._entry = entry
        self.name = entry.name
        self.path = entry.path

    def is_dir(self) -> bool:
        return self._entry.is_dir()

    def is_file(self) -> bool:
        return self._entry.is_file()

    def stat(self):
        raise PermissionError(13, "Permission denied", self.path)


def test_failed_stat_yields_error_item(asset_tree, monkeypatch) -> None:
    asset_tree.write({"a.txt": "a", "locked.txt": "l"})
    real_scandir = os.scandir

    @contextmanager
    def _scandir(path):
        with real_scandir(path) as scanner:
            yield [
                _UnstatableEntry(entry) if entry.name == "locked.txt" else entry
                for entry in scanner
            ]

    monkeypatch.setattr(os, "scandir", _scandir)

    items = list(asset_tree.resources(sort=True))

    assert len(items) == 2
    failure = items[0]
    assert isinstance(failure, FilesystemError)
    assert not isinstance(failure, DirectoryReadError)
    assert failure.path.name == "locked.txt"
    assert "locked.txt" in str(failure)
    assert items[1].logical_path == "a.txt"


def test_sort_mode_yields_errors_first(asset_tree, monkeypatch) -> None:
    asset_tree.write({"a.txt": "a", "broken/hidden.txt": "h"})
    broken = (asset_tree.path() / "broken").resolve()
    real_scandir = os.scandir

    def _scandir(path):
        if Path(path) == broken:
            raise PermissionError(13, "Permission denied", str(path))
        return real_scandir(path)

    monkeypatch.setattr(os, "scandir", _scandir)

    items = list(asset_tree.resources(sort=True))

    assert isinstance(items[0], DirectoryReadError)
    assert items[1].logical_path == "a.txt"


def test_exclude_filter_supports_gitignore_style_patterns(asset_tree) -> None:
    asset_tree.write(
        {
            "app.js": "a",
            "app.js.map": "m",
            "keep.map": "k",
            "build/out.js": "o",
            "docs/build.txt": "d",
            "nested/build/skip.txt": "s",
        }
    )
    resource_filter = exclude_filter(asset_tree.path(), ["*.map", "!keep.map", "build/", "/docs"])

    paths = sorted(_paths(asset_tree.resources(filter=resource_filter)))

    assert paths == ["app.js", "keep.map"]


def test_guess_mime_type_falls_back_to_octet_stream() -> None:
    assert guess_mime_type(Path("style.css")) == "text/css"
    assert guess_mime_type(Path("archive.no-such-type")) == "application/octet-stream"
