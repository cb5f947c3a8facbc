"""Helper utilities for constructing temporary asset trees in tests."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Union

from staticbundle.discovery import ResourceFiles

FIXED_MTIME = 1_700_000_000


class AssetTreeBuilder:
    """Utility for writing files into a throwaway asset directory."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "assets"
        self.root.mkdir()

    def write(self, files: Mapping[str, Union[str, bytes]], *, mtime: int = FIXED_MTIME) -> None:
        """Write `path -> contents` entries with a fixed modification time."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
            os.utime(path, (mtime, mtime))

    def write_many(self, count: int, *, prefix: str = "file") -> None:
        """Write `count` small text files named `<prefix>_<n>.txt`."""
        self.write({f"{prefix}_{index}.txt": f"content {index}\n" for index in range(count)})

    def resources(self, **kwargs: object) -> ResourceFiles:
        return ResourceFiles(self.root, **kwargs)  # type: ignore[arg-type]

    def path(self) -> Path:
        """Return the asset root path."""
        return self.root


__all__ = ["AssetTreeBuilder", "FIXED_MTIME"]
