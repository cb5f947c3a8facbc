from __future__ import annotations

import importlib
import logging
import sys
import uuid
from pathlib import Path
from types import ModuleType
from typing import Callable, Iterator, List

import pytest

from staticbundle.generate import GenerationResult
from staticbundle.options import OUT_DIR_ENV, FunctionOptions
from tests._fixtures.tree_builder import AssetTreeBuilder


@pytest.fixture
def asset_tree(tmp_path: Path) -> AssetTreeBuilder:
    """Provide a reusable asset tree rooted at the pytest tmp_path."""
    return AssetTreeBuilder(tmp_path)


@pytest.fixture
def out_dir(tmp_path: Path) -> Path:
    return tmp_path / "out"


@pytest.fixture(autouse=True)
def _no_out_dir_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv(OUT_DIR_ENV, raising=False)


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """Undo handlers installed by `configure_logging` (the CLI calls it)."""
    logger = logging.getLogger("staticbundle")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in logger.handlers:
            logger.addHandler(handler)
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture
def unique_options(out_dir: Path) -> FunctionOptions:
    """Function options with import names unique to this test."""
    token = uuid.uuid4().hex[:12]
    return (
        FunctionOptions()
        .with_path(out_dir)
        .with_module_name(f"bundle_{token}")
        .with_filename(f"generated_{token}.py")
    )


@pytest.fixture
def load_generated(monkeypatch: pytest.MonkeyPatch) -> Iterator[Callable[[GenerationResult], ModuleType]]:
    """Import the top-level module of a generation result."""
    imported: List[str] = []

    def _load(result: GenerationResult) -> ModuleType:
        monkeypatch.syspath_prepend(str(result.top_level.parent))
        imported.append(result.top_level.stem)
        if result.module_dir is not None:
            imported.append(result.module_dir.name)
        return importlib.import_module(result.top_level.stem)

    yield _load

    for name in list(sys.modules):
        if name.split(".")[0] in imported:
            del sys.modules[name]
