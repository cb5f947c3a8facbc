"""Tests for staticbundle.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from staticbundle.config import BundleConfig, FunctionConfig, SplitConfig, load_config
from staticbundle.errors import ConfigError
from staticbundle.sets import SplitBySize


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, BundleConfig)
    assert config.base_dir == tmp_path.resolve()
    assert config.root is None
    assert config.out_dir is None
    assert config.sort is False
    assert config.exclude_paths == []
    assert config.compression == "noop"
    assert config.storage == "hash_map"
    assert config.split == SplitConfig()
    assert config.function == FunctionConfig()
    assert config.templates_dir is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".staticbundle.yml"
    config_file.write_text(
        """
root: "web/dist"
out_dir: "build/generated"
sort: true
exclude_paths:
  - "*.map"
  - "node_modules/"
compression: "GZIP"
storage: "encoded_hash_map"
split:
  strategy: "size"
  max: 65536
function:
  name: "assets"
  module: "asset_sets"
  filename: "assets.py"
  package: "app.static"
  visibility: "private"
  annotations:
    - "# generated"
templates_dir: "templates"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.root == tmp_path.resolve() / "web" / "dist"
    assert config.out_dir == tmp_path.resolve() / "build" / "generated"
    assert config.sort is True
    assert config.exclude_paths == ["*.map", "node_modules/"]
    assert config.compression == "gzip"
    assert config.storage == "encoded_hash_map"
    assert config.split == SplitConfig(strategy="size", max=65536)
    assert config.function.name == "assets"
    assert config.function.annotations == ["# generated"]
    assert config.templates_dir == tmp_path.resolve() / "templates"

    resolved = config.function_options().resolve(environ={})
    assert resolved.name == "assets"
    assert resolved.output_root == config.out_dir
    assert resolved.filename == "assets.py"
    assert resolved.module_name == "asset_sets"
    assert resolved.import_path == "app.static.asset_sets"
    assert resolved.annotations == ("# generated",)
    assert resolved.exported is False

    split = config.split_options()
    assert split.templates_dir == config.templates_dir
    assert isinstance(split.strategy_factory(), SplitBySize)


def test_load_config_accepts_explicit_directory(tmp_path: Path) -> None:
    (tmp_path / ".staticbundle.yml").write_text("storage: tree\n", encoding="utf-8")

    assert load_config(tmp_path).storage == "tree"


def test_empty_config_file_yields_defaults(tmp_path: Path) -> None:
    config_file = tmp_path / ".staticbundle.yml"
    config_file.write_text("\n", encoding="utf-8")

    assert load_config(config_file).compression == "noop"


@pytest.mark.parametrize(
    "content",
    [
        "- just\n- a list\n",
        "compression: brotli\n",
        "storage: btree\n",
        "split:\n  strategy: lines\n",
        "split:\n  max: 0\n",
        "split:\n  max: lots\n",
        "root: [unclosed\n",
    ],
)
def test_load_config_rejects_invalid_values(tmp_path: Path, content: str) -> None:
    config_file = tmp_path / ".staticbundle.yml"
    config_file.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_file)
