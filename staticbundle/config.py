"""Configuration loading for staticbundle (.staticbundle.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .convert import CONVERTER_NAMES
from .errors import ConfigError
from .generate import ModuleGenerators, SplitModuleGeneratorOptions
from .options import FunctionOptions
from .storage import ResourceStorages

CONFIG_FILENAME = ".staticbundle.yml"

_SPLIT_STRATEGIES = ("count", "size")


@dataclass
class SplitConfig:
    """How resources are spread across generated sets."""

    strategy: str = "count"
    max: int = 256


@dataclass
class FunctionConfig:
    """Overrides for the generated function and files."""

    name: Optional[str] = None
    module: Optional[str] = None
    filename: Optional[str] = None
    package: Optional[str] = None
    visibility: Optional[str] = None
    annotations: Optional[List[str]] = None


@dataclass
class BundleConfig:
    """Represents the settings defined in .staticbundle.yml."""

    base_dir: Path
    root: Optional[Path] = None
    out_dir: Optional[Path] = None
    sort: bool = False
    exclude_paths: List[str] = field(default_factory=list)
    compression: str = "noop"
    storage: str = "hash_map"
    split: SplitConfig = field(default_factory=SplitConfig)
    function: FunctionConfig = field(default_factory=FunctionConfig)
    templates_dir: Optional[Path] = None

    def function_options(self) -> FunctionOptions:
        options = FunctionOptions(
            name=self.function.name,
            path=self.out_dir,
            filename=self.function.filename,
            module_name=self.function.module,
            package=self.function.package,
            visibility=self.function.visibility,
        )
        if self.function.annotations is not None:
            options = options.with_annotations(*self.function.annotations)
        return options

    def split_options(self) -> SplitModuleGeneratorOptions:
        if self.split.strategy == "size":
            options = ModuleGenerators.split_by_size(self.split.max)
        else:
            options = ModuleGenerators.split_by_count(self.split.max)
        options.templates_dir = self.templates_dir
        return options


def load_config(config_path: Path) -> BundleConfig:
    """Load configuration from disk; a missing file yields the defaults."""
    config_file = _resolve_config_path(config_path)
    base_dir = config_file.parent

    if not config_file.exists():
        return BundleConfig(base_dir=base_dir)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    root = _as_path(base_dir, data.get("root"))
    out_dir = _as_path(base_dir, data.get("out_dir"))
    templates_dir = _as_path(base_dir, data.get("templates_dir"))

    compression = (_as_str(data.get("compression")) or "noop").lower()
    if compression not in CONVERTER_NAMES:
        raise ConfigError(
            f"Unknown compression '{compression}' (expected one of: {', '.join(CONVERTER_NAMES)})"
        )

    storage = (_as_str(data.get("storage")) or "hash_map").lower()
    if storage not in ResourceStorages.names():
        raise ConfigError(
            f"Unknown storage '{storage}' (expected one of: {', '.join(ResourceStorages.names())})"
        )

    split = SplitConfig()
    split_data = _as_dict(data.get("split"))
    if split_data:
        strategy = (_as_str(split_data.get("strategy")) or split.strategy).lower()
        if strategy not in _SPLIT_STRATEGIES:
            raise ConfigError(
                f"Unknown split strategy '{strategy}' (expected one of: {', '.join(_SPLIT_STRATEGIES)})"
            )
        maximum = _as_int(split_data.get("max"))
        if "max" in split_data and (maximum is None or maximum < 1):
            raise ConfigError("split.max must be a positive integer")
        split = SplitConfig(strategy=strategy, max=maximum or split.max)

    function = FunctionConfig()
    function_data = _as_dict(data.get("function"))
    if function_data:
        annotations = function_data.get("annotations")
        function = FunctionConfig(
            name=_as_str(function_data.get("name")),
            module=_as_str(function_data.get("module")),
            filename=_as_str(function_data.get("filename")),
            package=_as_str(function_data.get("package")),
            visibility=_as_str(function_data.get("visibility")),
            annotations=_as_str_list(annotations) if annotations is not None else None,
        )

    return BundleConfig(
        base_dir=base_dir,
        root=root,
        out_dir=out_dir,
        sort=_as_bool(data.get("sort")) or False,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        compression=compression,
        storage=storage,
        split=split,
        function=function,
        templates_dir=templates_dir,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_path(base_dir: Path, value: Any) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else base_dir / path


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "BundleConfig",
    "CONFIG_FILENAME",
    "FunctionConfig",
    "SplitConfig",
    "load_config",
]
