"""Emission options for generated resource functions."""

from __future__ import annotations

import keyword
import os
import re
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple, Union

from .errors import ConfigError, UnresolvedOutputLocation

OUT_DIR_ENV = "STATICBUNDLE_OUT_DIR"

DEFAULT_FUNCTION_NAME = "generate"
DEFAULT_FILENAME = "generated.py"
DEFAULT_MODULE_NAME = "sets"
DEFAULT_ANNOTATIONS: Tuple[str, ...] = ("# flake8: noqa",)
VISIBILITIES = ("public", "private")

# Aliases bound inside generated modules (helpers and the index variable).
_RESERVED_NAMES = frozenset({"n", "e", "r", "Dict", "Resource", "EncodedResource", "ResourceTree"})
_SUB_UNIT_NAME = re.compile(r"set_\d+")


@dataclass(frozen=True)
class ResolvedFunctionOptions:
    """Fully resolved, read-only emission settings for one generation run."""

    name: str
    output_root: Path
    filename: str
    module_name: str
    package: Optional[str]
    annotations: Tuple[str, ...]
    visibility: str

    @property
    def top_level_path(self) -> Path:
        return self.output_root / self.filename

    @property
    def module_dir(self) -> Path:
        return self.output_root / self.module_name

    @property
    def import_path(self) -> str:
        if self.package:
            return f"{self.package}.{self.module_name}"
        return self.module_name

    @property
    def exported(self) -> bool:
        return self.visibility == "public"


@dataclass(frozen=True)
class FunctionOptions:
    """Builder for :class:`ResolvedFunctionOptions`; unset fields take defaults."""

    name: Optional[str] = None
    path: Optional[Path] = None
    filename: Optional[str] = None
    module_name: Optional[str] = None
    package: Optional[str] = None
    annotations: Optional[Tuple[str, ...]] = None
    visibility: Optional[str] = None

    @classmethod
    def from_value(cls, value: Union["FunctionOptions", str, None]) -> "FunctionOptions":
        if value is None:
            return cls()
        if isinstance(value, FunctionOptions):
            return value
        return cls(name=value)

    def with_name(self, name: str) -> "FunctionOptions":
        return replace(self, name=name)

    def with_path(self, path: Union[str, Path]) -> "FunctionOptions":
        return replace(self, path=Path(path))

    def with_filename(self, filename: str) -> "FunctionOptions":
        return replace(self, filename=filename)

    def with_module_name(self, module_name: str) -> "FunctionOptions":
        return replace(self, module_name=module_name)

    def with_package(self, package: Optional[str]) -> "FunctionOptions":
        return replace(self, package=package)

    def with_annotations(self, *annotations: str) -> "FunctionOptions":
        return replace(self, annotations=tuple(annotations))

    def with_visibility(self, visibility: str) -> "FunctionOptions":
        return replace(self, visibility=visibility)

    def resolve(self, environ: Optional[Mapping[str, str]] = None) -> ResolvedFunctionOptions:
        """Apply defaults once; reads ``STATICBUNDLE_OUT_DIR`` when no path is set."""
        env = os.environ if environ is None else environ

        if self.path is not None:
            output_root = Path(self.path)
        else:
            out_dir = env.get(OUT_DIR_ENV)
            if not out_dir:
                raise UnresolvedOutputLocation(
                    f"No output directory configured; pass a path or set {OUT_DIR_ENV}"
                )
            output_root = Path(out_dir)

        name = self.name or DEFAULT_FUNCTION_NAME
        module_name = self.module_name or DEFAULT_MODULE_NAME
        _require_identifier(name, "function name")
        _require_identifier(module_name, "module name")
        if name in _RESERVED_NAMES:
            raise ConfigError(f"Function name {name!r} clashes with a generated helper alias")
        if _SUB_UNIT_NAME.fullmatch(name):
            raise ConfigError(f"Function name {name!r} clashes with a generated sub-unit module")
        if self.package:
            for part in self.package.split("."):
                _require_identifier(part, "package")

        filename = self.filename or DEFAULT_FILENAME
        if not filename.endswith(".py") or Path(filename).name != filename:
            raise ConfigError(f"Generated filename must be a bare '.py' file name: {filename!r}")
        if Path(filename).stem == module_name:
            raise ConfigError(
                f"Generated filename {filename!r} would shadow the '{module_name}' module"
            )

        visibility = (self.visibility or "public").lower()
        if visibility not in VISIBILITIES:
            raise ConfigError(
                f"Unknown visibility {self.visibility!r} (expected one of: {', '.join(VISIBILITIES)})"
            )

        annotations = DEFAULT_ANNOTATIONS if self.annotations is None else self.annotations
        for line in annotations:
            if not line.startswith("#"):
                raise ConfigError(f"Annotations must be comment lines: {line!r}")

        return ResolvedFunctionOptions(
            name=name,
            output_root=output_root.expanduser(),
            filename=filename,
            module_name=module_name,
            package=self.package or None,
            annotations=tuple(annotations),
            visibility=visibility,
        )


def _require_identifier(value: str, label: str) -> None:
    if not value.isidentifier() or keyword.iskeyword(value):
        raise ConfigError(f"Invalid {label}: {value!r} is not a Python identifier")


__all__ = [
    "DEFAULT_ANNOTATIONS",
    "DEFAULT_FILENAME",
    "DEFAULT_FUNCTION_NAME",
    "DEFAULT_MODULE_NAME",
    "FunctionOptions",
    "OUT_DIR_ENV",
    "ResolvedFunctionOptions",
    "VISIBILITIES",
]
