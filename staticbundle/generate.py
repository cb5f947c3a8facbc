"""Module generation: split a resource stream into emitted Python units."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Callable, Iterable, List, Optional, Union

from .errors import FilesystemError
from .logging import get_logger
from .models import ResourcePrototype
from .options import FunctionOptions, ResolvedFunctionOptions
from .render import TemplateRenderer
from .sets import SplitByCount, SplitBySize, SplitStrategy
from .storage import ResourceStorage

_logger = get_logger("generate")

AGGREGATE_FILENAME = "__init__.py"


@dataclass(frozen=True)
class UnitSummary:
    """A fully written sub-unit file."""

    ordinal: int
    path: Path
    entries: int


@dataclass
class GenerationResult:
    """Files produced by one generation run."""

    top_level: Path
    module_dir: Optional[Path]
    units: List[UnitSummary] = field(default_factory=list)
    resource_count: int = 0

    @property
    def entry_counts(self) -> List[int]:
        return [unit.entries for unit in self.units]


class Generate:
    """A resource stream bound to the storage descriptor used for emission."""

    def __init__(self, stream: Iterable[object], storage: ResourceStorage) -> None:
        self.stream = stream
        self.storage = storage

    def module_generator(self, options: "ModuleGeneratorOptions") -> "SplitModuleGenerator":
        return options.build(self)


class ModuleGeneratorOptions(ABC):
    """Builds a module generator for a bound :class:`Generate` pipeline."""

    @abstractmethod
    def build(self, generate: Generate) -> "SplitModuleGenerator":
        """Return the generator implementation for ``generate``."""


class SplitModuleGeneratorOptions(ModuleGeneratorOptions):
    def __init__(
        self,
        strategy_factory: Callable[[], SplitStrategy],
        *,
        templates_dir: Optional[Path] = None,
    ) -> None:
        self.strategy_factory = strategy_factory
        self.templates_dir = templates_dir

    def build(self, generate: Generate) -> "SplitModuleGenerator":
        return SplitModuleGenerator(
            generate,
            self.strategy_factory(),
            renderer=TemplateRenderer(self.templates_dir),
        )


class ModuleGenerators:
    """Factory helpers for module generator options."""

    @staticmethod
    def split_by_count(count: int) -> SplitModuleGeneratorOptions:
        if count < 1:
            raise ValueError("split_by_count requires a positive count")
        return SplitModuleGeneratorOptions(lambda: SplitByCount(count))

    @staticmethod
    def split_by_size(max_bytes: int) -> SplitModuleGeneratorOptions:
        if max_bytes < 1:
            raise ValueError("split_by_size requires a positive byte budget")
        return SplitModuleGeneratorOptions(lambda: SplitBySize(max_bytes))

    @staticmethod
    def with_strategy(strategy: SplitStrategy) -> SplitModuleGeneratorOptions:
        return SplitModuleGeneratorOptions(lambda: strategy)


class ModulePrototype:
    """One emitted sub-unit while it is being written.

    The file is opened by :meth:`open`, receives insertion statements through
    :meth:`write_entry` and is released by :meth:`close`.
    """

    def __init__(self, unit_name: str, ordinal: int) -> None:
        self.unit_name = unit_name
        self.ordinal = ordinal
        self.entries = 0
        self.path: Optional[Path] = None
        self._handle: Optional[IO[str]] = None

    def open(self, directory: Path, preamble: str) -> None:
        self.path = directory / f"{self.unit_name}.py"
        try:
            self._handle = self.path.open("w", encoding="utf-8", newline="\n")
            self._handle.write(preamble)
        except OSError as exc:
            self.discard()
            raise FilesystemError(f"Failed to write {self.path}: {exc}", self.path) from exc

    def write_entry(self, statement: str) -> None:
        if self._handle is None:
            raise RuntimeError(f"{self.unit_name} is not open")
        try:
            self._handle.write(f"    {statement}\n")
        except OSError as exc:
            raise FilesystemError(f"Failed to write {self.path}: {exc}", self.path) from exc
        self.entries += 1

    def close(self) -> UnitSummary:
        if self._handle is None or self.path is None:
            raise RuntimeError(f"{self.unit_name} is not open")
        handle, self._handle = self._handle, None
        try:
            handle.close()
        except OSError as exc:
            raise FilesystemError(f"Failed to write {self.path}: {exc}", self.path) from exc
        return UnitSummary(ordinal=self.ordinal, path=self.path, entries=self.entries)

    def discard(self) -> None:
        """Release the file handle after a failure; the partial file stays on disk."""
        if self._handle is not None:
            handle, self._handle = self._handle, None
            handle.close()


class SplitModuleGenerator:
    """Writes resources into ``set_<n>.py`` units, splitting per strategy."""

    def __init__(
        self,
        generate: Generate,
        strategy: SplitStrategy,
        *,
        renderer: Optional[TemplateRenderer] = None,
    ) -> None:
        self.stream = generate.stream
        self.storage = generate.storage
        self.strategy = strategy
        self.renderer = renderer or TemplateRenderer()

    def write_function(
        self, options: Union[FunctionOptions, str, None] = None
    ) -> GenerationResult:
        """Consume the stream and write the generated module tree.

        Raises :class:`~staticbundle.errors.StaticBundleError` subclasses on the
        first failure; files written before the failure are left in place.
        """
        resolved = FunctionOptions.from_value(options).resolve()
        _logger.debug(
            "Generating '%s' into %s (module %s)",
            resolved.name,
            resolved.output_root,
            resolved.module_name,
        )

        units = self._write_units(resolved)
        resource_count = sum(unit.entries for unit in units)

        if units:
            self._write_file(
                resolved.module_dir / AGGREGATE_FILENAME,
                self._render(
                    "aggregate.py.j2",
                    resolved,
                    ordinals=[unit.ordinal for unit in units],
                    resource_count=resource_count,
                ),
            )
            self._write_file(
                resolved.top_level_path,
                self._render("top_level.py.j2", resolved, import_path=resolved.import_path),
            )
            module_dir: Optional[Path] = resolved.module_dir
        else:
            _logger.info("No resources discovered; emitting an empty index")
            self._write_file(
                resolved.top_level_path,
                self._render("top_level_empty.py.j2", resolved),
            )
            module_dir = None

        _logger.info(
            "Generated %d resources in %d sets at %s",
            resource_count,
            len(units),
            resolved.top_level_path,
        )
        return GenerationResult(
            top_level=resolved.top_level_path,
            module_dir=module_dir,
            units=units,
            resource_count=resource_count,
        )

    def _write_units(self, resolved: ResolvedFunctionOptions) -> List[UnitSummary]:
        storage = self.storage
        strategy = self.strategy
        strategy.reset()

        units: List[UnitSummary] = []
        current: Optional[ModulePrototype] = None
        ordinal = 1
        try:
            for item in self.stream:
                if isinstance(item, FilesystemError):
                    raise item
                prototype: ResourcePrototype = item  # type: ignore[assignment]
                statement = storage.insert_statement(storage.variable_name, prototype)

                if current is None:
                    if ordinal == 1:
                        _make_dirs(resolved.module_dir)
                        self._retire_entry_points(resolved)
                    current = ModulePrototype(f"set_{ordinal}", ordinal)
                    current.open(
                        resolved.module_dir,
                        self._render("sub_unit.py.j2", resolved, ordinal=ordinal),
                    )

                current.write_entry(statement)
                strategy.register(prototype)
                if strategy.should_split():
                    units.append(self._close(current))
                    current = None
                    strategy.reset()
                    ordinal += 1

            if current is not None:
                units.append(self._close(current))
                current = None
        finally:
            if current is not None:
                current.discard()
        return units

    @staticmethod
    def _retire_entry_points(resolved: ResolvedFunctionOptions) -> None:
        """Remove a previous run's aggregate and top-level files.

        Sub-units are rewritten in place, so the old entry points must not
        survive a run that fails before writing new ones.
        """
        for path in (resolved.module_dir / AGGREGATE_FILENAME, resolved.top_level_path):
            try:
                path.unlink(missing_ok=True)
            except OSError as exc:
                raise FilesystemError(f"Failed to remove {path}: {exc}", path) from exc

    @staticmethod
    def _close(unit: ModulePrototype) -> UnitSummary:
        summary = unit.close()
        _logger.debug("Wrote %s with %d resources", summary.path.name, summary.entries)
        return summary

    def _render(self, template_name: str, resolved: ResolvedFunctionOptions, **context: object) -> str:
        storage = self.storage
        return self.renderer.render(
            template_name,
            annotations=resolved.annotations,
            imports=storage.imports,
            type_name=storage.type_name,
            constructor=storage.constructor,
            variable=storage.variable_name,
            name=resolved.name,
            module_name=resolved.module_name,
            exported=resolved.exported,
            **context,
        )

    @staticmethod
    def _write_file(path: Path, content: str) -> None:
        _make_dirs(path.parent)
        try:
            with path.open("w", encoding="utf-8", newline="\n") as handle:
                handle.write(content)
        except OSError as exc:
            raise FilesystemError(f"Failed to write {path}: {exc}", path) from exc


def _make_dirs(directory: Path) -> None:
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise FilesystemError(f"Failed to create directory {directory}: {exc}", directory) from exc


__all__ = [
    "AGGREGATE_FILENAME",
    "Generate",
    "GenerationResult",
    "ModuleGeneratorOptions",
    "ModuleGenerators",
    "ModulePrototype",
    "SplitModuleGenerator",
    "SplitModuleGeneratorOptions",
    "UnitSummary",
]
