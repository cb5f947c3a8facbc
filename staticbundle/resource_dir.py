"""Builder-style entry point for build scripts.

```python
# Generate resources for ./web/dist into generated.py (function ``generate``)
# stored below the directory named by STATICBUNDLE_OUT_DIR.
from staticbundle import resource_dir

resource_dir("./web/dist").build()
```
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

from .convert import Converter, NoopConverter
from .discovery import PathFilter, ResourceFiles
from .generate import GenerationResult, ModuleGenerators
from .options import FunctionOptions
from .storage import ResourceStorage, ResourceStorages

DEFAULT_SPLIT_COUNT = 256


def resource_dir(root: Union[str, Path]) -> "ResourceDir":
    """Start configuring generation for ``root``."""
    return ResourceDir(Path(root))


class ResourceDir:
    """Chainable generation settings for one resource directory."""

    def __init__(self, root: Path) -> None:
        self.root = root
        self.filter: Optional[PathFilter] = None
        self.sort = False
        self.split_count = DEFAULT_SPLIT_COUNT
        self.storage: Optional[ResourceStorage] = None
        self.converter: Converter = NoopConverter()
        self.options = FunctionOptions()

    def with_filter(self, filter: PathFilter) -> "ResourceDir":
        self.filter = filter
        return self

    def with_generated_filename(self, generated_filename: Union[str, Path]) -> "ResourceDir":
        """Set the generated file; a path with a parent also sets the output root."""
        generated = Path(generated_filename)
        self.options = self.options.with_filename(generated.name)
        if generated.parent != Path("."):
            self.options = self.options.with_path(generated.parent)
        return self

    def with_generated_fn(self, generated_fn: str) -> "ResourceDir":
        self.options = self.options.with_name(generated_fn)
        return self

    def with_module_name(self, module_name: str) -> "ResourceDir":
        self.options = self.options.with_module_name(module_name)
        return self

    def with_sort(self, sort: bool = True) -> "ResourceDir":
        self.sort = sort
        return self

    def with_split_count(self, count: int) -> "ResourceDir":
        self.split_count = count
        return self

    def with_storage(self, storage: ResourceStorage) -> "ResourceDir":
        self.storage = storage
        return self

    def with_converter(self, converter: Converter) -> "ResourceDir":
        self.converter = converter
        return self

    def build(self) -> GenerationResult:
        """Generate resources for the current configuration."""
        storage = self.storage or ResourceStorages.hash_map()
        return (
            ResourceFiles(self.root, filter=self.filter, sort=self.sort)
            .convert(self.converter)
            .generate(storage)
            .module_generator(ModuleGenerators.split_by_count(self.split_count))
            .write_function(self.options)
        )


__all__ = ["DEFAULT_SPLIT_COUNT", "ResourceDir", "resource_dir"]
