"""Embed static files into generated Python modules at build time.

```python
from staticbundle import FunctionOptions, GzipConverter, ModuleGenerators, ResourceFiles, ResourceStorages

(
    ResourceFiles("./web/dist", sort=True)
    .compress(GzipConverter())
    .generate(ResourceStorages.encoded_hash_map())
    .module_generator(ModuleGenerators.split_by_count(100))
    .write_function(FunctionOptions().with_name("generate").with_path("build/generated"))
)
```
"""

from .convert import (
    ConvertAdapter,
    Converter,
    DeflateConverter,
    FunctionConverter,
    GzipConverter,
    IdentityConverter,
    NoopConverter,
)
from .discovery import ResourceFiles, exclude_filter, guess_mime_type
from .errors import (
    ConfigError,
    DirectoryReadError,
    FilesystemError,
    StaticBundleError,
    UnresolvedOutputLocation,
    UnsupportedResourceVariant,
)
from .generate import GenerationResult, ModuleGenerators, ModulePrototype, UnitSummary
from .models import DiscoveredFile, Encoding, ResourcePrototype, TransformedFile
from .options import FunctionOptions, OUT_DIR_ENV
from .resource import EncodedResource, Resource, ResourceTree
from .resource_dir import ResourceDir, resource_dir
from .sets import SplitByCount, SplitBySize, SplitStrategy
from .storage import EncodedHashMapStorage, HashMapStorage, ResourceStorage, ResourceStorages, TreeStorage

__all__ = [
    "ConfigError",
    "ConvertAdapter",
    "Converter",
    "DeflateConverter",
    "DirectoryReadError",
    "DiscoveredFile",
    "EncodedHashMapStorage",
    "EncodedResource",
    "Encoding",
    "FilesystemError",
    "FunctionConverter",
    "FunctionOptions",
    "GenerationResult",
    "GzipConverter",
    "HashMapStorage",
    "IdentityConverter",
    "ModuleGenerators",
    "ModulePrototype",
    "NoopConverter",
    "OUT_DIR_ENV",
    "Resource",
    "ResourceDir",
    "ResourceFiles",
    "ResourcePrototype",
    "ResourceStorage",
    "ResourceStorages",
    "ResourceTree",
    "SplitByCount",
    "SplitBySize",
    "SplitStrategy",
    "StaticBundleError",
    "TransformedFile",
    "TreeStorage",
    "UnitSummary",
    "UnresolvedOutputLocation",
    "UnsupportedResourceVariant",
    "exclude_filter",
    "guess_mime_type",
    "resource_dir",
]
