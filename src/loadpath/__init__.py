"""
loadpath - Virtual filesystem and load path resolution

Backs an embedded interpreter's ``require``/``load``/``require_relative``
builtins with interchangeable stores: in-memory, host filesystem, a hybrid of
the two, and an ordered search path.

License: Apache-2.0
"""

__version__ = "0.1.0"

from .config import LoadPathConfig
from .data_models import (
    Directory,
    Entry,
    ExtensionHook,
    ExtensionHookEntry,
    LoadResult,
    SourceText,
)
from .exceptions import (
    HookFailureError,
    HostIOError,
    LoadPathConfigurationError,
    LoadPathError,
    PathEncodingError,
    PathIsADirectoryError,
    PathNotADirectoryError,
    PathNotFoundError,
    PathPermissionError,
    UnsupportedOperationError,
)
from .filesystem import (
    ExtensionHookTable,
    FeatureRegistry,
    HybridFileSystem,
    LoadSources,
    MemoryFileSystem,
    NativeFileSystem,
    SearchPathFileSystem,
    create_filesystem,
)
from .interpreter import Interpreter
from .paths import (
    RUBY_LOAD_PATH,
    absolutize_relative_to,
    load_path_root,
    normalize_slashes,
    resolve_path,
)

__all__ = [
    # Version
    "__version__",
    # Paths
    "RUBY_LOAD_PATH",
    "absolutize_relative_to",
    "load_path_root",
    "normalize_slashes",
    "resolve_path",
    # Stores
    "LoadSources",
    "MemoryFileSystem",
    "NativeFileSystem",
    "HybridFileSystem",
    "SearchPathFileSystem",
    "FeatureRegistry",
    "ExtensionHookTable",
    "create_filesystem",
    "LoadPathConfig",
    # Interpreter
    "Interpreter",
    # Data models
    "Entry",
    "SourceText",
    "ExtensionHookEntry",
    "Directory",
    "ExtensionHook",
    "LoadResult",
    # Errors
    "LoadPathError",
    "PathNotFoundError",
    "PathIsADirectoryError",
    "PathNotADirectoryError",
    "PathEncodingError",
    "PathPermissionError",
    "HostIOError",
    "HookFailureError",
    "UnsupportedOperationError",
    "LoadPathConfigurationError",
]
