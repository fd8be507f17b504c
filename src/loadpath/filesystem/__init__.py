"""Virtual filesystem strategies backing the interpreter's load builtins.

The strategy is picked once, when the store is built:

Example:
    >>> from loadpath.config import LoadPathConfig
    >>> from loadpath.filesystem import create_filesystem
    >>> fs = create_filesystem(LoadPathConfig(backend="memory"))
    >>> fs.write("set.rb", b"class Set; end")
    >>> fs.read("/artichoke/virtual_root/src/lib/set.rb")
    b'class Set; end'
"""

import logging
from typing import TYPE_CHECKING, Optional

from ..exceptions import LoadPathConfigurationError
from .base import LoadSources
from .hybrid import HybridFileSystem
from .memory import MemoryFileSystem
from .native import NativeFileSystem
from .registry import ExtensionHookTable, FeatureRegistry
from .search_path import SearchPathFileSystem

if TYPE_CHECKING:  # pragma: no cover
    from ..config import LoadPathConfig

logger = logging.getLogger(__name__)


def create_filesystem(config: Optional["LoadPathConfig"] = None) -> LoadSources:
    """
    Build the virtual filesystem selected by ``config``.

    Args:
        config: Configuration (if None, uses defaults: a hybrid store)

    Returns:
        A configured store

    Raises:
        LoadPathConfigurationError: If the backend name is unknown
    """
    if config is None:
        from ..config import LoadPathConfig

        config = LoadPathConfig()

    if config.backend == "memory":
        filesystem: LoadSources = MemoryFileSystem(cwd=config.cwd, flavor=config.flavor)
    elif config.backend == "native":
        filesystem = NativeFileSystem(cwd=config.cwd, flavor=config.flavor)
    elif config.backend == "hybrid":
        filesystem = HybridFileSystem(cwd=config.cwd, flavor=config.flavor)
    elif config.backend == "search_path":
        filesystem = SearchPathFileSystem(config.search_paths, flavor=config.flavor)
    else:
        raise LoadPathConfigurationError(
            f"Unknown filesystem backend '{config.backend}'",
            config_field="backend",
            config_value=config.backend,
        )

    logger.info(f"Created {filesystem!r}", extra={"store": filesystem.name})
    return filesystem


__all__ = [
    "LoadSources",
    "MemoryFileSystem",
    "NativeFileSystem",
    "HybridFileSystem",
    "SearchPathFileSystem",
    "FeatureRegistry",
    "ExtensionHookTable",
    "create_filesystem",
]
