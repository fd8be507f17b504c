"""In-memory virtual filesystem.

Sources and extension hooks are kept in process memory under their canonical
paths. Nothing is ever read from or written to the host disk.
"""

import logging
from typing import Dict, Optional, Set

from ..data_models import Directory, Entry, ExtensionHook, ExtensionHookEntry, SourceText
from ..exceptions import PathIsADirectoryError, PathNotADirectoryError, PathNotFoundError
from ..paths import PathLike, display_path, is_root, load_path_root, parents
from .base import LoadSources
from .registry import ExtensionHookTable, FeatureRegistry

logger = logging.getLogger(__name__)


class MemoryFileSystem(LoadSources):
    """
    Virtual filesystem backed by a map from canonical path to entry.

    Each path holds at most one of source text or an extension hook; the last
    ``write`` or ``register_extension`` wins. Writing an entry records every
    ancestor as a directory, so ``is_directory`` answers for intermediate paths
    without any explicit ``mkdir``.

    Example:
        >>> fs = MemoryFileSystem()
        >>> fs.write("set.rb", b"class Set; end")
        >>> fs.exists("/artichoke/virtual_root/src/lib/set.rb")
        True
        >>> fs.is_directory("/artichoke/virtual_root")
        True
    """

    name = "memory"

    def __init__(
        self,
        cwd: Optional[PathLike] = None,
        flavor: Optional[str] = None,
        features: Optional[FeatureRegistry] = None,
        extensions: Optional[ExtensionHookTable] = None,
    ) -> None:
        """
        Initialize an empty memory filesystem.

        Args:
            cwd: Working directory (default: the reserved load path root)
            flavor: Path flavor, None for the host's
            features: Feature registry to share, or None for a private one
            extensions: Extension hook table to share, or None for a private one
        """
        super().__init__(
            cwd if cwd is not None else load_path_root(flavor),
            flavor=flavor,
            features=features,
            extensions=extensions,
        )
        self._sources: Dict[bytes, bytes] = {}
        self._directories: Set[bytes] = set()

    def entry(self, path: PathLike) -> Optional[Entry]:
        """Return the entry stored at ``path``, or None if there is none."""
        key = self.resolve(path)
        if key in self._sources:
            return SourceText(self._sources[key])
        hook = self.extensions.get(key)
        if hook is not None:
            return ExtensionHookEntry(hook)
        if self._is_directory(key):
            return Directory()
        return None

    def _exists(self, key: bytes) -> bool:
        return key in self._sources or key in self.extensions or self._is_directory(key)

    def _is_directory(self, key: bytes) -> bool:
        return key in self._directories or is_root(key)

    def _read(self, key: bytes) -> bytes:
        try:
            return self._sources[key]
        except KeyError:
            pass
        if self._is_directory(key):
            raise PathIsADirectoryError(f"Is a directory: {display_path(key)}", path=key)
        raise PathNotFoundError(f"No such file: {display_path(key)}", path=key)

    def _check_insert(self, key: bytes) -> None:
        if self._is_directory(key):
            raise PathIsADirectoryError(f"Cannot replace directory {display_path(key)} with a file", path=key)
        for parent in parents(key):
            if parent in self._sources or parent in self.extensions:
                raise PathNotADirectoryError(
                    f"Parent {display_path(parent)} of {display_path(key)} is not a directory", path=key
                )

    def _write(self, key: bytes, data: bytes) -> None:
        self._check_insert(key)
        self.extensions.remove(key)
        self._sources[key] = data
        self._directories.update(parents(key))
        logger.debug(f"Wrote {len(data)} bytes to {display_path(key)}", extra={"store": self.name})

    def _register_extension(self, key: bytes, hook: ExtensionHook) -> None:
        self._check_insert(key)
        self._sources.pop(key, None)
        self.extensions.insert(key, hook)
        self._directories.update(parents(key))
