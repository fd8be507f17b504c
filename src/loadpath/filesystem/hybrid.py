"""Hybrid virtual filesystem.

Paths under the reserved load path root are served from memory, every other
path from the host disk. This lets an embedder preload bundled sources and
native extensions while user scripts load through ordinary file reads.
"""

import logging
from typing import Optional

from ..data_models import ExtensionHook
from ..paths import WINDOWS, PathLike, display_path, load_path_root, normalize_slashes
from .base import LoadSources
from .memory import MemoryFileSystem
from .native import NativeFileSystem
from .registry import ExtensionHookTable, FeatureRegistry

logger = logging.getLogger(__name__)


class HybridFileSystem(LoadSources):
    """
    Virtual filesystem routing between a memory store and the host.

    Routing uses prefix matching on the resolved path: the reserved root and
    everything below it goes to ``memory``, anything else to ``native``. Both
    delegates share this store's feature registry and extension hook table, so
    a feature is required at most once whichever delegate served it.

    Example:
        >>> fs = HybridFileSystem()
        >>> fs.write("json.rb", b"module JSON; end")
        >>> fs.served_by("/artichoke/virtual_root/src/lib/json.rb")
        'memory'
        >>> fs.served_by("/tmp/script.rb")
        'native'
    """

    name = "hybrid"

    def __init__(
        self,
        cwd: Optional[PathLike] = None,
        flavor: Optional[str] = None,
        native_cwd: Optional[PathLike] = None,
    ) -> None:
        """
        Initialize the hybrid filesystem.

        Args:
            cwd: Working directory (default: the reserved load path root)
            flavor: Path flavor, None for the host's
            native_cwd: Working directory of the native delegate (default: the
                host process cwd)
        """
        root = load_path_root(flavor)
        super().__init__(
            cwd if cwd is not None else root,
            flavor=flavor,
            features=FeatureRegistry(),
            extensions=ExtensionHookTable(),
        )
        self.memory = MemoryFileSystem(
            cwd=root,
            flavor=self.flavor,
            features=self.features,
            extensions=self.extensions,
        )
        self.native = NativeFileSystem(
            cwd=native_cwd,
            flavor=self.flavor,
            features=self.features,
            extensions=self.extensions,
        )
        self._root_key = normalize_slashes(root, self.flavor)
        logger.info(
            f"Hybrid filesystem ready: memory at {root}, native elsewhere",
            extra={"store": self.name},
        )

    def _under_root(self, key: bytes) -> bool:
        return key == self._root_key or key.startswith(self._root_key + b"/")

    def resolve(self, path: PathLike) -> bytes:
        """
        Resolve ``path`` into its canonical key.

        On nt, a key under the reserved root takes the root's lowercase drive
        letter, so ``C:/...`` and ``c:/...`` name the same memory entry.
        """
        key = super().resolve(path)
        if self.flavor == WINDOWS and key[1:2] == b":":
            folded = key[:1].lower() + key[1:]
            if self._under_root(folded):
                return folded
        return key

    def delegate_for(self, key: bytes) -> LoadSources:
        """Return the delegate serving an already resolved key."""
        if self._under_root(key):
            delegate: LoadSources = self.memory
        else:
            delegate = self.native
        logger.debug(f"Routing {display_path(key)} to {delegate.name}", extra={"store": self.name})
        return delegate

    def served_by(self, path: PathLike) -> str:
        return self.delegate_for(self.resolve(path)).name

    def feature_key(self, key: bytes) -> bytes:
        return self.delegate_for(key).feature_key(key)

    def _exists(self, key: bytes) -> bool:
        return self.delegate_for(key)._exists(key)

    def _is_directory(self, key: bytes) -> bool:
        return self.delegate_for(key)._is_directory(key)

    def _read(self, key: bytes) -> bytes:
        return self.delegate_for(key)._read(key)

    def _write(self, key: bytes, data: bytes) -> None:
        self.delegate_for(key)._write(key, data)

    def _register_extension(self, key: bytes, hook: ExtensionHook) -> None:
        self.delegate_for(key)._register_extension(key, hook)
