"""
Base class for virtual filesystem strategies.

Every store exposes the same capability set: ``exists``, ``is_directory``,
``read``, ``write``, ``register_extension``, ``require`` and ``load``. Public
methods take any path spelling, resolve it against the store's working
directory, and hand the canonical key to the strategy-specific ``_``-prefixed
primitive. Backends never see an unresolved relative path.
"""

import logging
import os
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

from ..data_models import ExtensionHook, LoadResult
from ..exceptions import HookFailureError, LoadPathError
from ..paths import PathLike, check_flavor, display_path, resolve_path
from .registry import ExtensionHookTable, FeatureRegistry

if TYPE_CHECKING:  # pragma: no cover
    from ..interpreter import Interpreter

logger = logging.getLogger(__name__)


class LoadSources(ABC):
    """
    Abstract virtual filesystem used by the interpreter's load builtins.

    Subclasses implement the key-level primitives. The require/load protocol
    lives here so every strategy enforces the same guarantees: a required
    feature runs at most once, a failed require leaves nothing registered, and
    an extension hook always wins over source text at the same path.
    """

    name: str = "base"

    def __init__(
        self,
        cwd: PathLike,
        flavor: Optional[str] = None,
        features: Optional[FeatureRegistry] = None,
        extensions: Optional[ExtensionHookTable] = None,
    ) -> None:
        """
        Initialize the store.

        Args:
            cwd: Working directory relative paths are resolved against
            flavor: Path flavor ("posix" or "nt"), None for the host's
            features: Feature registry to use (shared by composed stores)
            extensions: Extension hook table to use (shared by composed stores)
        """
        self.flavor = check_flavor(flavor)
        self._cwd = os.fsdecode(os.fspath(cwd))
        self.features = features if features is not None else FeatureRegistry()
        self.extensions = extensions if extensions is not None else ExtensionHookTable()

    @property
    def cwd(self) -> str:
        return self._cwd

    def resolve(self, path: PathLike) -> bytes:
        """Resolve ``path`` against this store's cwd into its canonical key."""
        return resolve_path(path, self._cwd, self.flavor)

    # ========== Capability set ==========

    def exists(self, path: PathLike) -> bool:
        return self._exists(self.resolve(path))

    def is_directory(self, path: PathLike) -> bool:
        return self._is_directory(self.resolve(path))

    def read(self, path: PathLike) -> bytes:
        """
        Read the source bytes stored at ``path``.

        Raises:
            PathNotFoundError: If there is no source at the path
            PathIsADirectoryError: If the path is a directory
        """
        return self._read(self.resolve(path))

    def write(self, path: PathLike, data: bytes) -> None:
        """
        Store ``data`` at ``path``, replacing any source or hook there.

        Raises:
            TypeError: If ``data`` is not a bytes-like object
        """
        self._write(self.resolve(path), memoryview(data).tobytes())

    def register_extension(self, path: PathLike, hook: ExtensionHook) -> None:
        """Install ``hook`` at ``path``, replacing any source or hook there."""
        self._register_extension(self.resolve(path), hook)

    def get_extension(self, path: PathLike) -> Optional[ExtensionHook]:
        return self.extensions.get(self.resolve(path))

    def is_required(self, path: PathLike) -> bool:
        return self.feature_key(self.resolve(path)) in self.features

    def served_by(self, path: PathLike) -> str:
        """Describe which backend answers for ``path``."""
        return self.name

    def require(self, path: PathLike, interp: "Interpreter") -> LoadResult:
        """
        Execute the feature at ``path`` unless it was already required.

        The feature registry is updated only after the hook or source ran to
        completion, so a failing require can be retried.

        Returns:
            LoadResult.LOADED or LoadResult.ALREADY_LOADED
        """
        key = self.resolve(path)
        return self._require_key(key, interp)

    def load(self, path: PathLike, interp: "Interpreter") -> LoadResult:
        """Execute the feature at ``path`` unconditionally."""
        key = self.resolve(path)
        return self._load_key(key, interp)

    # ========== Shared protocol ==========

    def feature_key(self, key: bytes) -> bytes:
        """Return the feature registry key for a resolved path."""
        return key

    def _require_key(self, key: bytes, interp: "Interpreter") -> LoadResult:
        feature = self.feature_key(key)
        if feature in self.features:
            logger.debug(f"Already loaded: {display_path(key)}", extra={"store": self.name})
            return LoadResult.ALREADY_LOADED
        self._execute(key, interp)
        self.features.mark_loaded(feature)
        return LoadResult.LOADED

    def _load_key(self, key: bytes, interp: "Interpreter") -> LoadResult:
        self._execute(key, interp)
        return LoadResult.EXECUTED

    def _execute(self, key: bytes, interp: "Interpreter") -> None:
        hook = self.extensions.get(key)
        if hook is not None:
            self._run_hook(key, hook, interp)
            return
        source = self._read(key)
        interp.eval_source(source, os.fsdecode(key))

    def _run_hook(self, key: bytes, hook: ExtensionHook, interp: "Interpreter") -> None:
        hook_name = getattr(hook, "__qualname__", None) or repr(hook)
        logger.debug(f"Running extension hook {hook_name} for {display_path(key)}", extra={"store": self.name})
        try:
            hook(interp)
        except LoadPathError:
            # nested require/load failures keep their own kind
            raise
        except Exception as exc:
            logger.warning(
                f"Extension hook {hook_name} failed for {display_path(key)}: {exc}",
                extra={"store": self.name},
            )
            raise HookFailureError(
                f"Extension hook {hook_name} failed: {exc}",
                hook_name=hook_name,
                path=key,
            ) from exc

    # ========== Strategy primitives ==========

    @abstractmethod
    def _exists(self, key: bytes) -> bool:
        pass

    @abstractmethod
    def _is_directory(self, key: bytes) -> bool:
        pass

    @abstractmethod
    def _read(self, key: bytes) -> bytes:
        pass

    @abstractmethod
    def _write(self, key: bytes, data: bytes) -> None:
        pass

    @abstractmethod
    def _register_extension(self, key: bytes, hook: ExtensionHook) -> None:
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(cwd={self._cwd!r}, flavor={self.flavor!r})"
