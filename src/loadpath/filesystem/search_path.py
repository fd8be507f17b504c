"""Search-path virtual filesystem.

An ordered list of host directories is searched for every path; the first
directory containing it wins, much like a ``RUBYLIB`` or ``PATH`` lookup.
"""

import logging
import os
from typing import TYPE_CHECKING, List, Mapping, Optional, Sequence, Tuple

from ..data_models import ExtensionHook, LoadResult
from ..exceptions import PathNotFoundError, UnsupportedOperationError
from ..paths import PathLike, check_flavor, display_path
from .base import LoadSources
from .native import NativeFileSystem
from .registry import FeatureRegistry

if TYPE_CHECKING:  # pragma: no cover
    from ..interpreter import Interpreter

logger = logging.getLogger(__name__)

SEARCH_PATH_ENV_VAR = "RUBYLIB"


def search_paths_from_env(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Split the ``RUBYLIB`` environment variable into search roots."""
    environ = os.environ if environ is None else environ
    value = environ.get(SEARCH_PATH_ENV_VAR, "")
    return [entry for entry in value.split(os.pathsep) if entry]


class SearchPathFileSystem(LoadSources):
    """
    Virtual filesystem over an ordered sequence of host root directories.

    Each root is an independent native store whose working directory is the
    root itself. Relative paths are resolved against every root in order and
    absolute paths are checked as-is. All roots share one feature registry,
    keyed on the host-canonical path.

    The roots are read-only: ``write`` and ``register_extension`` raise
    ``UnsupportedOperationError``.
    """

    name = "search_path"

    def __init__(
        self,
        roots: Sequence[PathLike],
        flavor: Optional[str] = None,
    ) -> None:
        """
        Initialize the search-path filesystem.

        Args:
            roots: Host directories, highest priority first. Relative roots are
                made absolute against the host process cwd.
            flavor: Path flavor, None for the host's
        """
        flavor = check_flavor(flavor)
        absolute_roots = [os.path.abspath(os.fsdecode(os.fspath(root))) for root in roots]
        super().__init__(
            absolute_roots[0] if absolute_roots else os.getcwd(),
            flavor=flavor,
            features=FeatureRegistry(),
        )
        self.roots: List[NativeFileSystem] = [
            NativeFileSystem(
                cwd=root,
                flavor=self.flavor,
                features=self.features,
                extensions=self.extensions,
            )
            for root in absolute_roots
        ]
        logger.info(
            f"Search path filesystem ready with {len(self.roots)} roots",
            extra={"store": self.name},
        )

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        flavor: Optional[str] = None,
    ) -> "SearchPathFileSystem":
        """Build a search-path filesystem from the ``RUBYLIB`` variable."""
        return cls(search_paths_from_env(environ), flavor=flavor)

    def _find(self, path: PathLike) -> Optional[Tuple[NativeFileSystem, bytes]]:
        for root in self.roots:
            key = root.resolve(path)
            if root._exists(key):
                logger.debug(
                    f"Found {display_path(key)} under {root.cwd}", extra={"store": self.name}
                )
                return root, key
        return None

    def _find_or_raise(self, path: PathLike) -> Tuple[NativeFileSystem, bytes]:
        found = self._find(path)
        if found is None:
            shown = os.fsdecode(os.fspath(path))
            raise PathNotFoundError(
                f"No such file in any search root: {shown}",
                path=shown,
                context={"roots": [root.cwd for root in self.roots]},
            )
        return found

    def resolve(self, path: PathLike) -> bytes:
        """Resolve against the first root containing ``path``, else the first root."""
        found = self._find(path)
        if found is not None:
            return found[1]
        return super().resolve(path)

    def served_by(self, path: PathLike) -> str:
        found = self._find(path)
        return found[0].cwd if found is not None else self.name

    def exists(self, path: PathLike) -> bool:
        return self._find(path) is not None

    def is_directory(self, path: PathLike) -> bool:
        found = self._find(path)
        return found is not None and found[0]._is_directory(found[1])

    def read(self, path: PathLike) -> bytes:
        root, key = self._find_or_raise(path)
        return root._read(key)

    def _registered(self, path: PathLike) -> Optional[bytes]:
        """Return the first root's key for ``path`` that is already required."""
        for root in self.roots:
            key = root.resolve(path)
            if root.feature_key(key) in self.features:
                return key
        return None

    def is_required(self, path: PathLike) -> bool:
        return self._registered(path) is not None

    def require(self, path: PathLike, interp: "Interpreter") -> LoadResult:
        # the registry answers first; a required file may be gone from disk
        key = self._registered(path)
        if key is not None:
            logger.debug(f"Already loaded: {display_path(key)}", extra={"store": self.name})
            return LoadResult.ALREADY_LOADED
        root, key = self._find_or_raise(path)
        return root._require_key(key, interp)

    def load(self, path: PathLike, interp: "Interpreter") -> LoadResult:
        root, key = self._find_or_raise(path)
        return root._load_key(key, interp)

    def feature_key(self, key: bytes) -> bytes:
        if self.roots:
            return self.roots[0].feature_key(key)
        return key

    # Key-level primitives; keys reaching these are absolute host paths.

    def _exists(self, key: bytes) -> bool:
        return any(root._exists(key) for root in self.roots)

    def _is_directory(self, key: bytes) -> bool:
        return any(root._is_directory(key) for root in self.roots)

    def _read(self, key: bytes) -> bytes:
        root, key = self._find_or_raise(key)
        return root._read(key)

    def _write(self, key: bytes, data: bytes) -> None:
        raise UnsupportedOperationError(
            "Writing is not supported by search path filesystems",
            operation="write",
            path=key,
        )

    def _register_extension(self, key: bytes, hook: ExtensionHook) -> None:
        raise UnsupportedOperationError(
            "Extension hooks are not supported by search path filesystems",
            operation="register_extension",
            path=key,
        )
