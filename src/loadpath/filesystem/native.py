"""Host filesystem pass-through.

Reads and writes go straight to the host disk. Only extension hooks live in
memory, in the store's hook table.
"""

import contextlib
import logging
import os
import stat
import tempfile
from typing import Optional

from ..data_models import ExtensionHook
from ..exceptions import (
    HostIOError,
    LoadPathError,
    PathIsADirectoryError,
    PathNotADirectoryError,
    PathNotFoundError,
    PathPermissionError,
)
from ..paths import PathLike, display_path, normalize_slashes
from .base import LoadSources
from .registry import ExtensionHookTable, FeatureRegistry

logger = logging.getLogger(__name__)


def host_error(exc: OSError, key: bytes) -> LoadPathError:
    """Translate a host ``OSError`` into the matching load path error."""
    shown = display_path(key)
    if isinstance(exc, FileNotFoundError):
        return PathNotFoundError(f"No such file: {shown}", path=key)
    if isinstance(exc, IsADirectoryError):
        return PathIsADirectoryError(f"Is a directory: {shown}", path=key)
    if isinstance(exc, NotADirectoryError):
        return PathNotADirectoryError(f"Not a directory: {shown}", path=key)
    if isinstance(exc, PermissionError):
        return PathPermissionError(f"Permission denied: {shown}", errno=exc.errno, path=key)
    return HostIOError(f"I/O error on {shown}: {exc.strerror or exc}", errno=exc.errno, path=key)


def _target_mode(host_path: str) -> int:
    """Permission bits a write to ``host_path`` should leave behind."""
    try:
        return stat.S_IMODE(os.stat(host_path).st_mode)
    except FileNotFoundError:
        pass
    # mkstemp creates 0600 files; new files follow the umask instead
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


class NativeFileSystem(LoadSources):
    """
    Virtual filesystem delegating every operation to the host filesystem.

    Features are deduplicated on the host-canonical path (symlinks resolved),
    so ``require "./a.rb"`` and ``require "/abs/a.rb"`` run the file once.
    """

    name = "native"

    def __init__(
        self,
        cwd: Optional[PathLike] = None,
        flavor: Optional[str] = None,
        features: Optional[FeatureRegistry] = None,
        extensions: Optional[ExtensionHookTable] = None,
    ) -> None:
        """
        Initialize the native filesystem.

        Args:
            cwd: Working directory (default: the host process cwd at construction)
            flavor: Path flavor, None for the host's
            features: Feature registry to share, or None for a private one
            extensions: Extension hook table to share, or None for a private one
        """
        super().__init__(
            cwd if cwd is not None else os.getcwd(),
            flavor=flavor,
            features=features,
            extensions=extensions,
        )

    @staticmethod
    def _host_path(key: bytes) -> str:
        return os.fsdecode(key)

    def feature_key(self, key: bytes) -> bytes:
        return normalize_slashes(os.path.realpath(self._host_path(key)), self.flavor)

    def _exists(self, key: bytes) -> bool:
        return key in self.extensions or os.path.exists(self._host_path(key))

    def _is_directory(self, key: bytes) -> bool:
        return os.path.isdir(self._host_path(key))

    def _read(self, key: bytes) -> bytes:
        host_path = self._host_path(key)
        try:
            with open(host_path, "rb") as file:
                return file.read()
        except PermissionError as exc:
            # Windows reports opening a directory as a permission failure
            if os.path.isdir(host_path):
                raise PathIsADirectoryError(f"Is a directory: {display_path(key)}", path=key) from exc
            raise host_error(exc, key) from exc
        except OSError as exc:
            raise host_error(exc, key) from exc

    def _write(self, key: bytes, data: bytes) -> None:
        host_path = self._host_path(key)
        directory = os.path.dirname(host_path) or "."
        try:
            fd, temp_path = tempfile.mkstemp(dir=directory, prefix=".loadpath-")
            try:
                with os.fdopen(fd, "wb") as file:
                    file.write(data)
                os.chmod(temp_path, _target_mode(host_path))
                os.replace(temp_path, host_path)
            except BaseException:
                with contextlib.suppress(OSError):
                    os.unlink(temp_path)
                raise
        except OSError as exc:
            raise host_error(exc, key) from exc
        self.extensions.remove(key)
        logger.debug(f"Wrote {len(data)} bytes to {display_path(key)}", extra={"store": self.name})

    def _register_extension(self, key: bytes, hook: ExtensionHook) -> None:
        self.extensions.insert(key, hook)
