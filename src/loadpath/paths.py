"""Path algebra for the virtual filesystem.

Every path handed to a store goes through two steps before any backend sees
it:

1. ``absolutize_relative_to`` resolves it against the store's working
   directory and removes ``.`` and ``..`` components without touching the
   disk.
2. ``normalize_slashes`` turns the result into the canonical byte key, with
   ``/`` as the only separator.

Both steps follow a path *flavor*: ``"posix"`` or ``"nt"``. The flavor defaults
to the host convention, and can be forced so Windows paths can be resolved
(and tested) on any host.

Example:
    >>> resolve_path("foo/../bar", "/home/artichoke")
    b'/home/artichoke/bar'
    >>> resolve_path(r"foo\\bar\\..", r"C:\\Users\\artichoke", flavor="nt")
    b'C:/Users/artichoke/foo'
"""

from __future__ import annotations

import ntpath
import os
import re
from typing import List, NamedTuple, Optional, Tuple, Union

from .exceptions import PathEncodingError

PathLike = Union[str, bytes, "os.PathLike[str]", "os.PathLike[bytes]"]

POSIX = "posix"
WINDOWS = "nt"

_POSIX_LOAD_PATH = "/artichoke/virtual_root/src/lib"
_WINDOWS_LOAD_PATH = "c:/artichoke/virtual_root/src/lib"

# Component kinds, in the order the host splitter can emit them.
_PREFIX = "prefix"
_ROOT = "root"
_CURRENT = "current"
_PARENT = "parent"
_NORMAL = "normal"

_SEPARATORS = {POSIX: "/", WINDOWS: "\\/"}
_MAIN_SEPARATOR = {POSIX: "/", WINDOWS: "\\"}
_SPLIT_PATTERN = {POSIX: re.compile(r"/"), WINDOWS: re.compile(r"[\\/]")}


class _Component(NamedTuple):
    kind: str
    text: str


def host_flavor() -> str:
    """Return the path flavor of the running host."""
    return WINDOWS if os.name == "nt" else POSIX


def check_flavor(flavor: Optional[str]) -> str:
    if flavor is None:
        return host_flavor()
    if flavor not in (POSIX, WINDOWS):
        raise ValueError(f"Unknown path flavor: {flavor!r} (expected 'posix' or 'nt')")
    return flavor


def load_path_root(flavor: Optional[str] = None) -> str:
    """
    Directory at which sources and extensions live in the virtual filesystem.

    It is the default working directory of memory-backed stores and the
    routing boundary of hybrid stores. Windows hosts get a drive-qualified
    spelling of the same directory.
    """
    if check_flavor(flavor) == WINDOWS:
        return _WINDOWS_LOAD_PATH
    return _POSIX_LOAD_PATH


RUBY_LOAD_PATH = load_path_root()


def _as_str(path: PathLike) -> str:
    return os.fsdecode(os.fspath(path))


def _split_prefix(path: str, flavor: str) -> Tuple[str, str]:
    if flavor == WINDOWS:
        return ntpath.splitdrive(path)
    return "", path


def _is_unc(prefix: str) -> bool:
    return len(prefix) > 2 and prefix[0] in "\\/" and prefix[1] in "\\/"


def _components(path: str, flavor: str) -> List[_Component]:
    """Split ``path`` into components the way the host path splitter does."""
    separators = _SEPARATORS[flavor]
    prefix, rest = _split_prefix(path, flavor)
    has_root = (rest != "" and rest[0] in separators) or _is_unc(prefix)

    components: List[_Component] = []
    if prefix:
        components.append(_Component(_PREFIX, prefix))
    if has_root:
        components.append(_Component(_ROOT, _MAIN_SEPARATOR[flavor]))

    parts = _SPLIT_PATTERN[flavor].split(rest)
    for index, part in enumerate(parts):
        if part == "":
            continue
        if part == ".":
            # Only a leading "." of a rootless path survives splitting.
            if index == 0 and not has_root:
                components.append(_Component(_CURRENT, part))
            continue
        if part == "..":
            components.append(_Component(_PARENT, part))
        else:
            components.append(_Component(_NORMAL, part))
    return components


def _is_absolute(path: str, flavor: str) -> bool:
    components = _components(path, flavor)
    has_root = any(c.kind == _ROOT for c in components[:2])
    if flavor == WINDOWS:
        return has_root and bool(components) and components[0].kind == _PREFIX
    return has_root


def _is_bare_drive(buffer: str) -> bool:
    return len(buffer) == 2 and buffer[1] == ":"


def _join(components: List[_Component], flavor: str) -> str:
    """Collect components into a path string the way a host path buffer does."""
    separator = _MAIN_SEPARATOR[flavor]
    separators = _SEPARATORS[flavor]
    buffer = ""
    for component in components:
        if component.kind == _PREFIX:
            buffer = component.text
        elif component.kind == _ROOT:
            prefix, _ = _split_prefix(buffer, flavor)
            buffer = prefix + separator
        else:
            need_separator = (
                bool(buffer)
                and buffer[-1] not in separators
                and not (flavor == WINDOWS and _is_bare_drive(buffer))
            )
            if need_separator:
                buffer += separator
            buffer += component.text
    return buffer


def absolutize_relative_to(
    path: PathLike, cwd: PathLike, flavor: Optional[str] = None
) -> str:
    """
    Resolve ``path`` against ``cwd`` and remove ``.`` and ``..`` components.

    The operation is purely syntactic: nothing is read from the filesystem and
    nonexistent paths resolve like existing ones.

    Args:
        path: Candidate path, absolute or relative to ``cwd``
        cwd: Base directory used when ``path`` does not start at a root
        flavor: ``"posix"``, ``"nt"`` or None for the host convention

    Returns:
        The resolved path in host-native spelling. ``..`` never climbs above a
        root, and never introduces a root into a relative result.
    """
    flavor = check_flavor(flavor)
    path_components = _components(_as_str(path), flavor)

    if path_components and path_components[0].kind == _ROOT:
        components: List[_Component] = []
        cwd_is_relative = False
    else:
        cwd_str = _as_str(cwd)
        components = _components(cwd_str, flavor)
        cwd_is_relative = not _is_absolute(cwd_str, flavor)

    root = _Component(_ROOT, _MAIN_SEPARATOR[flavor])
    for component in path_components:
        if component.kind == _CURRENT:
            continue
        if component.kind == _PARENT:
            if components:
                components.pop()
            if not components and not cwd_is_relative:
                components.append(root)
            continue
        components.append(component)

    return _join(components, flavor)


def normalize_slashes(path: PathLike, flavor: Optional[str] = None) -> bytes:
    """
    Convert a host path into the canonical byte key.

    Raises:
        PathEncodingError: If the path cannot be encoded with the filesystem
            encoding
    """
    flavor = check_flavor(flavor)
    raw = os.fspath(path)
    try:
        encoded = os.fsencode(raw)
    except UnicodeEncodeError as exc:
        raise PathEncodingError(
            f"Path is not representable as bytes: {raw!r}",
            context={"reason": str(exc)},
        ) from exc
    if flavor == WINDOWS:
        encoded = encoded.replace(b"\\", b"/")
    return encoded


def resolve_path(
    path: PathLike, cwd: PathLike, flavor: Optional[str] = None
) -> bytes:
    """Absolutize ``path`` against ``cwd`` and return its canonical key."""
    flavor = check_flavor(flavor)
    return normalize_slashes(absolutize_relative_to(path, cwd, flavor), flavor)


def is_root(key: bytes) -> bool:
    """Return True if ``key`` is a filesystem root (``/`` or ``c:/``)."""
    return key == b"/" or (len(key) == 3 and key[1:] == b":/")


def parents(key: bytes) -> List[bytes]:
    """Return the proper ancestors of a canonical key, nearest first."""
    ancestors: List[bytes] = []
    head = key
    while True:
        index = head.rfind(b"/")
        if index < 0:
            break
        parent = head[:index] or b"/"
        if parent.endswith(b":"):
            parent += b"/"
        if parent == head:
            break
        ancestors.append(parent)
        if is_root(parent):
            break
        head = parent
    return ancestors


def display_path(key: bytes) -> str:
    """Render a canonical key for messages and logs."""
    return key.decode("utf-8", errors="backslashreplace")
