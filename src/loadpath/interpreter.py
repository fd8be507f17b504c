"""
Interpreter-facing load builtins.

``Interpreter`` is the slice of interpreter state the loader needs: the
configured virtual filesystem, the parse-and-evaluate collaborator, and the
stack of files currently being evaluated. Its ``require``, ``load`` and
``require_relative`` methods implement the builtins of the same names on top
of the store.
"""

import logging
import os
import posixpath
from typing import Any, List, Optional

from .data_models import ExtensionHook, LoadResult, SourceEvaluator
from .exceptions import PathNotFoundError
from .filesystem.base import LoadSources
from .paths import PathLike, absolutize_relative_to, load_path_root

logger = logging.getLogger(__name__)

SOURCE_EXTENSION = ".rb"


def feature_candidates(name: str) -> List[str]:
    """
    Return the paths tried, in order, when requiring feature ``name``.

    A name without the source extension is tried with the extension first,
    then as given.
    """
    if name.endswith(SOURCE_EXTENSION):
        return [name]
    return [name + SOURCE_EXTENSION, name]


class Interpreter:
    """
    Interpreter state as seen by the load builtins.

    Args:
        filesystem: The virtual filesystem, fixed for the interpreter's lifetime
        evaluator: Callable ``(interp, source, filename)`` that parses and runs
            source text

    Example:
        >>> fs = MemoryFileSystem()
        >>> interp = Interpreter(fs, evaluator=lambda interp, src, name: None)
        >>> interp.def_rb_source_file("hello.rb", b"puts 'hi'")
        >>> interp.require("hello")
        True
        >>> interp.require("hello")
        False
    """

    def __init__(self, filesystem: LoadSources, evaluator: SourceEvaluator):
        self.filesystem = filesystem
        self._evaluator = evaluator
        self._file_stack: List[str] = []

    @property
    def current_file(self) -> Optional[str]:
        """Canonical path of the file being evaluated, or None at top level."""
        return self._file_stack[-1] if self._file_stack else None

    def eval_source(self, source: bytes, filename: str) -> Any:
        """Evaluate ``source`` with ``filename`` as the current file."""
        self._file_stack.append(filename)
        try:
            return self._evaluator(self, source, filename)
        finally:
            self._file_stack.pop()

    # ========== Embedder preload ==========

    def def_rb_source_file(self, path: PathLike, source: bytes) -> None:
        """Store source text at ``path`` relative to the reserved load path root."""
        self.filesystem.write(self._under_load_path(path), source)

    def def_file_for_type(self, path: PathLike, hook: ExtensionHook) -> None:
        """Install an extension hook at ``path`` relative to the reserved load path root."""
        self.filesystem.register_extension(self._under_load_path(path), hook)

    def _under_load_path(self, path: PathLike) -> str:
        flavor = self.filesystem.flavor
        return absolutize_relative_to(path, load_path_root(flavor), flavor)

    # ========== Builtins ==========

    def require(self, name: PathLike) -> bool:
        """
        Require feature ``name``.

        Returns:
            True if the feature was loaded by this call, False if it was
            already loaded

        Raises:
            PathNotFoundError: If no candidate path for ``name`` exists
        """
        name = os.fsdecode(os.fspath(name))
        candidates = feature_candidates(name)
        for candidate in candidates:
            if self.filesystem.is_required(candidate):
                logger.debug(f"require {name!r}: {LoadResult.ALREADY_LOADED.value}")
                return False
        for candidate in candidates:
            if self.filesystem.exists(candidate) and not self.filesystem.is_directory(candidate):
                result = self.filesystem.require(candidate, self)
                logger.debug(f"require {name!r}: {result.value}")
                return result is LoadResult.LOADED
        raise PathNotFoundError(
            f"cannot load such file -- {name}",
            path=name,
            context={"candidates": candidates},
        )

    def load(self, name: PathLike) -> bool:
        """Load the file at ``name`` unconditionally. Always returns True."""
        self.filesystem.load(name, self)
        return True

    def require_relative(self, name: PathLike) -> bool:
        """Require ``name`` relative to the directory of the current file."""
        name = os.fsdecode(os.fspath(name))
        current = self.current_file
        base = posixpath.dirname(current) if current else self.filesystem.cwd
        target = absolutize_relative_to(name, base, self.filesystem.flavor)
        return self.require(target)
