"""Shared fixtures for the load path test suite."""

import logging
from typing import Callable, Dict, List, Tuple

import pytest

from loadpath import Interpreter, MemoryFileSystem


class RecordingEvaluator:
    """
    Stand-in for a parse-and-evaluate collaborator.

    Records every (filename, source) pair it is asked to run. Per-file actions
    can be attached to simulate source that itself calls require/load.
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, bytes]] = []
        self.actions: Dict[str, Callable[[Interpreter], None]] = {}

    def __call__(self, interp: Interpreter, source: bytes, filename: str) -> None:
        self.calls.append((filename, source))
        action = self.actions.get(filename)
        if action is not None:
            action(interp)

    def count(self, filename: str) -> int:
        return sum(1 for name, _ in self.calls if name == filename)

    @property
    def filenames(self) -> List[str]:
        return [name for name, _ in self.calls]


@pytest.fixture
def evaluator():
    """Create a recording evaluator."""
    return RecordingEvaluator()


@pytest.fixture
def memory_fs():
    """Create a posix-flavored memory filesystem rooted at the load path."""
    return MemoryFileSystem(flavor="posix")


@pytest.fixture
def interp(memory_fs, evaluator):
    """Create an interpreter over the memory filesystem."""
    return Interpreter(memory_fs, evaluator)


@pytest.fixture
def restore_root_logger():
    """Detach the root logger's handlers for a test and restore them afterwards."""
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    for handler in handlers:
        root.removeHandler(handler)
    yield root
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)
