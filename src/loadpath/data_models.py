"""
Data models for the virtual filesystem.

This module defines the entry types a store can hold, the outcome of
``require``/``load`` calls, and the callable types exchanged with the
interpreter.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Union

if TYPE_CHECKING:  # pragma: no cover
    from .interpreter import Interpreter


# A native callback substituting for source text at a path. It receives the
# interpreter and signals failure by raising.
ExtensionHook = Callable[["Interpreter"], None]

# Parse-and-evaluate collaborator: (interpreter, source, filename) -> value.
SourceEvaluator = Callable[["Interpreter", bytes, str], Any]


class LoadResult(str, Enum):
    """Outcome of a successful ``require`` or ``load``."""
    LOADED = "loaded"  # require executed the feature and registered it
    ALREADY_LOADED = "already_loaded"  # require found the feature registered
    EXECUTED = "executed"  # load executed the feature


@dataclass(frozen=True)
class SourceText:
    """Source bytes owned by a memory store."""
    data: bytes

    def __len__(self) -> int:
        return len(self.data)


@dataclass(frozen=True)
class ExtensionHookEntry:
    """Reference to an embedder-supplied extension hook."""
    hook: ExtensionHook

    @property
    def name(self) -> str:
        return getattr(self.hook, "__qualname__", None) or repr(self.hook)


@dataclass(frozen=True)
class Directory:
    """Directory marker, explicit or implied by a stored descendant."""


Entry = Union[SourceText, ExtensionHookEntry, Directory]
