"""Bookkeeping shared by every store.

The feature registry records which canonical paths have been required, and
the extension hook table maps canonical paths to native callbacks.
"""

import logging
from typing import Dict, Iterator, List, Optional

from ..data_models import ExtensionHook
from ..paths import display_path

logger = logging.getLogger(__name__)


class FeatureRegistry:
    """
    Records the canonical paths of features that have been required.

    Entries are only ever added: once a feature is marked loaded it stays
    loaded for the lifetime of the interpreter. ``load`` never touches the
    registry.

    No locking is done here. The registry is owned by a store that is only
    reached through exclusive access to the interpreter.
    """

    def __init__(self) -> None:
        # dict keeps insertion order, which is the order features were loaded
        self._loaded: Dict[bytes, None] = {}

    def is_loaded(self, key: bytes) -> bool:
        return key in self._loaded

    def mark_loaded(self, key: bytes) -> None:
        """Mark a canonical path as loaded. Marking twice is a no-op."""
        if key in self._loaded:
            return
        self._loaded[key] = None
        logger.debug(f"Feature registered: {display_path(key)}")

    def loaded_features(self) -> List[bytes]:
        """Return loaded features in load order."""
        return list(self._loaded)

    def __contains__(self, key: object) -> bool:
        return key in self._loaded

    def __iter__(self) -> Iterator[bytes]:
        return iter(list(self._loaded))

    def __len__(self) -> int:
        return len(self._loaded)


class ExtensionHookTable:
    """
    Maps canonical paths to extension hooks.

    Hooks are stored by reference; the table never calls or copies them. A
    hybrid store shares one table between its delegates so a hook registered
    through either delegate is visible to both.
    """

    def __init__(self) -> None:
        self._hooks: Dict[bytes, ExtensionHook] = {}

    def insert(self, key: bytes, hook: ExtensionHook) -> None:
        """Register ``hook`` at ``key``, replacing any previous hook."""
        if not callable(hook):
            raise TypeError(f"Extension hook must be callable, got {type(hook).__name__}")
        replaced = key in self._hooks
        self._hooks[key] = hook
        logger.debug(
            f"Extension hook {'replaced' if replaced else 'registered'}: {display_path(key)}"
        )

    def get(self, key: bytes) -> Optional[ExtensionHook]:
        return self._hooks.get(key)

    def remove(self, key: bytes) -> Optional[ExtensionHook]:
        return self._hooks.pop(key, None)

    def __contains__(self, key: object) -> bool:
        return key in self._hooks

    def __len__(self) -> int:
        return len(self._hooks)
