"""Unit tests for the feature registry and extension hook table."""

import pytest

from loadpath import ExtensionHookTable, FeatureRegistry


# ==============================================================================
# FeatureRegistry Tests
# ==============================================================================

class TestFeatureRegistry:
    """Tests for FeatureRegistry."""

    def test_empty(self):
        registry = FeatureRegistry()
        assert len(registry) == 0
        assert not registry.is_loaded(b"/a.rb")

    def test_mark_loaded_keeps_order(self):
        """Test that features are listed in load order."""
        registry = FeatureRegistry()
        registry.mark_loaded(b"/b.rb")
        registry.mark_loaded(b"/a.rb")
        assert registry.loaded_features() == [b"/b.rb", b"/a.rb"]
        assert list(registry) == [b"/b.rb", b"/a.rb"]
        assert b"/a.rb" in registry

    def test_mark_twice_is_noop(self):
        """Test that marking an already loaded feature changes nothing."""
        registry = FeatureRegistry()
        registry.mark_loaded(b"/a.rb")
        registry.mark_loaded(b"/b.rb")
        registry.mark_loaded(b"/a.rb")
        assert registry.loaded_features() == [b"/a.rb", b"/b.rb"]

    def test_loaded_features_is_a_copy(self):
        registry = FeatureRegistry()
        registry.mark_loaded(b"/a.rb")
        registry.loaded_features().clear()
        assert len(registry) == 1


# ==============================================================================
# ExtensionHookTable Tests
# ==============================================================================

class TestExtensionHookTable:
    """Tests for ExtensionHookTable."""

    def test_insert_and_get(self):
        """Test that hooks are stored by reference."""
        table = ExtensionHookTable()

        def hook(interp):
            pass

        table.insert(b"/ext.rb", hook)
        assert table.get(b"/ext.rb") is hook
        assert b"/ext.rb" in table
        assert len(table) == 1

    def test_insert_replaces(self):
        """Test that a second insert at the same key wins."""
        table = ExtensionHookTable()
        first = lambda interp: None
        second = lambda interp: None
        table.insert(b"/ext.rb", first)
        table.insert(b"/ext.rb", second)
        assert table.get(b"/ext.rb") is second
        assert len(table) == 1

    def test_insert_rejects_non_callable(self):
        table = ExtensionHookTable()
        with pytest.raises(TypeError, match="must be callable"):
            table.insert(b"/ext.rb", 42)
        assert len(table) == 0

    def test_remove(self):
        """Test removing present and absent hooks."""
        table = ExtensionHookTable()
        hook = lambda interp: None
        table.insert(b"/ext.rb", hook)
        assert table.remove(b"/ext.rb") is hook
        assert table.remove(b"/ext.rb") is None
        assert table.get(b"/ext.rb") is None
