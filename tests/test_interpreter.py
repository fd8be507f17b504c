"""
Unit tests for the interpreter load builtins.

Tests cover:
- require with and without the source extension
- load, require_relative and the current-file stack
- Embedder preloading with def_rb_source_file and def_file_for_type
"""

import pytest

from loadpath import (
    RUBY_LOAD_PATH,
    Interpreter,
    MemoryFileSystem,
    NativeFileSystem,
    PathNotFoundError,
)
from loadpath.interpreter import feature_candidates


# ==============================================================================
# Feature Candidate Tests
# ==============================================================================

class TestFeatureCandidates:
    """Tests for feature_candidates."""

    def test_bare_name_tries_extension_first(self):
        assert feature_candidates("set") == ["set.rb", "set"]

    def test_name_with_extension(self):
        assert feature_candidates("set.rb") == ["set.rb"]


# ==============================================================================
# require / load Tests
# ==============================================================================

class TestRequire:
    """Tests for Interpreter.require and Interpreter.load."""

    def test_require_returns_true_then_false(self, interp, evaluator):
        """Test the boolean result of a repeated require."""
        interp.def_rb_source_file("set.rb", b"class Set; end")
        assert interp.require("set") is True
        assert interp.require("set") is False
        assert interp.require("set.rb") is False
        assert evaluator.filenames == [f"{RUBY_LOAD_PATH}/set.rb"]

    def test_require_without_extension_on_disk(self, interp, evaluator):
        """Test that a file without the extension is found second."""
        interp.def_rb_source_file("plain", b"")
        assert interp.require("plain") is True
        assert evaluator.filenames == [f"{RUBY_LOAD_PATH}/plain"]

    def test_extension_preferred(self, interp, evaluator):
        """Test that name.rb wins over name."""
        interp.def_rb_source_file("x.rb", b"rb")
        interp.def_rb_source_file("x", b"plain")
        interp.require("x")
        assert evaluator.calls == [(f"{RUBY_LOAD_PATH}/x.rb", b"rb")]

    def test_required_native_file_removed(self, tmp_path, evaluator):
        """Test that require consults the registry before the disk."""
        (tmp_path / "x.rb").write_bytes(b"")
        fs = NativeFileSystem(cwd=str(tmp_path))
        interp = Interpreter(fs, evaluator)
        assert interp.require("x") is True
        (tmp_path / "x.rb").unlink()
        assert interp.require("x") is False
        assert interp.require("x.rb") is False
        assert len(evaluator.calls) == 1

    def test_load_of_removed_file_fails(self, tmp_path, evaluator):
        """Test that load still reads the disk for a required feature."""
        (tmp_path / "x.rb").write_bytes(b"")
        interp = Interpreter(NativeFileSystem(cwd=str(tmp_path)), evaluator)
        interp.require("x")
        (tmp_path / "x.rb").unlink()
        with pytest.raises(PathNotFoundError):
            interp.load("x.rb")

    def test_require_missing(self, interp):
        """Test the message for a feature that cannot be found."""
        with pytest.raises(PathNotFoundError) as exc_info:
            interp.require("nope")
        assert "cannot load such file -- nope" in str(exc_info.value)
        assert exc_info.value.context["candidates"] == ["nope.rb", "nope"]

    def test_require_skips_directory(self, interp):
        """Test that a directory never satisfies require."""
        interp.def_rb_source_file("lib/inner.rb", b"")
        with pytest.raises(PathNotFoundError):
            interp.require("lib")

    def test_load_always_true(self, interp, evaluator):
        """Test that load executes and returns True every time."""
        interp.def_rb_source_file("a.rb", b"")
        assert interp.load("a.rb") is True
        assert interp.load("a.rb") is True
        assert len(evaluator.calls) == 2

    def test_load_missing(self, interp):
        with pytest.raises(PathNotFoundError):
            interp.load("missing.rb")


# ==============================================================================
# require_relative and current file Tests
# ==============================================================================

class TestRequireRelative:
    """Tests for Interpreter.require_relative and the file stack."""

    def test_relative_to_current_file(self, interp, evaluator):
        """Test resolution against the directory of the running file."""
        main = f"{RUBY_LOAD_PATH}/app/main.rb"
        interp.def_rb_source_file("app/main.rb", b"require_relative 'helper'")
        interp.def_rb_source_file("app/helper.rb", b"")
        evaluator.actions[main] = lambda interp: interp.require_relative("helper")

        interp.require("app/main")
        assert evaluator.filenames == [main, f"{RUBY_LOAD_PATH}/app/helper.rb"]

    def test_relative_to_parent_directory(self, interp, evaluator):
        """Test ".." in a relative require."""
        main = f"{RUBY_LOAD_PATH}/app/main.rb"
        interp.def_rb_source_file("app/main.rb", b"")
        interp.def_rb_source_file("shared.rb", b"")
        evaluator.actions[main] = lambda interp: interp.require_relative("../shared")

        interp.require("app/main")
        assert f"{RUBY_LOAD_PATH}/shared.rb" in evaluator.filenames

    def test_top_level_uses_cwd(self, interp, evaluator):
        """Test that outside any file the store cwd is the base."""
        interp.def_rb_source_file("top.rb", b"")
        assert interp.require_relative("top") is True
        assert evaluator.filenames == [f"{RUBY_LOAD_PATH}/top.rb"]

    def test_current_file_stack(self, interp, evaluator):
        """Test current_file during nested evaluation."""
        seen = []
        outer = f"{RUBY_LOAD_PATH}/outer.rb"
        inner = f"{RUBY_LOAD_PATH}/inner.rb"
        interp.def_rb_source_file("outer.rb", b"")
        interp.def_rb_source_file("inner.rb", b"")

        def run_outer(interp):
            seen.append(interp.current_file)
            interp.require("inner")
            seen.append(interp.current_file)

        evaluator.actions[outer] = run_outer
        evaluator.actions[inner] = lambda interp: seen.append(interp.current_file)

        assert interp.current_file is None
        interp.require("outer")
        assert seen == [outer, inner, outer]
        assert interp.current_file is None

    def test_current_file_popped_on_error(self, interp, evaluator):
        """Test that a failing evaluation does not leave a stale current file."""
        path = f"{RUBY_LOAD_PATH}/bad.rb"
        interp.def_rb_source_file("bad.rb", b"")

        def fail(interp):
            raise RuntimeError("boom")

        evaluator.actions[path] = fail
        with pytest.raises(RuntimeError):
            interp.require("bad")
        assert interp.current_file is None


# ==============================================================================
# Embedder Preload Tests
# ==============================================================================

class TestPreload:
    """Tests for def_rb_source_file and def_file_for_type."""

    def test_source_lands_under_load_path(self, memory_fs, interp):
        interp.def_rb_source_file("json/ext.rb", b"x")
        assert memory_fs.read(f"{RUBY_LOAD_PATH}/json/ext.rb") == b"x"

    def test_file_for_type_runs_hook(self, interp, evaluator):
        """Test that a preloaded hook receives the interpreter."""
        seen = []
        interp.def_file_for_type("ext.rb", seen.append)
        assert interp.require("ext") is True
        assert interp.require("ext") is False
        assert seen == [interp]
        assert evaluator.calls == []

    def test_preload_ignores_store_cwd(self, evaluator):
        """Test that preloading is relative to the reserved root, not the cwd."""
        fs = MemoryFileSystem(cwd="/elsewhere", flavor="posix")
        interp = Interpreter(fs, evaluator)
        interp.def_rb_source_file("set.rb", b"")
        assert fs.exists(f"{RUBY_LOAD_PATH}/set.rb")
        assert not fs.exists("/elsewhere/set.rb")
