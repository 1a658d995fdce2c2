"""Unit tests for importgate.lib.classifier."""

from __future__ import annotations

import libcst as cst
import pytest

from importgate.lib.classifier import ModuleContext, classify, is_static_require_call


EMPTY = ModuleContext()


class TestClassify:
    """Tests for module classification."""

    @pytest.mark.parametrize(
        ("specifier", "category"),
        [
            ("os", "builtin"),
            ("os.path", "builtin"),
            ("sys", "builtin"),
            ("requests", "external"),
            ("yaml.constructor", "external"),
            (".", "index"),
            (".__init__", "index"),
            (".models", "sibling"),
            (".models.record", "sibling"),
            ("..", "parent"),
            ("..shared", "parent"),
            ("...deep.module", "parent"),
        ],
    )
    def test_categories(self, specifier, category):
        """Each specifier shape maps to its category."""
        assert classify(specifier, EMPTY) == category

    @pytest.mark.parametrize("specifier", ["", "not-a-module", "1abc", ".bad-name", "a..b"])
    def test_unrecognised(self, specifier):
        """Strings that are not module names are unrecognised."""
        assert classify(specifier, EMPTY) is None

    def test_known_first_party(self):
        """Configured first-party names are internal."""
        context = ModuleContext(known_first_party=frozenset({"myapp"}))
        assert classify("myapp.models", context) == "internal"
        assert classify("requests", context) == "external"

    def test_source_root_package(self, tmp_path):
        """Packages and modules under a source root are internal."""
        (tmp_path / "mypkg").mkdir()
        (tmp_path / "helpers.py").write_text("")
        context = ModuleContext(source_roots=(tmp_path,))
        assert classify("mypkg.sub", context) == "internal"
        assert classify("helpers", context) == "internal"
        assert classify("otherpkg", context) == "external"

    def test_stdlib_wins_over_first_party(self):
        """A first-party name shadowing the stdlib is still builtin."""
        context = ModuleContext(known_first_party=frozenset({"json"}))
        assert classify("json", context) == "builtin"


def _call(code: str) -> cst.Call:
    node = cst.parse_expression(code)
    assert isinstance(node, cst.Call)
    return node


class TestIsStaticRequireCall:
    """Tests for call-style reference detection."""

    @pytest.mark.parametrize(
        "code",
        [
            'import_module("os")',
            'importlib.import_module("os.path")',
            "__import__('json')",
            'import_module(".sibling")',
        ],
    )
    def test_static_calls(self, code):
        """Known loaders with one string literal are detected."""
        assert is_static_require_call(_call(code))

    @pytest.mark.parametrize(
        "code",
        [
            'load("os")',
            "import_module(name)",
            'import_module(b"os")',
            'import_module(f"os")',
            'import_module("o" "s")',
            'import_module(name="os")',
            "import_module(*names)",
            'import_module("os", "pkg")',
            "import_module()",
            'other.import_module("os")',
        ],
    )
    def test_dynamic_calls(self, code):
        """Anything else is not a static reference."""
        assert not is_static_require_call(_call(code))
