"""Unit tests for importgate.lib.project config loading and file scope."""

from __future__ import annotations

from pathlib import Path

import pytest

from importgate.lib.models import ProjectSettings
from importgate.lib.project import (
    discover_project_config,
    is_file_excluded,
    load_project_config,
    module_context_for,
)


class TestLoadProjectConfig:
    """Tests for load_project_config."""

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file means no project config."""
        assert load_project_config(tmp_path / ".importgate.yaml") is None

    def test_valid_file(self, tmp_project) -> None:
        """A valid file loads into a ProjectConfig."""
        path = tmp_project({
            "options": {"sort-paths": "alphabetical"},
            "settings": {"known_first_party": ["myapp"]},
        })
        project = load_project_config(path)
        assert project is not None
        assert project.options == {"sort-paths": "alphabetical"}
        assert project.settings.known_first_party == ("myapp",)
        assert project.path == path.resolve()

    def test_empty_file(self, tmp_path: Path) -> None:
        """An empty file is a config with every default."""
        path = tmp_path / ".importgate.yaml"
        path.write_text("")
        project = load_project_config(path)
        assert project is not None
        assert project.options == {}

    def test_invalid_schema_ignored(self, tmp_project, capsys) -> None:
        """Schema errors are reported on stderr and the file is ignored."""
        path = tmp_project({"options": {"newlines-between": "sometimes"}})
        assert load_project_config(path) is None
        err = capsys.readouterr().err
        assert "Ignoring invalid project config" in err
        assert "newlines-between" in err

    def test_invalid_yaml_ignored(self, tmp_path: Path, capsys) -> None:
        """Malformed YAML is reported on stderr and the file is ignored."""
        path = tmp_path / ".importgate.yaml"
        path.write_text("options: [unclosed\n")
        assert load_project_config(path) is None
        assert "Ignoring invalid project config" in capsys.readouterr().err


class TestDiscoverProjectConfig:
    """Tests for upward config discovery."""

    def test_found_in_parent(self, tmp_path: Path, tmp_project) -> None:
        """The nearest config above the file is used."""
        tmp_project({"settings": {"exclude": ["*_pb2.py"]}})
        nested = tmp_path / "pkg" / "sub"
        nested.mkdir(parents=True)
        project = discover_project_config(nested / "mod.py")
        assert project is not None
        assert project.settings.exclude == ("*_pb2.py",)

    def test_nearest_wins(self, tmp_path: Path, tmp_project) -> None:
        """A config closer to the file shadows one further up."""
        tmp_project({"settings": {"exclude": ["outer.py"]}})
        inner = tmp_path / "pkg"
        inner.mkdir()
        (inner / ".importgate.yaml").write_text("settings:\n  exclude: [inner.py]\n")
        project = discover_project_config(inner / "mod.py")
        assert project.settings.exclude == ("inner.py",)


class TestIsFileExcluded:
    """Tests for exclude pattern matching."""

    @pytest.mark.parametrize(
        ("filepath", "expected"),
        [
            ("proto/api_pb2.py", True),
            ("api_pb2.py", True),
            ("build/gen/models.py", True),
            ("src/models.py", False),
        ],
    )
    def test_patterns(self, filepath: str, expected: bool) -> None:
        """Patterns match the full path or the file name."""
        settings = ProjectSettings(exclude=("*_pb2.py", "build/*"))
        assert is_file_excluded(filepath, settings) is expected

    def test_no_patterns(self) -> None:
        """Nothing is excluded by default."""
        assert not is_file_excluded("anything.py", ProjectSettings())


class TestModuleContextFor:
    """Tests for classifier context construction."""

    def test_without_settings(self) -> None:
        """No settings gives an empty context."""
        context = module_context_for("mod.py", None)
        assert context.filepath == "mod.py"
        assert context.known_first_party == frozenset()

    def test_with_settings(self, tmp_path: Path) -> None:
        """Settings are carried into the context."""
        settings = ProjectSettings(known_first_party=("myapp",), source_roots=(tmp_path,))
        context = module_context_for("mod.py", settings)
        assert context.known_first_party == frozenset({"myapp"})
        assert context.source_roots == (tmp_path,)
