"""Unit tests for importgate.lib.yaml_loader YAML parsing."""

from __future__ import annotations

import pytest
import yaml

from importgate.lib.yaml_loader import load_yaml


class TestLoadYaml:
    """Tests for loading YAML from files."""

    def test_load_project_config(self, tmp_path):
        """A project config loads into nested dicts and lists."""
        yaml_file = tmp_path / ".importgate.yaml"
        yaml_file.write_text(
            "options:\n"
            "  groups:\n"
            "    - builtin\n"
            "    - [external, internal]\n"
            "  newlines-between: always\n"
        )
        result = load_yaml(str(yaml_file))
        assert result == {
            "options": {
                "groups": ["builtin", ["external", "internal"]],
                "newlines-between": "always",
            }
        }

    def test_load_empty_yaml(self, tmp_path):
        """Loading an empty file returns None."""
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert load_yaml(yaml_file) is None

    def test_load_missing_file(self):
        """Loading a nonexistent file raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            load_yaml("/nonexistent/path.yaml")

    def test_invalid_yaml_raises(self, tmp_path):
        """Malformed YAML raises a YAMLError."""
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("options: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_yaml(yaml_file)

    def test_safe_load_rejects_python_tags(self, tmp_path):
        """Arbitrary Python object tags are not constructed."""
        yaml_file = tmp_path / "unsafe.yaml"
        yaml_file.write_text("options: !!python/object/apply:os.getcwd []\n")
        with pytest.raises(yaml.YAMLError):
            load_yaml(yaml_file)
