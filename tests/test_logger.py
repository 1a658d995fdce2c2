"""Unit tests for importgate.lib.logger JSONL telemetry."""

from __future__ import annotations

import json

from importgate.lib.logger import log_run
from importgate.lib.models import Diagnostic, TextEdit


def _entries(log_dir):
    log_file = log_dir / "importgate.jsonl"
    return [json.loads(line) for line in log_file.read_text().splitlines()]


class TestLogRun:
    """Tests for log_run."""

    def test_entry_fields(self, tmp_path):
        """An entry records the file, mode, diagnostics and a source hash."""
        diagnostics = [
            Diagnostic(2, 0, "`os` import should occur before import of `.a`"),
            Diagnostic(1, 0, "a newline should be added", TextEdit(16, 16, "\n")),
        ]
        log_run(str(tmp_path), "mod.py", "check", diagnostics, 2, "import os\n", 3)
        (entry,) = _entries(tmp_path)
        assert entry["event"] == "import-order"
        assert entry["file"] == "mod.py"
        assert entry["mode"] == "check"
        assert entry["iteration"] == 1
        assert entry["import_count"] == 2
        assert entry["code_length_lines"] == 1
        assert entry["code_hash"].startswith("sha256:")
        assert len(entry["code_hash"]) == len("sha256:") + 16
        assert entry["timestamp"].endswith("Z")
        assert [d["fixable"] for d in entry["diagnostics"]] == [False, True]

    def test_appends(self, tmp_path):
        """Each call appends one line."""
        for iteration in (1, 2):
            log_run(str(tmp_path), "mod.py", "fix", [], 0, "", 0, iteration=iteration)
        assert [e["iteration"] for e in _entries(tmp_path)] == [1, 2]

    def test_creates_directory(self, tmp_path):
        """A missing log directory is created."""
        log_dir = tmp_path / "nested" / "logs"
        log_run(str(log_dir), "mod.py", "check", [], 0, "", 0)
        assert (log_dir / "importgate.jsonl").exists()

    def test_disabled(self, tmp_path):
        """An empty directory disables logging."""
        log_run("", "mod.py", "check", [], 0, "", 0)
        assert list(tmp_path.iterdir()) == []
