"""Shared fixtures for the importgate test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import pytest
import yaml

from importgate.lib.models import ImportKind, ImportRecord, SourceSpan


FIXTURES_DIR = Path(__file__).parent / "fixtures"
MODULES_DIR = FIXTURES_DIR / "modules"


def make_record(
    name: str,
    rank: int,
    line: int = 1,
    *,
    end_line: Optional[int] = None,
    kind: ImportKind = ImportKind.IMPORT,
    text: str = "",
) -> ImportRecord:
    """Build an ImportRecord occupying whole lines, for algorithm tests."""
    end_line = end_line or line
    span = SourceSpan(
        start_line=line,
        start_column=0,
        end_line=end_line,
        end_column=len(text),
        start_offset=0,
        end_offset=len(text),
    )
    return ImportRecord(name=name, rank=rank, span=span, kind=kind, text=text)


@pytest.fixture()
def record() -> Callable[..., ImportRecord]:
    """Return the ImportRecord factory."""
    return make_record


@pytest.fixture()
def tmp_project(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Return a writer for .importgate.yaml inside a temporary project."""

    def _write(data: dict[str, Any]) -> Path:
        config_file = tmp_path / ".importgate.yaml"
        with open(config_file, "w", encoding="utf-8") as fh:
            yaml.dump(data, fh, default_flow_style=False)
        return config_file

    return _write


@pytest.fixture()
def ordered_source() -> str:
    """Return a module whose imports follow the default groups."""
    return (MODULES_DIR / "ordered.py").read_text(encoding="utf-8")


@pytest.fixture()
def misordered_source() -> str:
    """Return a module with imports in the wrong group order."""
    return (MODULES_DIR / "misordered.py").read_text(encoding="utf-8")
