"""Centralized path resolution for the importgate package.

This is the ONLY module that touches __file__ or computes directory paths.
Every other module imports from here.
"""

from pathlib import Path

_PACKAGE_DIR = Path(__file__).resolve().parent


def config_dir() -> Path:
    """Return the config/ directory path."""
    return _PACKAGE_DIR / "config"


def defaults_path() -> Path:
    """Return the path to config/defaults.yaml."""
    return config_dir() / "defaults.yaml"


def find_project_config(start: "str | Path", filename: str) -> "Path | None":
    """Walk upward from ``start`` looking for a project config file.

    Args:
        start: File or directory to begin the search from.
        filename: Config file name (e.g. ``.importgate.yaml``).

    Returns:
        Path to the nearest config file, or None if none exists.
    """
    current = Path(start).resolve()
    if not current.is_dir():
        current = current.parent
    for directory in (current, *current.parents):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None
