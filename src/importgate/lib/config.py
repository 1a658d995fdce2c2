"""config — lazy-loaded, typed accessor for importgate defaults.

Every message template, option name, category list and constant the rule
uses comes from ``config/defaults.yaml``, so the algorithm modules carry no
string literals of their own.  The file is read on first access and cached
for the process.  Lookups take a dotted key (``"messages.duplicated"``);
the typed helpers fail at the call-site when the file and the code
disagree about a value's shape.

Design notes:
    The cache is the only process-wide state in the package and it is
    read-only after loading.  ``reset()`` exists for test isolation.
"""

from __future__ import annotations

from typing import Any

import yaml

from importgate._paths import defaults_path

_DEFAULTS: dict[str, Any] | None = None


def load_defaults() -> dict[str, Any]:
    """Return the parsed defaults.yaml, reading it on first call.

    Raises:
        FileNotFoundError: If defaults.yaml is missing.
        yaml.YAMLError: If defaults.yaml contains invalid YAML.
        TypeError: If its top level is not a mapping.
    """
    global _DEFAULTS  # noqa: PLW0603
    if _DEFAULTS is None:
        with open(defaults_path(), encoding="utf-8") as fh:
            data = yaml.safe_load(fh)
        if not isinstance(data, dict):
            msg = f"defaults.yaml must be a YAML mapping, got {type(data).__name__}"
            raise TypeError(msg)
        _DEFAULTS = data
    return _DEFAULTS


def get(dotted_key: str) -> Any:
    """Look up a nested value such as ``"sort_paths.reversed"``.

    Raises:
        KeyError: If any segment of the path is missing.
    """
    node: Any = load_defaults()
    for part in dotted_key.split("."):
        if not isinstance(node, dict) or part not in node:
            msg = f"Config key not found: {dotted_key!r} (missing segment: {part!r})"
            raise KeyError(msg)
        node = node[part]
    return node


def _typed(dotted_key: str, expected: type, label: str) -> Any:
    value = get(dotted_key)
    # bool is an int subclass and never a valid int value here
    if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
        msg = f"Expected {label} for {dotted_key!r}, got {type(value).__name__}"
        raise TypeError(msg)
    return value


def get_str(dotted_key: str) -> str:
    """Return a message, option name or other string value."""
    return _typed(dotted_key, str, "str")


def get_int(dotted_key: str) -> int:
    """Return an integer constant (booleans are rejected)."""
    return _typed(dotted_key, int, "int")


def get_list(dotted_key: str) -> list[Any]:
    """Return a list such as ``categories`` or ``require_callees``."""
    return _typed(dotted_key, list, "list")


def get_dict(dotted_key: str) -> dict[str, Any]:
    """Return a section such as ``options`` (logical name → option key)."""
    return _typed(dotted_key, dict, "dict")


def reset() -> None:
    """Clear the cached defaults (used by tests)."""
    global _DEFAULTS  # noqa: PLW0603
    _DEFAULTS = None
