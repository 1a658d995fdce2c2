"""classifier — decide where an imported module comes from.

Two collaborators of the import collector live here:

* ``classify`` maps a module specifier to one of the six categories
  (``builtin``, ``external``, ``internal``, ``parent``, ``sibling``,
  ``index``) or to None when the specifier is not a module name at all.
* ``is_static_require_call`` recognises ``import_module("x")`` style calls
  whose argument is a plain string literal.

Relative specifiers are classified by their leading dots alone; absolute
ones by their top-level package, checked against the interpreter's
standard library list, the project's first-party names and its source
roots, in that order.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import libcst as cst
from libcst.helpers import get_full_name_for_node

from importgate.lib import config

STDLIB_MODULES: frozenset[str] = frozenset(sys.stdlib_module_names) | frozenset(
    sys.builtin_module_names
)


@dataclass(frozen=True)
class ModuleContext:
    """Per-file information the classifier needs.

    Attributes:
        filepath: Path of the file being analysed.
        known_first_party: Top-level names that are always internal.
        source_roots: Directories holding the project's own packages.
    """

    filepath: str = ""
    known_first_party: frozenset[str] = field(default_factory=frozenset)
    source_roots: tuple[Path, ...] = ()


def _is_dotted_name(name: str) -> bool:
    return bool(name) and all(part.isidentifier() for part in name.split("."))


def _is_local_module(top: str, roots: tuple[Path, ...]) -> bool:
    for root in roots:
        if (root / top).is_dir() or (root / f"{top}.py").is_file():
            return True
    return False


def classify(specifier: str, context: ModuleContext) -> Optional[str]:
    """Classify a module specifier.

    Args:
        specifier: Module as written, relative dots included.
        context: Per-file classifier context.

    Returns:
        Category name, or None if the specifier is unrecognised.
    """
    if specifier.startswith("."):
        stripped = specifier.lstrip(".")
        dots = len(specifier) - len(stripped)
        if stripped and not _is_dotted_name(stripped):
            return None
        if dots >= 2:
            return "parent"
        if stripped in ("", "__init__"):
            return "index"
        return "sibling"

    if not _is_dotted_name(specifier):
        return None

    top = specifier.split(".")[0]
    if top in STDLIB_MODULES:
        return "builtin"
    if top in context.known_first_party:
        return "internal"
    if _is_local_module(top, context.source_roots):
        return "internal"
    return "external"


def is_static_require_call(node: cst.Call) -> bool:
    """Check whether a call loads a module named by a string literal.

    Matches ``__import__("x")``, ``import_module("x")`` and
    ``importlib.import_module("x")`` with exactly one positional argument
    that is a plain (not bytes, not f-string) string literal.
    """
    callee = get_full_name_for_node(node.func)
    if callee not in config.get_list("require_callees"):
        return False
    if len(node.args) != 1:
        return False
    arg = node.args[0]
    if arg.keyword is not None or arg.star:
        return False
    if not isinstance(arg.value, cst.SimpleString):
        return False
    return isinstance(arg.value.evaluated_value, str)
