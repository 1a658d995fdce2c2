"""ordering — find imports that break the configured group order.

Two readings of a misordered import list are tried.  The forward scan
assumes some imports have to move later in the file; the reverse scan runs
the same algorithm over the reversed list (ranks negated, path order
flipped) and so assumes some imports have to move earlier.  Whichever scan
blames fewer imports is reported, the forward one on a tie.

Example: with the default groups, ``[.a, .b, os]`` gives one forward
violation (``os`` should occur before ``.a``) but two reverse ones, so the
single forward diagnostic is reported.

Path order only matters when ``sort-paths`` is set and two imports share a
rank: the longer leading ``./``/``../`` run (or run of dots, for Python
relative modules) sorts later, then the remainders compare
lexicographically.  ``reversedAlphabetical`` flips only that last step.
"""

from __future__ import annotations

import dataclasses
import re
from typing import Optional, Sequence

from importgate.lib import config
from importgate.lib.models import Diagnostic, ImportRecord

_PATH_PREFIX = re.compile(r"^((?:\./)?(?:\.\./)*)(.*)$", re.DOTALL)
_DOT_PREFIX = re.compile(r"^(\.*)(.*)$", re.DOTALL)


# ---------------------------------------------------------------------------
# Path comparison
# ---------------------------------------------------------------------------


def split_specifier(name: str) -> tuple[str, str]:
    """Split a specifier into its relative prefix and the rest.

    ``"../../a/b"`` → ``("../../", "a/b")``; ``"..pkg.mod"`` →
    ``("..", "pkg.mod")``; ``"os"`` → ``("", "os")``.
    """
    prefix, rest = _PATH_PREFIX.match(name).groups()
    if not prefix:
        prefix, rest = _DOT_PREFIX.match(name).groups()
    return prefix, rest


def path_compare(first: str, second: str, *, reverse_names: bool = False) -> int:
    """Compare two specifiers by path order.

    Args:
        first: Left specifier.
        second: Right specifier.
        reverse_names: Flip the lexicographic comparison of the remainders.

    Returns:
        Negative, zero or positive, like a ``cmp`` function.
    """
    prefix1, rest1 = split_specifier(first)
    prefix2, rest2 = split_specifier(second)
    if len(prefix1) != len(prefix2):
        return 1 if len(prefix1) > len(prefix2) else -1
    result = (rest1 > rest2) - (rest1 < rest2)
    return -result if reverse_names else result


def sorts_after(
    first: ImportRecord,
    second: ImportRecord,
    sort_paths: Optional[str],
    reverse_scan: bool = False,
) -> bool:
    """Whether ``first`` must come after ``second`` by path order alone.

    Always False when path sorting is off or the ranks differ.
    """
    if not sort_paths or first.rank != second.rank:
        return False
    reverse_names = sort_paths == config.get_str("sort_paths.reversed")
    result = path_compare(first.name, second.name, reverse_names=reverse_names)
    if reverse_scan:
        result = -result
    return result > 0


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def find_out_of_order(
    imported: Sequence[ImportRecord],
    sort_paths: Optional[str] = None,
    reverse_scan: bool = False,
) -> list[ImportRecord]:
    """Return the imports that sort below the highest import seen so far."""
    if not imported:
        return []
    max_seen = imported[0]
    out_of_order: list[ImportRecord] = []
    for record in imported:
        if record.rank < max_seen.rank or sorts_after(
            max_seen, record, sort_paths, reverse_scan
        ):
            out_of_order.append(record)
        if max_seen.rank < record.rank or sorts_after(
            record, max_seen, sort_paths, reverse_scan
        ):
            max_seen = record
    return out_of_order


def reverse_ranks(imported: Sequence[ImportRecord]) -> list[ImportRecord]:
    """Reverse the list and negate every rank."""
    return [dataclasses.replace(record, rank=-record.rank) for record in reversed(imported)]


def _report(
    imported: Sequence[ImportRecord],
    out_of_order: Sequence[ImportRecord],
    order: str,
    sort_paths: Optional[str],
) -> list[Diagnostic]:
    template = config.get_str("messages.out_of_order")
    reverse_scan = order == config.get_str("order.after")
    diagnostics: list[Diagnostic] = []
    for record in out_of_order:
        anchor = next(
            item
            for item in imported
            if item.rank > record.rank
            or sorts_after(item, record, sort_paths, reverse_scan)
        )
        diagnostics.append(Diagnostic(
            line=record.span.start_line,
            column=record.span.start_column,
            message=template.format(name=record.name, order=order, anchor=anchor.name),
        ))
    return diagnostics


def make_out_of_order_report(
    imported: Sequence[ImportRecord],
    sort_paths: Optional[str] = None,
) -> list[Diagnostic]:
    """Report the smaller of the forward and reverse violation sets.

    Args:
        imported: Import records in document order.
        sort_paths: ``alphabetical``, ``reversedAlphabetical`` or None.

    Returns:
        One diagnostic per violating import.
    """
    out_of_order = find_out_of_order(imported, sort_paths)
    if not out_of_order:
        return []
    reversed_imported = reverse_ranks(imported)
    reversed_out = find_out_of_order(reversed_imported, sort_paths, reverse_scan=True)
    if len(reversed_out) < len(out_of_order):
        return _report(
            reversed_imported, reversed_out, config.get_str("order.after"), sort_paths
        )
    return _report(imported, out_of_order, config.get_str("order.before"), sort_paths)
