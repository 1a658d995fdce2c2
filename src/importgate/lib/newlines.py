"""newlines — blank-line separation between and within import groups."""

from __future__ import annotations

from typing import Sequence

from importgate.lib import config
from importgate.lib.models import Diagnostic, ImportRecord


def count_blank_lines_between(
    source_lines: Sequence[str],
    previous: ImportRecord,
    current: ImportRecord,
) -> int:
    """Count whitespace-only lines strictly between two imports.

    Args:
        source_lines: The file split into lines (no line endings).
        previous: Import that ends first.
        current: Import that starts later.

    Returns:
        Number of blank lines after ``previous`` ends and before
        ``current`` starts.
    """
    between = source_lines[previous.span.end_line:current.span.start_line - 1]
    return sum(1 for line in between if not line.strip())


def _diagnostic(record: ImportRecord, message_key: str) -> Diagnostic:
    return Diagnostic(
        line=record.span.start_line,
        column=record.span.start_column,
        message=config.get_str(f"messages.{message_key}"),
    )


def make_newlines_between_report(
    imported: Sequence[ImportRecord],
    newlines_between: str,
    source_lines: Sequence[str],
) -> list[Diagnostic]:
    """Check blank lines between consecutive imports in document order.

    With ``always``, a change of rank needs at least one blank line and
    imports of the same rank must be contiguous.  With ``never``, no blank
    line is allowed anywhere between imports.  Diagnostics are attached to
    the earlier import of each pair.
    """
    always = config.get_str("newlines_between.always")
    diagnostics: list[Diagnostic] = []

    for previous, current in zip(imported, imported[1:]):
        blank = count_blank_lines_between(source_lines, previous, current)
        if newlines_between == always:
            if current.rank != previous.rank and blank == 0:
                diagnostics.append(_diagnostic(previous, "newline_between_groups"))
            elif current.rank == previous.rank and blank > 0:
                diagnostics.append(_diagnostic(previous, "no_newline_within_group"))
        elif blank > 0:
            diagnostics.append(_diagnostic(previous, "no_newline_between_groups"))

    return diagnostics
