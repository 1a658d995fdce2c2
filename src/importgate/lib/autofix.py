"""autofix — target order and text edits for misordered imports.

The fix is a positional swap: the statement at position ``i`` of the file
is overwritten with the text of the statement that belongs at position
``i`` of the sorted order.  Statements never move as whole units, so
comments and code between imports stay where they are, and a file can
need several fix passes before it stops changing.  ``sort-paths`` is not
applied here; the target order always breaks rank ties by ascending path.

A blank line is only ever added after a statement that ends its physical
line (trailing whitespace or a comment may follow).  It goes after the
comment and uses the file's own line ending.

Design notes:
    Edits are applied the way a lint host applies fixes: in offset order,
    skipping any edit that touches text an earlier edit already changed.
    The skipped edits are produced again on the next pass.
"""

from __future__ import annotations

import functools
from typing import Optional, Sequence

from importgate.lib import config
from importgate.lib.models import Diagnostic, ImportRecord, TextEdit
from importgate.lib.newlines import count_blank_lines_between
from importgate.lib.ordering import path_compare


# ---------------------------------------------------------------------------
# Target order
# ---------------------------------------------------------------------------


def _fix_order(first: ImportRecord, second: ImportRecord) -> int:
    if first.rank != second.rank:
        return 1 if first.rank > second.rank else -1
    return path_compare(first.name, second.name)


def sorted_imports(imported: Sequence[ImportRecord]) -> list[ImportRecord]:
    """Stable sort by rank, then ascending path order."""
    return sorted(imported, key=functools.cmp_to_key(_fix_order))


def _rest_of_line(record: ImportRecord, source_lines: Sequence[str]) -> str:
    """Text after the statement on its last line (``; x = 1``, ``  # note``)."""
    return source_lines[record.span.end_line - 1][record.span.end_column:]


def _ends_line(record: ImportRecord, source_lines: Sequence[str]) -> bool:
    rest = _rest_of_line(record, source_lines).strip()
    return not rest or rest.startswith("#")


def _should_add_newline(
    target: ImportRecord,
    target_next: Optional[ImportRecord],
    current: ImportRecord,
    following: Optional[ImportRecord],
    source_lines: Sequence[str],
) -> bool:
    if target_next is None or target.rank == target_next.rank:
        return False
    # a newline after `import a;` would start the next line with `;`
    if not _ends_line(current, source_lines):
        return False
    # target_next exists, so the document has a following import too
    return count_blank_lines_between(source_lines, current, following) == 0


# ---------------------------------------------------------------------------
# Fix report
# ---------------------------------------------------------------------------


def make_fix_report(
    imported: Sequence[ImportRecord],
    source_lines: Sequence[str],
    newline: str = "\n",
) -> list[Diagnostic]:
    """Compare document order with the target order, position by position.

    Args:
        imported: Import declarations in document order.
        source_lines: The file split into lines.
        newline: Line ending of the file, used for inserted blank lines.

    Returns:
        One diagnostic with a fix for every position whose statement has to
        change or which needs a trailing blank line.
    """
    target_order = sorted_imports(imported)
    joiner = config.get_str("messages.fix_joiner")
    move_tpl = config.get_str("messages.should_move")
    newline_msg = config.get_str("messages.should_add_newline")
    diagnostics: list[Diagnostic] = []

    for index, current in enumerate(imported):
        following = imported[index + 1] if index + 1 < len(imported) else None
        target = target_order[index]
        target_next = (
            target_order[index + 1] if index + 1 < len(target_order) else None
        )
        add_newline = _should_add_newline(
            target, target_next, current, following, source_lines
        )
        needs_to_move = current.name != target.name
        if not needs_to_move and not add_newline:
            continue

        messages: list[str] = []
        if needs_to_move:
            messages.append(move_tpl.format(target=target.name, current=current.name))
        if add_newline:
            messages.append(newline_msg)

        span = current.span
        rest = _rest_of_line(current, source_lines)
        line_end = span.end_offset + len(rest)
        if needs_to_move and add_newline:
            text = f"{target.text}{rest}{newline}"
            edit = TextEdit(span.start_offset, line_end, text)
        elif needs_to_move:
            edit = TextEdit(span.start_offset, span.end_offset, target.text)
        else:
            edit = TextEdit(line_end, line_end, newline)

        diagnostics.append(Diagnostic(
            line=span.start_line,
            column=span.start_column,
            message=joiner.join(messages),
            fix=edit,
        ))

    return diagnostics


# ---------------------------------------------------------------------------
# Applying edits
# ---------------------------------------------------------------------------


def apply_edits(source: str, edits: Sequence[TextEdit]) -> tuple[str, list[TextEdit]]:
    """Apply non-overlapping edits to ``source``.

    Args:
        source: Original text.
        edits: Edits with offsets into ``source``.

    Returns:
        The new text and the edits that were actually applied.  An edit
        that starts at or before the end of an already applied edit is
        skipped.
    """
    parts: list[str] = []
    applied: list[TextEdit] = []
    last_end = -1
    cursor = 0
    for edit in sorted(edits, key=lambda e: (e.start, e.end)):
        if edit.start <= last_end:
            continue
        parts.append(source[cursor:edit.start])
        parts.append(edit.text)
        cursor = edit.end
        last_end = edit.end
        applied.append(edit)
    parts.append(source[cursor:])
    return "".join(parts), applied
