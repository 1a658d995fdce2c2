"""checks — run the order rule over a file's collected imports.

Diagnostic mode and fix mode are mutually exclusive.  In diagnostic mode
the out-of-order report always runs and the blank-line report runs when
``newlines-between`` is configured.  In fix mode only the autofix report
runs; its diagnostics carry the edits.
"""

from __future__ import annotations

from typing import Sequence

from importgate.lib.autofix import make_fix_report
from importgate.lib.models import Diagnostic, ImportRecord, RuleOptions
from importgate.lib.newlines import make_newlines_between_report
from importgate.lib.ordering import make_out_of_order_report


def run_checks(
    imported: Sequence[ImportRecord],
    options: RuleOptions,
    source_lines: Sequence[str],
    newline: str = "\n",
) -> list[Diagnostic]:
    """Dispatch to the reports selected by ``options``.

    Args:
        imported: Import records in document order.
        options: Validated rule options.
        source_lines: The file split into lines.
        newline: Line ending of the file, for fixes that add lines.

    Returns:
        Diagnostics in report order.
    """
    if options.fixable:
        return make_fix_report(imported, source_lines, newline)

    diagnostics = make_out_of_order_report(imported, options.sort_paths)
    if options.newlines_between is not None:
        diagnostics.extend(
            make_newlines_between_report(imported, options.newlines_between, source_lines)
        )
    return diagnostics
