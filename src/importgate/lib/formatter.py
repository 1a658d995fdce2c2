"""formatter — diagnostic output as text lines or JSON.

Text output follows the ``path:line:column message`` convention of
compiler and linter output, followed by the offending source line.  JSON
output is a dict suitable for ``json.dumps``.
"""

from __future__ import annotations

from typing import Any, Sequence

from importgate.lib import config
from importgate.lib.models import Diagnostic


def format_diagnostic_text(
    filepath: str,
    diagnostic: Diagnostic,
    source_lines: Sequence[str],
) -> str:
    """Format a single diagnostic for stderr output.

    Args:
        filepath: Path of the analysed file.
        diagnostic: The diagnostic to render.
        source_lines: The file split into lines, for the source excerpt.

    Returns:
        Formatted multi-line string.
    """
    location_tpl = config.get_str("formatting.location_template")
    fix_marker = config.get_str("formatting.fix_marker")

    header = location_tpl.format(
        filepath=filepath, line=diagnostic.line, column=diagnostic.column + 1
    )
    message = diagnostic.message + (fix_marker if diagnostic.fix else "")
    parts = [f"{header} {message}"]
    if 0 < diagnostic.line <= len(source_lines):
        source = source_lines[diagnostic.line - 1].rstrip()
        if source:
            parts.append(f"    {source}")
    return "\n".join(parts)


def format_diagnostics_json(
    filepath: str,
    diagnostics: Sequence[Diagnostic],
) -> dict[str, Any]:
    """Format all diagnostics of a file as a JSON-compatible dict."""
    items: list[dict[str, Any]] = []
    for d in diagnostics:
        item: dict[str, Any] = {
            "line": d.line,
            "column": d.column,
            "message": d.message,
        }
        if d.fix is not None:
            item["fix"] = {"start": d.fix.start, "end": d.fix.end, "text": d.fix.text}
        items.append(item)
    return {
        "file": filepath,
        "diagnostics": items,
        "summary": {
            "total": len(items),
            "fixable": sum(1 for d in diagnostics if d.fix is not None),
        },
    }
