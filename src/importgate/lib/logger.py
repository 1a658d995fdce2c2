"""logger — JSONL run telemetry for import order checks.

Each analysed file appends a single JSON line to a log file inside the
configured log directory.  Every entry captures the file path, the mode
(check or fix), a summary of each diagnostic, the number of imports
ranked, a truncated SHA-256 hash of the source, and timing.  The log file
name and formatting constants are read from ``config/defaults.yaml``.
"""

from __future__ import annotations

import datetime
import hashlib
import json
import os
from typing import Any, Sequence

from importgate.lib import config
from importgate.lib.models import Diagnostic


def log_run(
    log_dir: str,
    filepath: str,
    mode: str,
    diagnostics: Sequence[Diagnostic],
    import_count: int,
    source: str,
    scan_ms: int,
    iteration: int = 1,
) -> None:
    """Write a JSONL log entry for one analysed file.

    Args:
        log_dir: Directory to write the log file in. Empty disables logging.
        filepath: Path to the analysed file.
        mode: ``check`` or ``fix``.
        diagnostics: Diagnostics produced for the file.
        import_count: Number of ranked imports found.
        source: The source code that was analysed.
        scan_ms: Analysis duration in milliseconds.
        iteration: Fix pass number (1 for plain checks).
    """
    if not log_dir:
        return
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, config.get_str("filenames.run_log"))

    utc_src = config.get_str("formatting.utc_offset_source")
    utc_rep = config.get_str("formatting.utc_offset_replacement")
    hash_prefix = config.get_str("formatting.hash_prefix")
    hash_trunc = config.get_int("defaults.hash_truncation_length")
    separators = tuple(config.get_list("formatting.json_separators"))

    entry: dict[str, Any] = {
        "timestamp": (
            datetime.datetime.now(datetime.timezone.utc)
            .isoformat()
            .replace(utc_src, utc_rep)
        ),
        "event": "import-order",
        "file": filepath,
        "mode": mode,
        "iteration": iteration,
        "diagnostics": [
            {"line": d.line, "message": d.message, "fixable": d.fix is not None}
            for d in diagnostics
        ],
        "import_count": import_count,
        "code_length_lines": len(source.splitlines()),
        "code_hash": hash_prefix + hashlib.sha256(source.encode()).hexdigest()[:hash_trunc],
        "scan_ms": scan_ms,
    }

    with open(log_path, "a", encoding="utf-8") as fh:
        fh.write(json.dumps(entry, separators=separators) + "\n")
