"""importgate engine — thin orchestrator for the import order rule.

Composes the library modules to analyse one Python source string and
return structured results.  This is the main entry point for programmatic
usage.

Design notes:
    The engine never walks the tree itself.  It builds the rank table,
    hands parsing and collection to SourceAnalyzer (lib/analyzer), and
    hands the collected records to lib/checks.  Every file gets its own
    AnalysisContext, so nothing carries over from one file to the next.
"""

from __future__ import annotations

import json
import sys
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from importgate.exceptions import ConfigurationError, ImportgateParseError
from importgate.lib import config
from importgate.lib.analyzer import SourceAnalyzer, build_context
from importgate.lib.autofix import apply_edits
from importgate.lib.checks import run_checks
from importgate.lib.formatter import format_diagnostic_text, format_diagnostics_json
from importgate.lib.logger import log_run
from importgate.lib.models import (
    Diagnostic,
    ImportRecord,
    ProjectConfig,
    ProjectSettings,
    RuleOptions,
    TextEdit,
)
from importgate.lib.project import (
    discover_project_config,
    is_file_excluded,
    load_project_config,
    module_context_for,
)
from importgate.lib.ranks import build_rank_table

OptionsLike = Union[RuleOptions, dict[str, Any], None]


@dataclass
class LintResult:
    """Result of analysing one file."""

    filepath: str
    diagnostics: list[Diagnostic] = field(default_factory=list)
    imports: list[ImportRecord] = field(default_factory=list)
    scan_ms: int = 0
    skipped: bool = False

    @property
    def edits(self) -> list[TextEdit]:
        """Fixes attached to the diagnostics, in report order."""
        return [d.fix for d in self.diagnostics if d.fix is not None]


@dataclass
class FixResult:
    """Result of fixing one file."""

    filepath: str
    source: str
    output: str
    passes: int = 0
    applied: list[TextEdit] = field(default_factory=list)
    converged: bool = True

    @property
    def changed(self) -> bool:
        """Whether the fixed text differs from the input."""
        return self.output != self.source


def _coerce_options(options: OptionsLike) -> RuleOptions:
    if isinstance(options, RuleOptions):
        return options
    return RuleOptions.from_dict(options)


def lint_source(
    source: str,
    filepath: str = "",
    options: OptionsLike = None,
    *,
    settings: Optional[ProjectSettings] = None,
    log_dir: str = "",
    iteration: int = 1,
) -> LintResult:
    """Check the import order of a Python source string.

    Args:
        source: Python source code.
        filepath: Path used in messages and for classification.
        options: RuleOptions or a raw options mapping.
        settings: Classifier settings (first-party names, source roots).
        log_dir: Directory for JSONL telemetry; empty disables it.
        iteration: Fix pass number recorded in the telemetry.

    Returns:
        LintResult with diagnostics (and fixes, in fix mode).

    Raises:
        InvalidOptionsError: If ``options`` fails validation.
        ImportgateParseError: If the source cannot be parsed.
    """
    if not filepath:
        filepath = config.get_str("defaults.stdin_filename")
    rule_options = _coerce_options(options)
    start = time.time()

    # 1. Build ranks; a bad group table is reported once and stops analysis
    try:
        ranks = build_rank_table(rule_options.groups)
    except ConfigurationError as exc:
        diagnostic = Diagnostic(
            line=config.get_int("defaults.root_line"),
            column=config.get_int("defaults.root_column"),
            message=str(exc),
        )
        return LintResult(filepath=filepath, diagnostics=[diagnostic])

    # 2. Parse once and collect ranked imports in document order
    try:
        analyzer = SourceAnalyzer(source, filepath)
    except Exception as exc:
        raise ImportgateParseError(filepath, exc) from exc

    context = build_context(ranks, rule_options, module_context_for(filepath, settings))
    imported = analyzer.collect_imports(context)

    # 3. Run the reports selected by the options
    diagnostics = run_checks(
        imported, rule_options, analyzer.source_lines, analyzer.module.default_newline
    )
    scan_ms = int((time.time() - start) * 1000)

    if log_dir:
        mode = config.get_str("modes.fix" if rule_options.fixable else "modes.check")
        log_run(
            log_dir,
            filepath,
            mode,
            diagnostics,
            len(imported),
            source,
            scan_ms,
            iteration=iteration,
        )

    return LintResult(
        filepath=filepath,
        diagnostics=diagnostics,
        imports=list(imported),
        scan_ms=scan_ms,
    )


def fix_source(
    source: str,
    filepath: str = "",
    options: OptionsLike = None,
    *,
    settings: Optional[ProjectSettings] = None,
    log_dir: str = "",
    max_passes: int = 0,
) -> FixResult:
    """Rewrite a source string until its imports stop changing.

    Each pass lints in fix mode and applies every non-overlapping edit.
    The loop ends when a pass produces no edit or after ``max_passes``
    passes (``defaults.max_fix_passes`` when not given).

    Returns:
        FixResult with the final text.  ``converged`` is False when the
        pass limit was reached while edits were still being produced.
    """
    if not filepath:
        filepath = config.get_str("defaults.stdin_filename")
    if not max_passes:
        max_passes = config.get_int("defaults.max_fix_passes")
    rule_options = _coerce_options(options).with_fixable()

    output = source
    applied: list[TextEdit] = []
    passes = 0
    converged = False
    while passes < max_passes:
        result = lint_source(
            output,
            filepath,
            rule_options,
            settings=settings,
            log_dir=log_dir,
            iteration=passes + 1,
        )
        edits = result.edits
        if not edits:
            converged = True
            break
        output, pass_applied = apply_edits(output, edits)
        applied.extend(pass_applied)
        passes += 1

    if not converged:
        msg = config.get_str("messages.fix_not_converged")
        sys.stderr.write(msg.format(filepath=filepath, passes=passes) + "\n")

    return FixResult(
        filepath=filepath,
        source=source,
        output=output,
        passes=passes,
        applied=applied,
        converged=converged,
    )


def _resolve_project(
    filepath: str, config_path: Optional[Union[str, Path]]
) -> ProjectConfig:
    if config_path is not None:
        project = load_project_config(config_path)
    else:
        project = discover_project_config(filepath)
    return project or ProjectConfig()


def lint_file(
    filepath: str,
    config_path: Optional[Union[str, Path]] = None,
    *,
    output_format: str = "",
) -> LintResult:
    """Check one file using its project config.

    Args:
        filepath: Python file to check.
        config_path: Explicit .importgate.yaml; discovered when None.
        output_format: ``text`` or ``json`` to write diagnostics to stderr.

    Returns:
        LintResult; ``skipped`` is True for excluded files.
    """
    project = _resolve_project(filepath, config_path)
    if is_file_excluded(filepath, project.settings):
        return LintResult(filepath=filepath, skipped=True)

    with open(filepath, "r", encoding="utf-8") as fh:
        source = fh.read()

    log_dir = project.logging.directory if project.logging.enabled else ""
    result = lint_source(
        source,
        filepath,
        project.options,
        settings=project.settings,
        log_dir=log_dir,
    )

    if output_format == config.get_str("formats.json"):
        payload = format_diagnostics_json(filepath, result.diagnostics)
        sys.stderr.write(json.dumps(payload, indent=config.get_int("defaults.json_indent")) + "\n")
    elif output_format == config.get_str("formats.text") and result.diagnostics:
        lines = source.splitlines()
        sys.stderr.write(
            "\n".join(format_diagnostic_text(filepath, d, lines) for d in result.diagnostics)
            + "\n"
        )
    return result


def fix_file(
    filepath: str,
    config_path: Optional[Union[str, Path]] = None,
    *,
    write: bool = True,
) -> FixResult:
    """Fix one file in place using its project config.

    Args:
        filepath: Python file to fix.
        config_path: Explicit .importgate.yaml; discovered when None.
        write: Write the fixed text back when it changed.

    Returns:
        FixResult; excluded files come back unchanged with zero passes.
    """
    project = _resolve_project(filepath, config_path)
    with open(filepath, "r", encoding="utf-8", newline="") as fh:
        source = fh.read()
    if is_file_excluded(filepath, project.settings):
        return FixResult(filepath=filepath, source=source, output=source)

    log_dir = project.logging.directory if project.logging.enabled else ""
    result = fix_source(
        source,
        filepath,
        project.options,
        settings=project.settings,
        log_dir=log_dir,
    )
    if write and result.changed:
        with open(filepath, "w", encoding="utf-8", newline="") as fh:
            fh.write(result.output)
    return result
