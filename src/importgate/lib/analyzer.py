"""SourceAnalyzer — single-parse collection of import records from Python source.

Each file is parsed exactly once into a LibCST concrete syntax tree and
walked once by the import collector.  Positions come from
``PositionProvider``; statement text is sliced from the original source by
character offset so that edits computed from a record line up exactly with
the text they replace.

Design notes:
    Visitors never follow parent links.  ``AncestorTrackingVisitor`` keeps
    an explicit stack of the nodes currently being visited, pushed in
    ``on_visit`` and popped in ``on_leave``, and the collector asks that
    stack whether a call sits inside an assignment.  All per-file mutable
    state lives in an ``AnalysisContext`` built fresh for every file.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Optional

import libcst as cst
from libcst.helpers import get_full_name_for_node
from libcst.metadata import CodeRange, MetadataWrapper, PositionProvider

from importgate.lib import config
from importgate.lib.classifier import ModuleContext, classify, is_static_require_call
from importgate.lib.models import (
    ImportKind,
    ImportRecord,
    Ranked,
    RuleOptions,
    SourceSpan,
)
from importgate.lib.ranks import compute_rank

_NEWLINE = re.compile(r"\r\n|\r|\n")

_FUNCTION_NODES = (cst.FunctionDef, cst.Lambda)
_BLOCK_NODES = (cst.IndentedBlock, cst.SimpleStatementSuite)
_LITERAL_NODES = (cst.Dict, cst.Set)
_NESTING_NODES = _FUNCTION_NODES + _BLOCK_NODES + _LITERAL_NODES
_ASSIGNMENT_NODES = (cst.Assign, cst.AnnAssign)


# ---------------------------------------------------------------------------
# Per-file analysis state
# ---------------------------------------------------------------------------


@dataclass
class AnalysisContext:
    """Mutable state for analysing one file.

    Attributes:
        ranks: Category → rank table for the current options.
        options: Validated rule options.
        module_context: Classifier context for the file.
        level: Current nesting depth (functions, blocks, literals).
        imported: Records collected so far, in document order.
    """

    ranks: dict[str, int]
    options: RuleOptions
    module_context: ModuleContext
    level: int = 0
    imported: list[ImportRecord] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Visitors
# ---------------------------------------------------------------------------


class AncestorTrackingVisitor(cst.CSTVisitor):
    """CSTVisitor that keeps the chain of nodes being visited.

    ``ancestors[-1]`` is the node whose ``visit_*`` method is running.
    """

    METADATA_DEPENDENCIES = (PositionProvider,)

    def __init__(self) -> None:
        super().__init__()
        self.ancestors: list[cst.CSTNode] = []

    def on_visit(self, node: cst.CSTNode) -> bool:
        self.ancestors.append(node)
        return super().on_visit(node)

    def on_leave(self, original_node: cst.CSTNode) -> None:
        super().on_leave(original_node)
        self.ancestors.pop()

    def is_inside(self, node_types: tuple[type, ...]) -> bool:
        """Whether any enclosing node (not the current one) has one of the types."""
        return any(isinstance(node, node_types) for node in reversed(self.ancestors[:-1]))


class _ImportCollector(AncestorTrackingVisitor):
    """Collect ranked import declarations and call-style module references."""

    def __init__(self, analyzer: SourceAnalyzer, context: AnalysisContext) -> None:
        super().__init__()
        self.analyzer = analyzer
        self.context = context

    # Track nesting depth
    def on_visit(self, node: cst.CSTNode) -> bool:
        if isinstance(node, _NESTING_NODES):
            self.context.level += 1
        return super().on_visit(node)

    def on_leave(self, original_node: cst.CSTNode) -> None:
        super().on_leave(original_node)
        if isinstance(original_node, _NESTING_NODES):
            self.context.level -= 1

    def _register(
        self, node: cst.CSTNode, name: str, kind: ImportKind, with_text: bool
    ) -> None:
        category = classify(name, self.context.module_context)
        result = compute_rank(self.context.ranks, category, kind)
        if not isinstance(result, Ranked):
            return
        span = self.analyzer.span_for(self.get_metadata(PositionProvider, node))
        text = self.analyzer.text_for(span) if with_text else ""
        self.context.imported.append(
            ImportRecord(name=name, rank=result.value, span=span, kind=kind, text=text)
        )

    def visit_Import(self, node: cst.Import) -> None:
        """Register a top-level ``import a.b`` under its first module."""
        if self.context.level != 0:
            return
        name = get_full_name_for_node(node.names[0].name)
        if name:
            self._register(node, name, ImportKind.IMPORT, with_text=True)

    def visit_ImportFrom(self, node: cst.ImportFrom) -> None:
        """Register a top-level ``from x import y``; relative dots stay in the name."""
        if self.context.level != 0:
            return
        name = module_specifier(node)
        if name in config.get_list("unassigned_modules"):
            return
        self._register(node, name, ImportKind.IMPORT, with_text=True)

    def visit_Call(self, node: cst.Call) -> None:
        """Register ``x = import_module("y")`` at module level (check mode only)."""
        if self.context.options.fixable:
            return
        if self.context.level != 0 or not is_static_require_call(node):
            return
        if not self.is_inside(_ASSIGNMENT_NODES):
            return
        arg = node.args[0].value
        if isinstance(arg, cst.SimpleString):
            self._register(node, str(arg.evaluated_value), ImportKind.REQUIRE_CALL, with_text=False)


def module_specifier(node: cst.ImportFrom) -> str:
    """Return ``"..pkg.mod"`` for ``from ..pkg.mod import x``."""
    dots = "." * len(node.relative)
    if node.module is None:
        return dots
    return dots + (get_full_name_for_node(node.module) or "")


# ---------------------------------------------------------------------------
# SourceAnalyzer
# ---------------------------------------------------------------------------


class SourceAnalyzer:
    """Single parse and metadata resolution for a Python source file.

    Attributes:
        source: Raw source text of the file.
        filepath: Path of the file (for messages and classification).
        source_lines: Source split into lines, line endings removed.
        module: Parsed libcst Module node.
        wrapper: MetadataWrapper resolving positions for the collector.
    """

    def __init__(self, source: str, filepath: str) -> None:
        """Parse source; raises libcst.ParserSyntaxError on bad input."""
        self.source = source
        self.filepath = filepath
        self.source_lines = _NEWLINE.split(source)
        self._line_starts = [0] + [m.end() for m in _NEWLINE.finditer(source)]
        self.module = cst.parse_module(source)
        self.wrapper = MetadataWrapper(self.module, unsafe_skip_copy=True)

    def offset_for(self, line: int, column: int) -> int:
        """Convert a 1-based line and 0-based column to a source offset."""
        return self._line_starts[line - 1] + column

    def span_for(self, code_range: CodeRange) -> SourceSpan:
        """Build a SourceSpan from a PositionProvider range."""
        start, end = code_range.start, code_range.end
        return SourceSpan(
            start_line=start.line,
            start_column=start.column,
            end_line=end.line,
            end_column=end.column,
            start_offset=self.offset_for(start.line, start.column),
            end_offset=self.offset_for(end.line, end.column),
        )

    def text_for(self, span: SourceSpan) -> str:
        """Return the source text covered by ``span``."""
        return self.source[span.start_offset:span.end_offset]

    def collect_imports(self, context: AnalysisContext) -> list[ImportRecord]:
        """Walk the tree once and return the ranked imports in document order."""
        collector = _ImportCollector(self, context)
        self.wrapper.visit(collector)
        return context.imported


def build_context(
    ranks: dict[str, int],
    options: RuleOptions,
    module_context: Optional[ModuleContext] = None,
) -> AnalysisContext:
    """Create a fresh AnalysisContext for one file."""
    return AnalysisContext(
        ranks=ranks,
        options=options,
        module_context=module_context or ModuleContext(),
    )
