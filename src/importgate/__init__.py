"""importgate — group-order enforcement for Python import statements.

Stable public API:
    lint_source: Check the import order of a source string.
    fix_source: Rewrite a source string into the configured order.
    lint_file / fix_file: Same, for files with a project config.
    LintResult / FixResult: Dataclasses returned by the above.
    Diagnostic / TextEdit: A single report and its optional fix.
    RuleOptions: Validated rule options.
    ConfigurationError: Bad ``groups`` table (reported as a diagnostic).
    InvalidOptionsError: Options that fail validation.
    ImportgateParseError: Source that LibCST cannot parse.
"""

__version__ = "0.1.0"

from importgate.engine import (
    FixResult,
    LintResult,
    fix_file,
    fix_source,
    lint_file,
    lint_source,
)
from importgate.exceptions import (
    ConfigurationError,
    ImportgateParseError,
    InvalidOptionsError,
)
from importgate.lib.models import Diagnostic, RuleOptions, TextEdit

__all__ = [
    "__version__",
    "lint_source",
    "fix_source",
    "lint_file",
    "fix_file",
    "LintResult",
    "FixResult",
    "Diagnostic",
    "TextEdit",
    "RuleOptions",
    "ConfigurationError",
    "InvalidOptionsError",
    "ImportgateParseError",
]
