"""Custom exceptions for importgate.

Exceptions:
    ConfigurationError — The ``groups`` option names an unknown category or
        names a category twice.  The engine turns it into a single
        diagnostic at the root of the file being analysed.
    InvalidOptionsError — The rule options mapping fails validation
        (unknown key, wrong type, bad enum value).  Raised to the caller.
    ImportgateParseError — Raised when LibCST cannot parse a source
        file.  Wraps the original parse exception.
"""

from __future__ import annotations

from importgate.lib import config


class ConfigurationError(Exception):
    """Raised when the group configuration cannot be turned into ranks."""


class InvalidOptionsError(ValueError):
    """Raised when rule options do not match the option schema.

    Attributes:
        errors: Every validation message found, in discovery order.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        msg = config.get_str("messages.invalid_options")
        super().__init__(msg.format(errors="; ".join(self.errors)))


class ImportgateParseError(Exception):
    """Raised when LibCST cannot parse a source file."""

    def __init__(self, filepath: str, original_error: Exception) -> None:
        """Initialize with parse error details.

        Args:
            filepath: Path to the file that failed parsing.
            original_error: The underlying parse exception.
        """
        self.filepath = filepath
        self.original_error = original_error
        msg = config.get_str("messages.parse_error")
        super().__init__(msg.format(filepath=filepath, error=original_error))
