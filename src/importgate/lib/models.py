"""Data models for importgate options, import records and diagnostics.

Typed dataclasses that replace raw dict access across the codebase.
Option and project-config mappings are validated before they are turned
into models; the validators return every problem they find so callers can
report them together.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from importgate.exceptions import InvalidOptionsError
from importgate.lib import config


# ---------------------------------------------------------------------------
# Source positions and edits
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceSpan:
    """Location of a node in the source text.

    Lines are 1-based, columns 0-based; offsets index into the source
    string and are what text edits use.
    """

    start_line: int
    start_column: int
    end_line: int
    end_column: int
    start_offset: int
    end_offset: int


@dataclass(frozen=True)
class TextEdit:
    """Replace ``source[start:end]`` with ``text`` (an insertion when equal)."""

    start: int
    end: int
    text: str


@dataclass(frozen=True)
class Diagnostic:
    """A single report produced by the rule."""

    line: int
    column: int
    message: str
    fix: Optional[TextEdit] = None


# ---------------------------------------------------------------------------
# Import records
# ---------------------------------------------------------------------------


class ImportKind(enum.Enum):
    """How a module reference appears in the source."""

    IMPORT = "import"
    REQUIRE_CALL = "require"


@dataclass(frozen=True)
class ImportRecord:
    """One ranked module reference, in document order.

    Attributes:
        name: Module specifier as written (``os.path``, ``..pkg``, ``.``).
        rank: Position of the reference's group; lower sorts first.
        span: Where the statement or call sits in the source.
        kind: Declaration or call-style reference.
        text: Source text of the statement; only declarations carry it.
    """

    name: str
    rank: int
    span: SourceSpan
    kind: ImportKind = ImportKind.IMPORT
    text: str = ""


@dataclass(frozen=True)
class Ranked:
    """A rank for a recognised module."""

    value: int


class Ignored:
    """Marker for modules the classifier does not recognise."""

    _instance: Optional["Ignored"] = None

    def __new__(cls) -> "Ignored":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "IGNORED"


IGNORED = Ignored()

RankResult = Union[Ranked, Ignored]


# ---------------------------------------------------------------------------
# Rule options
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RuleOptions:
    """Validated options of the import order rule.

    Attributes:
        groups: Ordered groups; each entry is a category or a list of
            categories that share a rank.
        newlines_between: ``always``, ``never`` or None (check disabled).
        sort_paths: ``alphabetical``, ``reversedAlphabetical`` or None.
        fixable: Produce fixes instead of order/newline diagnostics.
    """

    groups: tuple[Union[str, tuple[str, ...]], ...] = ()
    newlines_between: Optional[str] = None
    sort_paths: Optional[str] = None
    fixable: bool = False

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> RuleOptions:
        """Build from a raw options mapping.

        Args:
            data: Mapping with ``groups``, ``newlines-between``,
                ``sort-paths`` and ``fixable`` keys, all optional.

        Returns:
            Validated RuleOptions instance.

        Raises:
            InvalidOptionsError: If the mapping fails validation.
        """
        if data is None:
            data = {}
        errors = validate_options(data)
        if errors:
            raise InvalidOptionsError(errors)

        keys = config.get_dict("options")
        raw_groups = data.get(keys["groups"])
        if raw_groups is None:
            raw_groups = config.get_list("default_groups")
        groups = tuple(
            group if isinstance(group, str) else tuple(group)
            for group in raw_groups
        )
        return cls(
            groups=groups,
            newlines_between=data.get(keys["newlines_between"]),
            sort_paths=data.get(keys["sort_paths"]),
            fixable=bool(data.get(keys["fixable"], False)),
        )

    def with_fixable(self, fixable: bool = True) -> RuleOptions:
        """Return a copy with ``fixable`` switched."""
        return RuleOptions(
            groups=self.groups,
            newlines_between=self.newlines_between,
            sort_paths=self.sort_paths,
            fixable=fixable,
        )


def validate_options(data: Any) -> list[str]:
    """Validate a rule options mapping against the option schema.

    Only the shape is checked here.  Category names inside ``groups`` are
    checked when the rank table is built, since a bad category is reported
    as a diagnostic rather than rejected outright.

    Args:
        data: The raw options value.

    Returns:
        List of validation error messages. Empty if valid.
    """
    errors: list[str] = []

    if not isinstance(data, dict):
        errors.append(f"Options must be a mapping, got {type(data).__name__}")
        return errors

    keys = config.get_dict("options")
    known = set(keys.values())
    for key in data:
        if key not in known:
            errors.append(f"Unknown option: {key!r}")

    groups = data.get(keys["groups"])
    if groups is not None:
        if not isinstance(groups, list):
            errors.append(f"'groups' must be a list, got {type(groups).__name__}")
        else:
            for index, group in enumerate(groups):
                if isinstance(group, str):
                    continue
                if isinstance(group, list) and all(isinstance(g, str) for g in group):
                    continue
                errors.append(
                    f"groups[{index}] must be a string or a list of strings"
                )

    newlines = data.get(keys["newlines_between"])
    allowed_newlines = list(config.get_dict("newlines_between").values())
    if keys["newlines_between"] in data and newlines not in allowed_newlines:
        errors.append(
            f"'{keys['newlines_between']}' must be one of {allowed_newlines}, "
            f"got {newlines!r}"
        )

    sort_paths = data.get(keys["sort_paths"])
    allowed_sorts = list(config.get_dict("sort_paths").values())
    if keys["sort_paths"] in data and sort_paths not in allowed_sorts:
        errors.append(
            f"'{keys['sort_paths']}' must be one of {allowed_sorts}, "
            f"got {sort_paths!r}"
        )

    fixable = data.get(keys["fixable"])
    if fixable is not None and not isinstance(fixable, bool):
        errors.append(f"'fixable' must be a boolean, got {type(fixable).__name__}")

    return errors


# ---------------------------------------------------------------------------
# Project configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProjectSettings:
    """Classifier and scope settings shared by every file of a project.

    Attributes:
        known_first_party: Top-level module names classified as internal.
        source_roots: Directories whose packages are classified as internal.
        exclude: fnmatch patterns of files the rule does not analyse.
    """

    known_first_party: tuple[str, ...] = ()
    source_roots: tuple[Path, ...] = ()
    exclude: tuple[str, ...] = ()

    @classmethod
    def from_dict(
        cls, data: dict[str, Any], base_dir: Optional[Path] = None
    ) -> ProjectSettings:
        """Build from the ``settings`` mapping of a project config.

        Args:
            data: Settings mapping from YAML.
            base_dir: Directory relative source roots are resolved against.

        Returns:
            ProjectSettings instance.
        """
        roots = []
        for root in data.get("source_roots", []):
            path = Path(root)
            if base_dir is not None and not path.is_absolute():
                path = base_dir / path
            roots.append(path)
        return cls(
            known_first_party=tuple(data.get("known_first_party", [])),
            source_roots=tuple(roots),
            exclude=tuple(data.get("exclude", [])),
        )


@dataclass(frozen=True)
class LoggingConfig:
    """Run telemetry settings."""

    enabled: bool = False
    directory: str = ""


@dataclass(frozen=True)
class ProjectConfig:
    """Top-level project configuration from .importgate.yaml.

    Attributes:
        options: Raw rule options mapping (validated separately).
        settings: Classifier and scope settings.
        logging: Run telemetry settings.
        path: File the config was loaded from, if any.
    """

    options: dict[str, Any] = field(default_factory=dict)
    settings: ProjectSettings = field(default_factory=ProjectSettings)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    path: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: Optional[Path] = None) -> ProjectConfig:
        """Build from a parsed .importgate.yaml mapping.

        Args:
            data: Parsed YAML mapping (already validated).
            path: Location of the file, used to anchor relative paths.

        Returns:
            ProjectConfig instance.
        """
        keys = config.get_dict("project")
        base_dir = path.parent if path is not None else None
        logging_raw = data.get(keys["logging"]) or {}
        log_dir = str(logging_raw.get("directory", ""))
        if log_dir and base_dir is not None and not Path(log_dir).is_absolute():
            log_dir = str(base_dir / log_dir)
        return cls(
            options=dict(data.get(keys["options"]) or {}),
            settings=ProjectSettings.from_dict(
                data.get(keys["settings"]) or {}, base_dir
            ),
            logging=LoggingConfig(
                enabled=bool(logging_raw.get("enabled", False)),
                directory=log_dir,
            ),
            path=path,
        )


def validate_project_config(data: Any) -> list[str]:
    """Validate the structure of a .importgate.yaml mapping.

    The nested ``options`` mapping is validated with ``validate_options``.

    Args:
        data: The parsed YAML content.

    Returns:
        List of validation error messages. Empty if valid.
    """
    errors: list[str] = []

    if not isinstance(data, dict):
        errors.append(f"Project config must be a mapping, got {type(data).__name__}")
        return errors

    keys = config.get_dict("project")
    known = {keys["options"], keys["settings"], keys["logging"]}
    for key in data:
        if key not in known:
            errors.append(f"Unknown top-level key: {key!r}")

    options = data.get(keys["options"])
    if options is not None:
        errors.extend(validate_options(options))

    settings = data.get(keys["settings"])
    if settings is not None:
        if not isinstance(settings, dict):
            errors.append(
                f"'settings' must be a mapping, got {type(settings).__name__}"
            )
        else:
            for list_key in keys["list_settings"]:
                val = settings.get(list_key)
                if val is not None and not isinstance(val, list):
                    errors.append(
                        f"settings.{list_key} must be a list, "
                        f"got {type(val).__name__}"
                    )

    logging_cfg = data.get(keys["logging"])
    if logging_cfg is not None and not isinstance(logging_cfg, dict):
        errors.append(
            f"'logging' must be a mapping, got {type(logging_cfg).__name__}"
        )

    return errors
