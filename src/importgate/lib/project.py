"""project — project config loading and file scope.

A project keeps its rule options, classifier settings and logging settings
in ``.importgate.yaml``.  The file is looked up next to the analysed file
and then in each parent directory; a missing file means "defaults
everywhere", an invalid one is reported on stderr and ignored.
"""

from __future__ import annotations

import fnmatch
import os
import sys
from pathlib import Path
from typing import Optional, Union

import yaml

from importgate._paths import find_project_config
from importgate.lib import config
from importgate.lib.classifier import ModuleContext
from importgate.lib.models import ProjectConfig, ProjectSettings, validate_project_config
from importgate.lib.yaml_loader import load_yaml


def load_project_config(path: Union[str, Path]) -> Optional[ProjectConfig]:
    """Load a .importgate.yaml file.

    Args:
        path: Path to the project config file.

    Returns:
        ProjectConfig, or None if the file is missing or invalid.
    """
    path = Path(path)
    try:
        data = load_yaml(path)
    except FileNotFoundError:
        return None
    except yaml.YAMLError as exc:
        msg = config.get_str("messages.invalid_project_config")
        sys.stderr.write(msg.format(path=path, errors=exc) + "\n")
        return None

    if data is None:
        data = {}
    errors = validate_project_config(data)
    if errors:
        msg = config.get_str("messages.invalid_project_config")
        sys.stderr.write(msg.format(path=path, errors="; ".join(errors)) + "\n")
        return None
    return ProjectConfig.from_dict(data, path=path.resolve())


def discover_project_config(filepath: Union[str, Path]) -> Optional[ProjectConfig]:
    """Find and load the nearest .importgate.yaml above ``filepath``."""
    found = find_project_config(filepath, config.get_str("filenames.project_config"))
    if found is None:
        return None
    return load_project_config(found)


def is_file_excluded(filepath: str, settings: ProjectSettings) -> bool:
    """Check whether a file matches one of the ``exclude`` patterns.

    Patterns are matched against the path as given and against the file
    name alone.
    """
    filename = os.path.basename(filepath)
    for pattern in settings.exclude:
        if fnmatch.fnmatch(filepath, pattern) or fnmatch.fnmatch(filename, pattern):
            return True
    return False


def module_context_for(filepath: str, settings: Optional[ProjectSettings]) -> ModuleContext:
    """Build the classifier context for one file."""
    if settings is None:
        return ModuleContext(filepath=filepath)
    return ModuleContext(
        filepath=filepath,
        known_first_party=frozenset(settings.known_first_party),
        source_roots=settings.source_roots,
    )
