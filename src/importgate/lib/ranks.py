"""ranks — turn the ``groups`` option into a category → rank table.

Each entry of ``groups`` is a category name or a list of names; every
category named at position ``i`` gets rank ``i``.  Categories that are never
named share the rank ``len(groups)`` and so sort after everything that was
configured explicitly.

Example::

    >>> build_rank_table([["builtin", "external"], "parent"])
    {'builtin': 0, 'external': 0, 'parent': 1, 'internal': 2, 'sibling': 2, 'index': 2}
"""

from __future__ import annotations

import json
from typing import Optional, Sequence, Union

from importgate.exceptions import ConfigurationError
from importgate.lib import config
from importgate.lib.models import IGNORED, ImportKind, Ranked, RankResult


def require_rank_offset() -> int:
    """Rank added to call-style references over their category's rank."""
    return config.get_int("require_rank_offset")


def build_rank_table(
    groups: Sequence[Union[str, Sequence[str]]],
) -> dict[str, int]:
    """Build the rank table for a group configuration.

    Args:
        groups: Ordered groups from the rule options.

    Returns:
        Mapping with exactly one rank for each of the six categories.

    Raises:
        ConfigurationError: If a group names an unknown category, or a
            category appears in more than one group.
    """
    categories = config.get_list("categories")
    ranks: dict[str, int] = {}

    for index, group in enumerate(groups):
        members = [group] if isinstance(group, str) else list(group)
        for category in members:
            if category not in categories:
                msg = config.get_str("messages.unknown_type")
                raise ConfigurationError(msg.format(category=json.dumps(category)))
            if category in ranks:
                msg = config.get_str("messages.duplicated")
                raise ConfigurationError(msg.format(category=category))
            ranks[category] = index

    for category in categories:
        ranks.setdefault(category, len(groups))
    return ranks


def compute_rank(
    ranks: dict[str, int],
    category: Optional[str],
    kind: ImportKind,
) -> RankResult:
    """Rank a classified module reference.

    Args:
        ranks: Table from ``build_rank_table``.
        category: Classifier result; None when the module is unrecognised.
        kind: Declaration or call-style reference.

    Returns:
        ``Ranked`` for recognised modules, ``IGNORED`` otherwise.
    """
    if category is None:
        return IGNORED
    offset = 0 if kind is ImportKind.IMPORT else require_rank_offset()
    return Ranked(ranks[category] + offset)
