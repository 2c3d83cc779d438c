"""
Tagged view over the values found in a condition tree.

Condition mappings hold scalars, lists, nested mappings and pre-built
filter nodes interchangeably; :func:`classify` tags each value once so
the parser branches on a closed set of kinds.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from .filters import BaseFilter


class ConditionKind(str, Enum):
    SCALAR = "scalar"
    LIST = "list"
    NESTED_MAP = "nested_map"
    PREBUILT_FILTER = "prebuilt_filter"


_LIST_TYPES = (list, tuple, set, frozenset)


def classify(value: Any) -> ConditionKind:
    """Return the :class:`ConditionKind` of a condition value."""
    if isinstance(value, BaseFilter):
        return ConditionKind.PREBUILT_FILTER
    if isinstance(value, Mapping):
        return ConditionKind.NESTED_MAP
    if isinstance(value, _LIST_TYPES):
        return ConditionKind.LIST
    return ConditionKind.SCALAR


def is_sequence_key(key: Any) -> bool:
    """True for list-style keys: integers and all-digit strings."""
    if isinstance(key, bool):
        return False
    if isinstance(key, int):
        return True
    return isinstance(key, str) and key.strip().isdigit()


def as_list(value: Any) -> list[Any]:
    """Coerce *value* to a list; scalars become single-element lists."""
    if classify(value) is ConditionKind.LIST:
        return list(value)
    return [value]
