"""Comparison operators accepted as field-key suffixes (``"price >="``)."""

from __future__ import annotations

from enum import Enum
from typing import NamedTuple


class ComparisonOperator(str, Enum):
    """Supported comparison operators for field conditions."""

    EQ = "="
    NE = "!="
    GT = ">"
    GE = ">="
    LT = "<"
    LE = "<="
    IN = "in"
    NOT_IN = "not in"
    IS = "is"
    IS_NOT = "is not"


# Range operators -> bound keys understood by the range filter
RANGE_BOUNDS: dict[ComparisonOperator, str] = {
    ComparisonOperator.GT: "gt",
    ComparisonOperator.GE: "gte",
    ComparisonOperator.LT: "lt",
    ComparisonOperator.LE: "lte",
}

_OPERATORS_BY_TOKEN: dict[str, ComparisonOperator] = {
    m.value: m for m in ComparisonOperator
}


class FieldKey(NamedTuple):
    """A field key split into its field name and operator suffix."""

    field: str
    operator: ComparisonOperator | None
    token: str


def normalize_token(token: str) -> str:
    """Lower-case, trim and collapse internal whitespace of an operator token."""
    return " ".join(token.lower().split())


def split_field_key(key: str) -> FieldKey:
    """
    Split ``"<field> <operator>"`` on the first whitespace run.

    A key without an operator suffix compares for equality. ``operator``
    is ``None`` when the token is not a known operator.
    """
    parts = key.strip().split(None, 1)
    if not parts:
        return FieldKey("", ComparisonOperator.EQ, ComparisonOperator.EQ.value)
    if len(parts) == 1:
        return FieldKey(parts[0], ComparisonOperator.EQ, ComparisonOperator.EQ.value)
    token = normalize_token(parts[1])
    return FieldKey(parts[0], _OPERATORS_BY_TOKEN.get(token), token)


def valid_tokens() -> list[str]:
    return list(_OPERATORS_BY_TOKEN)
