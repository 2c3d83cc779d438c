"""
Search filter exception hierarchy.

All exceptions inherit from ``SearchFilterError`` and provide
``to_dict()`` for API-friendly error responses.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class SearchFilterError(Exception):
    """Base exception for all search filter errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class UnsupportedFilterError(SearchFilterError):
    """A filter or combinator was requested under a name that cannot be built."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Cannot build filter {name}")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "UNSUPPORTED_FILTER",
            "name": self.name,
        }


class OperatorNotFoundError(SearchFilterError):
    """
    A field key such as ``"age >=="`` ends in a suffix that names no
    comparison. Only raised when ``ParserConfig.strict_operators`` is set;
    otherwise the parser compares for equality.

    ``suggestions`` lists the closest known suffixes, so ``"not_in"``
    points at ``"not in"``.
    """

    def __init__(
        self,
        operator: str,
        valid_operators: list[str],
        field: str | None = None,
    ) -> None:
        self.operator = operator
        self.field = field
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(operator, valid_operators, n=3, cutoff=0.5)

        where = f" on field '{field}'" if field is not None else ""
        message = f"No comparison suffix '{operator}'{where}."
        if self.suggestions:
            message += f" Closest suffixes: {', '.join(self.suggestions)}."
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERATOR_NOT_FOUND",
            "field": self.field,
            "operator": self.operator,
            "suggestions": self.suggestions,
            "valid_operators": sorted(self.valid_operators),
        }


class MalformedConditionError(SearchFilterError):
    """A scalar value appeared where a condition mapping was expected."""

    def __init__(self, value: Any, path: str | None = None) -> None:
        self.value = value
        self.path = path
        super().__init__(
            f"Expected a condition mapping or list at '{path or '<root>'}', "
            f"got {type(value).__name__}: {value!r}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "MALFORMED_CONDITION",
            "message": str(self),
            "path": self.path,
        }


class ConditionDepthError(SearchFilterError):
    """Condition tree nests deeper than the configured limit."""

    def __init__(self, max_depth: int, path: str | None = None) -> None:
        self.max_depth = max_depth
        self.path = path
        super().__init__(
            f"Condition tree exceeds maximum nesting depth of {max_depth} "
            f"at '{path or '<root>'}'"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "CONDITION_TOO_DEEP",
            "max_depth": self.max_depth,
            "path": self.path,
        }


class FrozenFilterError(SearchFilterError):
    """Raised when a clause is added to a composite that has been frozen."""


class FilterCompileError(SearchFilterError):
    """Raised when a filter node cannot be rendered to the engine DSL."""
