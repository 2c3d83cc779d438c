"""Condition trees -> composable search engine filters."""

from __future__ import annotations

from .builder import FilterBuilder
from .compiler import SearchFilterCompiler
from .conditions import ConditionKind, as_list, classify
from .config import CompilerConfig, FilterDialect, ParserConfig
from .exceptions import (
    ConditionDepthError,
    FilterCompileError,
    FrozenFilterError,
    MalformedConditionError,
    OperatorNotFoundError,
    SearchFilterError,
    UnsupportedFilterError,
)
from .filters import (
    BaseFilter,
    BoolFilter,
    CompositeFilter,
    ExistsFilter,
    MissingFilter,
    NotFilter,
    OrFilter,
    RangeFilter,
    RawFilter,
    TermFilter,
    TermsFilter,
)
from .operators import ComparisonOperator, FieldKey, split_field_key
from .parser import ConditionParser

__all__ = [
    # Filter nodes
    "BaseFilter",
    "CompositeFilter",
    "TermFilter",
    "TermsFilter",
    "RangeFilter",
    "MissingFilter",
    "ExistsFilter",
    "RawFilter",
    "BoolFilter",
    "OrFilter",
    "NotFilter",
    # Operators / condition values
    "ComparisonOperator",
    "FieldKey",
    "split_field_key",
    "ConditionKind",
    "classify",
    "as_list",
    # Building / parsing / compiling
    "FilterBuilder",
    "ConditionParser",
    "SearchFilterCompiler",
    # Configuration
    "ParserConfig",
    "CompilerConfig",
    "FilterDialect",
    # Exceptions
    "SearchFilterError",
    "UnsupportedFilterError",
    "OperatorNotFoundError",
    "MalformedConditionError",
    "ConditionDepthError",
    "FrozenFilterError",
    "FilterCompileError",
]
