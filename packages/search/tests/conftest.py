"""Shared fixtures for search filter tests."""

from __future__ import annotations

import pytest

from cqrs_ddd_search import (
    CompilerConfig,
    ConditionParser,
    FilterBuilder,
    FilterDialect,
    SearchFilterCompiler,
)


@pytest.fixture
def builder() -> FilterBuilder:
    return FilterBuilder()


@pytest.fixture
def parser(builder: FilterBuilder) -> ConditionParser:
    return ConditionParser(builder=builder)


@pytest.fixture
def compiler() -> SearchFilterCompiler:
    """Compiler for the legacy (Elasticsearch 1.x) filter DSL."""
    return SearchFilterCompiler()


@pytest.fixture
def bool_compiler() -> SearchFilterCompiler:
    return SearchFilterCompiler(CompilerConfig(dialect=FilterDialect.BOOL))
