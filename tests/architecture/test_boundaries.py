from pytest_archon import archrule


def test_filter_nodes_independence() -> None:
    """
    Filter nodes, operators and exceptions are the lowest layer.
    They must not import the builder, parser or compiler.
    """
    (
        archrule("filter_nodes_independence")
        .match("cqrs_ddd_search.filters")
        .match("cqrs_ddd_search.operators")
        .match("cqrs_ddd_search.exceptions")
        .should_not_import("cqrs_ddd_search.builder")
        .should_not_import("cqrs_ddd_search.parser")
        .should_not_import("cqrs_ddd_search.compiler")
        .check("cqrs_ddd_search")
    )


def test_compiler_independent_of_parsing() -> None:
    """
    The compiler renders filter nodes, however they were built.
    It must not depend on the condition parser or the builder.
    """
    (
        archrule("compiler_independence")
        .match("cqrs_ddd_search.compiler")
        .should_not_import("cqrs_ddd_search.parser")
        .should_not_import("cqrs_ddd_search.builder")
        .check("cqrs_ddd_search")
    )


def test_pydantic_confined_to_config() -> None:
    """
    Only the configuration module talks to pydantic directly.
    """
    (
        archrule("pydantic_confined_to_config")
        .match("cqrs_ddd_search*")
        .exclude("cqrs_ddd_search.config")
        .should_not_import("pydantic*")
        .check("cqrs_ddd_search", only_direct_imports=True)
    )
