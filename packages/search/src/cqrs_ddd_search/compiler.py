"""Search engine filter DSL compiler for filter node trees."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .config import CompilerConfig, FilterDialect
from .exceptions import FilterCompileError
from .filters import (
    BaseFilter,
    BoolFilter,
    ExistsFilter,
    MissingFilter,
    NotFilter,
    OrFilter,
    RangeFilter,
    RawFilter,
    TermFilter,
    TermsFilter,
)

logger = logging.getLogger("cqrs_ddd.search.compiler")

_MATCH_ALL: dict[str, Any] = {"match_all": {}}


class SearchFilterCompiler:
    """
    Compiles filter nodes to search engine DSL dictionaries.

    The ``legacy`` dialect emits the Elasticsearch 1.x filter DSL
    (``and`` / ``or`` / ``not`` / ``missing`` filters). The ``bool``
    dialect expresses every composite as a ``bool`` query, which is what
    current engines accept in a filter context.
    """

    def __init__(self, config: CompilerConfig | None = None) -> None:
        self._config = config if config is not None else CompilerConfig()
        self._compilers: dict[type[BaseFilter], Callable[[Any], dict[str, Any]]] = {
            TermFilter: self._compile_term,
            TermsFilter: self._compile_terms,
            RangeFilter: self._compile_range,
            ExistsFilter: self._compile_exists,
            MissingFilter: self._compile_missing,
            RawFilter: self._compile_raw,
            BoolFilter: self._compile_bool,
            OrFilter: self._compile_or,
            NotFilter: self._compile_not,
        }

    @property
    def dialect(self) -> FilterDialect:
        return self._config.dialect

    def compile(
        self,
        filters: BaseFilter | Sequence[BaseFilter] | Mapping[str, Any] | None,
    ) -> dict[str, Any]:
        """
        Build the engine filter for *filters*.

        Accepts a single node, a list of nodes as returned by
        ``ConditionParser.parse`` (AND-combined when there are several),
        or a raw DSL mapping which is returned as-is. ``None`` and an
        empty list match everything.
        """
        if filters is None:
            return dict(_MATCH_ALL)
        if isinstance(filters, BaseFilter):
            return self.compile_node(filters)
        if isinstance(filters, Mapping):
            return dict(filters)
        nodes = list(filters)
        if not nodes:
            return dict(_MATCH_ALL)
        if len(nodes) == 1:
            return self.compile_node(nodes[0])
        logger.debug(
            "Combining %d top-level filters (%s dialect)",
            len(nodes),
            self.dialect.value,
        )
        return self._compile_bool(BoolFilter(must=nodes))

    def compile_node(self, node: BaseFilter) -> dict[str, Any]:
        """Compile one node and its children."""
        compiler = self._compilers.get(type(node))
        if compiler is None:
            for node_type, candidate in self._compilers.items():
                if isinstance(node, node_type):
                    compiler = candidate
                    break
        if compiler is None:
            raise FilterCompileError(
                f"No compiler for filter node {type(node).__name__}"
            )
        return compiler(node)

    # -- leaves --------------------------------------------------------------

    def _compile_term(self, node: TermFilter) -> dict[str, Any]:
        return {"term": {node.field: node.value}}

    def _compile_terms(self, node: TermsFilter) -> dict[str, Any]:
        return {"terms": {node.field: list(node.values)}}

    def _compile_range(self, node: RangeFilter) -> dict[str, Any]:
        return {"range": {node.field: dict(node.bounds)}}

    def _compile_exists(self, node: ExistsFilter) -> dict[str, Any]:
        return {"exists": {"field": node.field}}

    def _compile_missing(self, node: MissingFilter) -> dict[str, Any]:
        if self.dialect is FilterDialect.LEGACY:
            return {"missing": {"field": node.field}}
        return {"bool": {"must_not": [{"exists": {"field": node.field}}]}}

    def _compile_raw(self, node: RawFilter) -> dict[str, Any]:
        return {node.name: self._compile_value(node.body)}

    def _compile_value(self, value: Any) -> Any:
        if isinstance(value, BaseFilter):
            return self.compile_node(value)
        if isinstance(value, Mapping):
            return {k: self._compile_value(v) for k, v in value.items()}
        if isinstance(value, list | tuple):
            return [self._compile_value(v) for v in value]
        return value

    # -- composites ----------------------------------------------------------

    def _compile_bool(self, node: BoolFilter) -> dict[str, Any]:
        body: dict[str, Any] = {}
        if node.must:
            body["must"] = [self.compile_node(f) for f in node.must]
        if node.should:
            body["should"] = [self.compile_node(f) for f in node.should]
            if self.dialect is FilterDialect.BOOL:
                body["minimum_should_match"] = 1
        if node.must_not:
            body["must_not"] = [self.compile_node(f) for f in node.must_not]
        return {"bool": body}

    def _compile_or(self, node: OrFilter) -> dict[str, Any]:
        compiled = [self.compile_node(f) for f in node.filters]
        if self.dialect is FilterDialect.LEGACY:
            return {"or": compiled}
        return {"bool": {"should": compiled, "minimum_should_match": 1}}

    def _compile_not(self, node: NotFilter) -> dict[str, Any]:
        inner = self.compile_node(node.filter)
        if self.dialect is FilterDialect.LEGACY:
            return {"not": {"filter": inner}}
        return {"bool": {"must_not": [inner]}}
