"""
ConditionParser: nested condition mappings -> filter nodes.

Conditions are written the way application code writes "where" clauses::

    parser.parse({
        "status": "active",
        "age >=": 18,
        "deleted_at is": None,
        "or": {"role": "admin", "role in": ["owner", "editor"]},
        "not": {"tag in": ["spam"]},
    })

Keys are field names with an optional operator suffix, the grouping
keywords ``and`` / ``or`` / ``not`` (any case), or list positions whose
value is a nested condition group. Entries at the same level are
implicitly AND-ed: the result is a list the caller combines.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from .builder import FilterBuilder
from .conditions import ConditionKind, as_list, classify, is_sequence_key
from .config import ParserConfig
from .exceptions import (
    ConditionDepthError,
    MalformedConditionError,
    OperatorNotFoundError,
)
from .filters import BaseFilter
from .operators import (
    RANGE_BOUNDS,
    ComparisonOperator,
    split_field_key,
    valid_tokens,
)

logger = logging.getLogger("cqrs_ddd.search.parser")

_KEYWORDS: frozenset[str] = frozenset({"and", "or", "not"})

_LeafHandler = Callable[["ConditionParser", str, ComparisonOperator, Any], BaseFilter]


class ConditionParser:
    """Translate a condition tree into a list of AND-combinable filter nodes."""

    def __init__(
        self,
        builder: FilterBuilder | None = None,
        config: ParserConfig | None = None,
    ) -> None:
        self._builder = builder if builder is not None else FilterBuilder()
        self._config = config if config is not None else ParserConfig()

    @property
    def config(self) -> ParserConfig:
        return self._config

    def parse(self, conditions: Any) -> list[BaseFilter]:
        """
        Parse *conditions* and return the filters in input order.

        A pre-built filter node is returned unchanged as ``[node]``, and
        pre-built nodes found as values are kept as given, mutable or not.
        ``None`` and empty mappings yield ``[]``. Composites the parser
        creates for groups and negated operators are frozen.

        Raises:
            MalformedConditionError: If *conditions* is a scalar.
            ConditionDepthError: If nesting exceeds ``config.max_depth``.
            OperatorNotFoundError: Unknown operator in strict mode.
        """
        if conditions is None:
            return []
        return self._parse(conditions, depth=1, path="<root>")

    # -- tree walk -----------------------------------------------------------

    def _parse(self, conditions: Any, *, depth: int, path: str) -> list[BaseFilter]:
        if depth > self._config.max_depth:
            raise ConditionDepthError(self._config.max_depth, path)

        kind = classify(conditions)
        if kind is ConditionKind.PREBUILT_FILTER:
            return [conditions]
        if kind is ConditionKind.SCALAR:
            raise MalformedConditionError(conditions, path)

        entries: Iterable[tuple[Any, Any]] = (
            conditions.items()
            if kind is ConditionKind.NESTED_MAP
            else enumerate(conditions)
        )
        result: list[BaseFilter] = []
        for key, value in entries:
            child_path = f"{path}.{key}"
            node = self._parse_entry(key, value, depth=depth, path=child_path)
            if node is not None:
                result.append(node)
        return result

    def _parse_entry(
        self,
        key: Any,
        value: Any,
        *,
        depth: int,
        path: str,
    ) -> BaseFilter | None:
        if is_sequence_key(key):
            nodes = self._parse(value, depth=depth + 1, path=path)
            if not nodes:
                return None
            if len(nodes) == 1:
                return nodes[0]
            return self._builder.combine_and(*nodes)

        name = str(key)
        keyword = name.strip().lower()
        if keyword in _KEYWORDS:
            return self._parse_group(keyword, value, depth=depth, path=path)

        if classify(value) is ConditionKind.PREBUILT_FILTER:
            return value

        prefix = self._config.literal_field_prefix
        if prefix and name.startswith(prefix):
            name = name[len(prefix) :]
            logger.debug("Literal field key %r at %s", name, path)
        return self._parse_field(name, value)

    def _parse_group(
        self,
        keyword: str,
        value: Any,
        *,
        depth: int,
        path: str,
    ) -> BaseFilter:
        nodes = self._parse(value, depth=depth + 1, path=path)
        if keyword == "and":
            return self._builder.combine_and(*nodes)
        if keyword == "or":
            return self._builder.combine_or(*nodes)
        # NOT wraps exactly one child
        inner = nodes[0] if len(nodes) == 1 else self._builder.combine_and(*nodes)
        return self._builder.not_(inner)

    # -- operator-suffix resolution ------------------------------------------

    def _parse_field(self, key: str, value: Any) -> BaseFilter:
        field, operator, token = split_field_key(key)
        if operator is None:
            if self._config.strict_operators:
                raise OperatorNotFoundError(token, valid_tokens(), field)
            logger.debug(
                "Unknown operator %r on field %r; comparing for equality",
                token,
                field,
            )
            operator = ComparisonOperator.EQ
        return _LEAF_HANDLERS[operator](self, field, operator, value)

    def _range(
        self, field: str, operator: ComparisonOperator, value: Any
    ) -> BaseFilter:
        return self._builder.range(field, {RANGE_BOUNDS[operator]: value})

    def _in(
        self, field: str, _operator: ComparisonOperator, value: Any
    ) -> BaseFilter:
        return self._builder.terms(field, as_list(value))

    def _not_in(
        self, field: str, _operator: ComparisonOperator, value: Any
    ) -> BaseFilter:
        return self._builder.not_(self._builder.terms(field, as_list(value)))

    def _is(
        self, field: str, _operator: ComparisonOperator, value: Any
    ) -> BaseFilter:
        if value is None:
            return self._builder.missing(field)
        return self._builder.term(field, value)

    def _is_not(
        self, field: str, _operator: ComparisonOperator, value: Any
    ) -> BaseFilter:
        if value is None:
            return self._builder.not_(self._builder.missing(field))
        return self._builder.not_(self._builder.term(field, value))

    def _not_equal(
        self, field: str, _operator: ComparisonOperator, value: Any
    ) -> BaseFilter:
        return self._builder.not_(self._builder.term(field, value))

    def _equal(
        self, field: str, _operator: ComparisonOperator, value: Any
    ) -> BaseFilter:
        return self._builder.term(field, value)


_LEAF_HANDLERS: Mapping[ComparisonOperator, _LeafHandler] = {
    ComparisonOperator.GT: ConditionParser._range,
    ComparisonOperator.GE: ConditionParser._range,
    ComparisonOperator.LT: ConditionParser._range,
    ComparisonOperator.LE: ConditionParser._range,
    ComparisonOperator.IN: ConditionParser._in,
    ComparisonOperator.NOT_IN: ConditionParser._not_in,
    ComparisonOperator.IS: ConditionParser._is,
    ComparisonOperator.IS_NOT: ConditionParser._is_not,
    ComparisonOperator.NE: ConditionParser._not_equal,
    ComparisonOperator.EQ: ConditionParser._equal,
}
