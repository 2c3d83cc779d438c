"""
Factory surface for filter nodes.

One method per filter kind, plus AND / OR composition::

    builder = FilterBuilder()
    f = builder.combine_and(
        builder.term("status", "active"),
        builder.gte("age", 18),
        builder.not_(builder.missing("email")),
    )

Conditions written as nested mappings go through :meth:`FilterBuilder.parse`.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from .exceptions import UnsupportedFilterError
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

if TYPE_CHECKING:
    from .config import ParserConfig

# Names routed through combine() rather than a factory method
_COMBINATORS: frozenset[str] = frozenset({"and", "or"})


class FilterBuilder:
    """Builds filter nodes for the search engine filter DSL."""

    # -- combinators ---------------------------------------------------------

    def combine_and(self, *filters: BaseFilter) -> BoolFilter:
        """
        AND-combine *filters* into a new, frozen bool filter.

        Children that are themselves pure conjunctions are inlined in
        place instead of nested, so ``AND(a, AND(b, c))`` becomes
        ``AND(a, b, c)``. Children are never modified.
        """
        must: list[BaseFilter] = []
        for f in filters:
            if isinstance(f, BoolFilter) and f.is_conjunction:
                must.extend(f.must)
            else:
                must.append(f)
        return BoolFilter(must=must).freeze()

    def combine_or(self, *filters: BaseFilter) -> OrFilter:
        """OR-combine *filters* into a new, frozen or filter."""
        return OrFilter(filters).freeze()

    def combine(self, name: str, *filters: BaseFilter) -> BaseFilter:
        """
        Combine *filters* with the combinator called *name*.

        Raises:
            UnsupportedFilterError: If *name* is not ``and`` or ``or``.
        """
        op = name.strip().lower()
        if op == "and":
            return self.combine_and(*filters)
        if op == "or":
            return self.combine_or(*filters)
        raise UnsupportedFilterError(name)

    def build(self, name: str, *args: Any, **kwargs: Any) -> BaseFilter:
        """
        Build a filter by kind name, e.g. ``build("geo_distance", ...)``.

        Names are matched case-insensitively, ignoring surrounding space.

        Raises:
            UnsupportedFilterError: If no filter kind is called *name*.
            TypeError: If keyword arguments are given to ``and`` / ``or``.
        """
        kind = name.strip().lower()
        if kind in _COMBINATORS:
            if kwargs:
                raise TypeError(
                    f"combinator {kind!r} takes filters only, "
                    f"got keyword arguments {sorted(kwargs)}"
                )
            return self.combine(kind, *args)
        factory = self._factories().get(kind)
        if factory is None:
            raise UnsupportedFilterError(name)
        result: BaseFilter = factory(*args, **kwargs)
        return result

    def parse(
        self,
        conditions: Any,
        config: ParserConfig | None = None,
    ) -> list[BaseFilter]:
        """Parse a condition tree with this builder. See ``ConditionParser``."""
        from .parser import ConditionParser

        return ConditionParser(builder=self, config=config).parse(conditions)

    # -- boolean -------------------------------------------------------------

    def bool_(self) -> BoolFilter:
        """Empty, mutable bool filter for ``add_must`` / ``add_should`` chaining."""
        return BoolFilter()

    def not_(self, filter: BaseFilter) -> NotFilter:  # noqa: A002
        return NotFilter(filter).freeze()

    # -- field comparisons ---------------------------------------------------

    def term(self, field: str, value: Any) -> TermFilter:
        return TermFilter(field, value)

    def terms(self, field: str, values: Sequence[Any]) -> TermsFilter:
        return TermsFilter(field, tuple(values))

    def range(self, field: str, bounds: Mapping[str, Any]) -> RangeFilter:
        return RangeFilter(field, bounds)

    def between(self, field: str, from_: Any, to: Any) -> RangeFilter:
        """Field between *from_* and *to*, both inclusive."""
        return self.range(field, {"gte": from_, "lte": to})

    def gt(self, field: str, value: Any) -> RangeFilter:
        return self.range(field, {"gt": value})

    def gte(self, field: str, value: Any) -> RangeFilter:
        return self.range(field, {"gte": value})

    def lt(self, field: str, value: Any) -> RangeFilter:
        return self.range(field, {"lt": value})

    def lte(self, field: str, value: Any) -> RangeFilter:
        return self.range(field, {"lte": value})

    def exists(self, field: str) -> ExistsFilter:
        return ExistsFilter(field)

    def missing(self, field: str) -> MissingFilter:
        return MissingFilter(field)

    def prefix(self, field: str, prefix: str) -> RawFilter:
        return RawFilter("prefix", {field: prefix})

    def regexp(
        self,
        field: str,
        regexp: str,
        options: Mapping[str, Any] | None = None,
    ) -> RawFilter:
        """Regular expression match; *options* may set ``flags`` and similar."""
        return RawFilter("regexp", {field: {"value": regexp, **(options or {})}})

    # -- geo -----------------------------------------------------------------

    def geo_bounding_box(
        self,
        field: str,
        top_left: Any,
        bottom_right: Any,
    ) -> RawFilter:
        """
        Documents whose *field* lies inside the box spanned by two points.

        Points may be ``[lat, lon]`` lists, ``{"lat": .., "lon": ..}``
        mappings or geohash strings.
        """
        return RawFilter(
            "geo_bounding_box",
            {field: {"top_left": top_left, "bottom_right": bottom_right}},
        )

    def geo_distance(self, field: str, location: Any, distance: str) -> RawFilter:
        """Documents within *distance* (``"10km"``) of *location*."""
        return RawFilter("geo_distance", {"distance": distance, field: location})

    def geo_distance_range(
        self,
        field: str,
        location: Any,
        from_: str,
        to: str,
    ) -> RawFilter:
        """Documents between two distance radii from *location*."""
        return RawFilter(
            "geo_distance_range",
            {"gte": from_, "lte": to, field: location},
        )

    def geo_polygon(self, field: str, points: Sequence[Any]) -> RawFilter:
        """Documents whose *field* lies inside the polygon drawn by *points*."""
        return RawFilter("geo_polygon", {field: {"points": list(points)}})

    def geo_shape(
        self,
        field: str,
        coordinates: Sequence[Any],
        shape_type: str = "envelope",
    ) -> RawFilter:
        """
        Documents whose *field* is enclosed in a provided shape.

        *shape_type* is any engine shape type: envelope, linestring,
        polygon, multipolygon, ...
        """
        return RawFilter(
            "geo_shape",
            {field: {"shape": {"type": shape_type, "coordinates": list(coordinates)}}},
        )

    def geo_shape_index(
        self,
        field: str,
        shape_id: str,
        doc_type: str,
        index: str = "shapes",
        path: str = "shape",
    ) -> RawFilter:
        """Documents whose *field* is enclosed in a pre-indexed shape."""
        return RawFilter(
            "geo_shape",
            {
                field: {
                    "indexed_shape": {
                        "id": shape_id,
                        "type": doc_type,
                        "index": index,
                        "path": path,
                    }
                }
            },
        )

    def geo_hash_cell(
        self,
        field: str,
        location: Any,
        precision: int | str = -1,
        neighbors: bool = False,
    ) -> RawFilter:
        """Documents inside the geohash cell of *location* at *precision*."""
        body: dict[str, Any] = {field: location, "neighbors": neighbors}
        if precision != -1:
            body["precision"] = precision
        return RawFilter("geohash_cell", body)

    # -- structure -----------------------------------------------------------

    def has_child(self, filter: Any, doc_type: str | None = None) -> RawFilter:  # noqa: A002
        return RawFilter("has_child", _typed_body(filter, doc_type))

    def has_parent(self, filter: Any, doc_type: str | None = None) -> RawFilter:  # noqa: A002
        return RawFilter("has_parent", _typed_body(filter, doc_type))

    def nested(self, path: str, filter: Any) -> RawFilter:  # noqa: A002
        """
        Filter on a nested object path.

        A filter node is placed under ``filter``; a raw mapping is taken
        to be a query and placed under ``query``.
        """
        key = "filter" if isinstance(filter, BaseFilter) else "query"
        return RawFilter("nested", {"path": path, key: filter})

    def ids(self, ids: Sequence[Any] = (), doc_type: str | None = None) -> RawFilter:
        body: dict[str, Any] = {"values": list(ids)}
        if doc_type is not None:
            body["type"] = doc_type
        return RawFilter("ids", body)

    def indices(self, filter: BaseFilter, indices: Sequence[str]) -> RawFilter:  # noqa: A002
        return RawFilter("indices", {"indices": list(indices), "filter": filter})

    def type_(self, doc_type: str) -> RawFilter:
        return RawFilter("type", {"value": doc_type})

    def limit(self, limit: int | str) -> RawFilter:
        return RawFilter("limit", {"value": int(limit)})

    def match_all(self) -> RawFilter:
        return RawFilter("match_all", {})

    def query(self, query: Mapping[str, Any]) -> RawFilter:
        """Wrap a raw query body so it can be used as a filter."""
        return RawFilter("query", dict(query))

    def script(self, script: str | Mapping[str, Any]) -> RawFilter:
        return RawFilter("script", {"script": script})

    # -- internals -----------------------------------------------------------

    def _factories(self) -> dict[str, Callable[..., BaseFilter]]:
        return {
            "between": self.between,
            "bool": self.bool_,
            "exists": self.exists,
            "geo_bounding_box": self.geo_bounding_box,
            "geo_distance": self.geo_distance,
            "geo_distance_range": self.geo_distance_range,
            "geo_hash_cell": self.geo_hash_cell,
            "geo_polygon": self.geo_polygon,
            "geo_shape": self.geo_shape,
            "geo_shape_index": self.geo_shape_index,
            "gt": self.gt,
            "gte": self.gte,
            "has_child": self.has_child,
            "has_parent": self.has_parent,
            "ids": self.ids,
            "indices": self.indices,
            "limit": self.limit,
            "lt": self.lt,
            "lte": self.lte,
            "match_all": self.match_all,
            "missing": self.missing,
            "nested": self.nested,
            "not": self.not_,
            "prefix": self.prefix,
            "query": self.query,
            "range": self.range,
            "regexp": self.regexp,
            "script": self.script,
            "term": self.term,
            "terms": self.terms,
            "type": self.type_,
        }


def _typed_body(filter: Any, doc_type: str | None) -> dict[str, Any]:  # noqa: A002
    key = "filter" if isinstance(filter, BaseFilter) else "query"
    body: dict[str, Any] = {key: filter}
    if doc_type is not None:
        body["type"] = doc_type
    return body
