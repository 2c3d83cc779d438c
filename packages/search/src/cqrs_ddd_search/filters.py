"""
Filter node value objects.

Leaves test a single field (``term``, ``terms``, ``range``, ``missing``,
``exists``) or carry an arbitrary engine filter body (``RawFilter``).
Composites combine children with AND (``BoolFilter``), OR (``OrFilter``)
or NOT (``NotFilter``).

Composites are mutable builders until :meth:`freeze` is called::

    bool_filter = BoolFilter().add_must(TermFilter("status", "active"))
    bool_filter.freeze()
    bool_filter.add_must(...)  # → FrozenFilterError
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar

from .exceptions import FrozenFilterError


class BaseFilter(ABC):
    """Base class for filter nodes with logic operator support."""

    kind: ClassVar[str]

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Engine-neutral representation of this node."""
        ...

    def leaves(self) -> Iterator[BaseFilter]:
        """Yield leaf nodes depth-first."""
        yield self

    def __and__(self, other: BaseFilter) -> BoolFilter:
        return BoolFilter(must=(self, other)).freeze()

    def __or__(self, other: BaseFilter) -> OrFilter:
        return OrFilter((self, other)).freeze()

    def __invert__(self) -> NotFilter:
        return NotFilter(self).freeze()


# -- leaves ------------------------------------------------------------------


@dataclass(frozen=True)
class TermFilter(BaseFilter):
    """Exact value match on a field."""

    kind: ClassVar[str] = "term"

    field: str
    value: Any

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.kind, "attr": self.field, "val": self.value}


@dataclass(frozen=True)
class TermsFilter(BaseFilter):
    """Field matches any of the given values."""

    kind: ClassVar[str] = "terms"

    field: str
    values: tuple[Any, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.kind, "attr": self.field, "val": list(self.values)}


@dataclass(frozen=True)
class RangeFilter(BaseFilter):
    """Field compared against ``gt`` / ``gte`` / ``lt`` / ``lte`` bounds."""

    kind: ClassVar[str] = "range"

    field: str
    bounds: Mapping[str, Any]

    # read-only view over a dict; equality compares contents, hashing is off
    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "bounds", MappingProxyType(dict(self.bounds)))

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.kind, "attr": self.field, "val": dict(self.bounds)}


@dataclass(frozen=True)
class MissingFilter(BaseFilter):
    """Field is absent or null."""

    kind: ClassVar[str] = "missing"

    field: str

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.kind, "attr": self.field}


@dataclass(frozen=True)
class ExistsFilter(BaseFilter):
    """Field is present and not null."""

    kind: ClassVar[str] = "exists"

    field: str

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.kind, "attr": self.field}


@dataclass(frozen=True)
class RawFilter(BaseFilter):
    """
    Any other engine filter, rendered as ``{name: body}``.

    The body may embed other filter nodes (``nested``, ``has_child``,
    ``indices``); they are rendered recursively.
    """

    kind: ClassVar[str] = "raw"

    name: str
    body: Mapping[str, Any]

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        object.__setattr__(self, "body", MappingProxyType(dict(self.body)))

    def to_dict(self) -> dict[str, Any]:
        return {"op": self.name, "val": _node_values_to_dict(self.body)}


def _node_values_to_dict(value: Any) -> Any:
    if isinstance(value, BaseFilter):
        return value.to_dict()
    if isinstance(value, Mapping):
        return {k: _node_values_to_dict(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_node_values_to_dict(v) for v in value]
    return value


# -- composites --------------------------------------------------------------


class CompositeFilter(BaseFilter):
    """Filter with children; mutable until frozen."""

    def __init__(self) -> None:
        self._frozen = False

    @property
    def frozen(self) -> bool:
        return self._frozen

    @abstractmethod
    def children(self) -> tuple[BaseFilter, ...]: ...

    def freeze(self) -> Any:
        """
        Freeze this composite.

        Children are left as they are: a composite handed in by the caller
        stays theirs to extend. Composites built through
        :class:`~cqrs_ddd_search.builder.FilterBuilder` are frozen when made.
        """
        self._frozen = True
        return self

    def leaves(self) -> Iterator[BaseFilter]:
        for child in self.children():
            yield from child.leaves()

    def _ensure_mutable(self) -> None:
        if self._frozen:
            raise FrozenFilterError(
                f"{type(self).__name__} is frozen; build a new composite instead"
            )

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.to_dict() == other.to_dict()  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]


class BoolFilter(CompositeFilter):
    """
    Boolean composite with ``must`` / ``should`` / ``must_not`` clauses.

    A bool filter holding only ``must`` clauses is a plain conjunction
    and is what AND composition produces.
    """

    kind: ClassVar[str] = "bool"

    def __init__(
        self,
        must: Iterable[BaseFilter] = (),
        should: Iterable[BaseFilter] = (),
        must_not: Iterable[BaseFilter] = (),
    ) -> None:
        super().__init__()
        self._must: list[BaseFilter] = list(must)
        self._should: list[BaseFilter] = list(should)
        self._must_not: list[BaseFilter] = list(must_not)

    @property
    def must(self) -> tuple[BaseFilter, ...]:
        return tuple(self._must)

    @property
    def should(self) -> tuple[BaseFilter, ...]:
        return tuple(self._should)

    @property
    def must_not(self) -> tuple[BaseFilter, ...]:
        return tuple(self._must_not)

    @property
    def is_conjunction(self) -> bool:
        return not self._should and not self._must_not

    def add_must(self, *filters: BaseFilter) -> BoolFilter:
        self._ensure_mutable()
        self._must.extend(filters)
        return self

    def add_should(self, *filters: BaseFilter) -> BoolFilter:
        self._ensure_mutable()
        self._should.extend(filters)
        return self

    def add_must_not(self, *filters: BaseFilter) -> BoolFilter:
        self._ensure_mutable()
        self._must_not.extend(filters)
        return self

    def children(self) -> tuple[BaseFilter, ...]:
        return (*self._must, *self._should, *self._must_not)

    def freeze(self) -> BoolFilter:
        super().freeze()
        return self

    def to_dict(self) -> dict[str, Any]:
        if self.is_conjunction:
            return {
                "op": "and",
                "conditions": [f.to_dict() for f in self._must],
            }
        return {
            "op": self.kind,
            "must": [f.to_dict() for f in self._must],
            "should": [f.to_dict() for f in self._should],
            "must_not": [f.to_dict() for f in self._must_not],
        }

    def __repr__(self) -> str:
        return (
            f"BoolFilter(must={self._must!r}, should={self._should!r}, "
            f"must_not={self._must_not!r})"
        )


class OrFilter(CompositeFilter):
    """Logical OR over any number of children."""

    kind: ClassVar[str] = "or"

    def __init__(self, filters: Iterable[BaseFilter] = ()) -> None:
        super().__init__()
        self._filters: list[BaseFilter] = list(filters)

    @property
    def filters(self) -> tuple[BaseFilter, ...]:
        return tuple(self._filters)

    def add_filter(self, *filters: BaseFilter) -> OrFilter:
        self._ensure_mutable()
        self._filters.extend(filters)
        return self

    def children(self) -> tuple[BaseFilter, ...]:
        return tuple(self._filters)

    def freeze(self) -> OrFilter:
        super().freeze()
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.kind,
            "conditions": [f.to_dict() for f in self._filters],
        }

    def __repr__(self) -> str:
        return f"OrFilter({self._filters!r})"


class NotFilter(CompositeFilter):
    """Logical NOT of exactly one child."""

    kind: ClassVar[str] = "not"

    def __init__(self, filter: BaseFilter) -> None:  # noqa: A002
        super().__init__()
        self._filter = filter

    @property
    def filter(self) -> BaseFilter:
        return self._filter

    def children(self) -> tuple[BaseFilter, ...]:
        return (self._filter,)

    def freeze(self) -> NotFilter:
        super().freeze()
        return self

    def to_dict(self) -> dict[str, Any]:
        return {
            "op": self.kind,
            "conditions": [self._filter.to_dict()],
        }

    def __repr__(self) -> str:
        return f"NotFilter({self._filter!r})"
