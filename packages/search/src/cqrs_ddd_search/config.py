"""Parser and compiler configuration."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FilterDialect(str, Enum):
    """Target DSL flavour for compiled filters."""

    # Elasticsearch 1.x filter DSL: and / or / not / missing filters
    LEGACY = "legacy"
    # Everything expressed through bool queries (Elasticsearch 5+, OpenSearch)
    BOOL = "bool"


class ParserConfig(BaseModel):
    """
    Configuration for :class:`~cqrs_ddd_search.parser.ConditionParser`.

    ``literal_field_prefix`` lets a field literally named ``and``, ``or``
    or ``not`` be written as ``{"~or": 1}``. The prefix is always
    stripped, so a field whose real name starts with ``~`` has to be
    written with it doubled (``"~~tilde"``), or escaping turned off with
    ``literal_field_prefix=None``. ``~`` is the default because it does
    not occur in ordinary index field names, unlike ``@`` (``@timestamp``)
    or ``_`` (``_id``).
    """

    model_config = ConfigDict(frozen=True)

    max_depth: int = Field(default=64, ge=1)

    # Raise OperatorNotFoundError instead of falling back to equality
    strict_operators: bool = False

    # Keys starting with this prefix are field names, never and/or/not keywords.
    # None disables escaping.
    literal_field_prefix: str | None = "~"

    @field_validator("literal_field_prefix")
    @classmethod
    def _prefix_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("literal_field_prefix must not be blank")
        return value


class CompilerConfig(BaseModel):
    """Configuration for :class:`~cqrs_ddd_search.compiler.SearchFilterCompiler`."""

    model_config = ConfigDict(frozen=True)

    dialect: FilterDialect = FilterDialect.LEGACY
