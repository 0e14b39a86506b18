"""Entity Search Contract v1.

Defines the canonical types exchanged with the search backend and returned to callers:
  - Request shaping (Filter, SortCriterion, SearchFlags, SearchRequest)
  - Matched documents (SearchEntity, MatchedField)
  - Result payloads (SearchResult, ScrollResult) and their facet metadata
    (SearchResultMetadata, AggregationMetadata, FilterValue)

Filters, sort criteria and flags are opaque to the orchestrator: they are passed
through to the backend unchanged.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# ---------------------------------------------------------------------------
# Filters and sorting
# ---------------------------------------------------------------------------


class Condition(StrEnum):
    EQUAL = "EQUAL"
    CONTAIN = "CONTAIN"
    START_WITH = "START_WITH"
    END_WITH = "END_WITH"
    EXISTS = "EXISTS"
    GREATER_THAN = "GREATER_THAN"
    GREATER_THAN_OR_EQUAL_TO = "GREATER_THAN_OR_EQUAL_TO"
    LESS_THAN = "LESS_THAN"
    LESS_THAN_OR_EQUAL_TO = "LESS_THAN_OR_EQUAL_TO"
    IN = "IN"


class SortOrder(StrEnum):
    ASCENDING = "ASCENDING"
    DESCENDING = "DESCENDING"


class Criterion(BaseModel):
    """A single field condition."""

    field: str
    value: str = Field(default="")
    values: list[str] = Field(default_factory=list)
    condition: Condition = Field(default=Condition.EQUAL)
    negated: bool = Field(default=False)


class ConjunctiveCriterion(BaseModel):
    """Criteria that must all hold."""

    model_config = ConfigDict(populate_by_name=True)

    and_: list[Criterion] = Field(default_factory=list, alias="and")


class Filter(BaseModel):
    """Disjunction of conjunctive criteria applied to search hits (not to aggregations)."""

    model_config = ConfigDict(populate_by_name=True)

    or_: list[ConjunctiveCriterion] = Field(default_factory=list, alias="or")


class SortCriterion(BaseModel):
    field: str
    order: SortOrder = Field(default=SortOrder.DESCENDING)


class SearchFlags(BaseModel):
    """Optional switches controlling backend search behavior."""

    fulltext: bool | None = Field(default=None, description="Full-text vs structured query")
    skip_cache: bool = Field(default=False)
    skip_aggregates: bool = Field(default=False)
    skip_highlighting: bool = Field(default=False)
    max_aggregation_values: int | None = Field(default=None, ge=1)


# ---------------------------------------------------------------------------
# Matched documents
# ---------------------------------------------------------------------------


class MatchedField(BaseModel):
    name: str
    value: str


class SearchEntity(BaseModel):
    """One matched document."""

    urn: str = Field(description="Unique document identifier, e.g. 'urn:li:dataset:(...)'")
    entity_type: str = Field(description="Entity-type tag, e.g. 'dataset'")
    score: float | None = Field(default=None, description="Backend relevance score")
    features: dict[str, float] = Field(
        default_factory=dict,
        description="Per-feature scores used by rankers, e.g. {'search_score': 1.2}",
    )
    matched_fields: list[MatchedField] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Facets
# ---------------------------------------------------------------------------


class FilterValue(BaseModel):
    """One selectable value of a facet."""

    value: str
    facet_count: int = Field(ge=0)
    filtered: bool = Field(default=False, description="Whether the caller already filters on this value")
    entity: str | None = Field(default=None, description="URN referenced by the value, if any")


class AggregationMetadata(BaseModel):
    """A named facet result."""

    name: str
    display_name: str | None = Field(default=None)
    aggregations: dict[str, int] = Field(
        default_factory=dict, description="Facet value -> hit count"
    )
    filter_values: list[FilterValue] = Field(default_factory=list)

    @field_validator("aggregations")
    @classmethod
    def _validate_counts(cls, value: dict[str, int]) -> dict[str, int]:
        for key, count in value.items():
            if count < 0:
                raise ValueError(f"aggregation count for '{key}' must be non-negative")
        return value


class SearchResultMetadata(BaseModel):
    aggregations: list[AggregationMetadata] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Result payloads
# ---------------------------------------------------------------------------


class SearchResult(BaseModel):
    """Paged search result."""

    model_config = ConfigDict(populate_by_name=True)

    entities: list[SearchEntity] = Field(default_factory=list)
    num_entities: int = Field(default=0, ge=0, description="Total matches, not just this page")
    from_: int = Field(default=0, alias="from", description="Offset echoed from the request")
    page_size: int = Field(default=0)
    metadata: SearchResultMetadata = Field(default_factory=SearchResultMetadata)


class ScrollResult(BaseModel):
    """Cursor-based search result. scroll_id is None when there is no further page."""

    entities: list[SearchEntity] = Field(default_factory=list)
    num_entities: int = Field(default=0, ge=0)
    page_size: int = Field(default=0)
    scroll_id: str | None = Field(default=None)
    metadata: SearchResultMetadata = Field(default_factory=SearchResultMetadata)


# ---------------------------------------------------------------------------
# Request (built by the orchestrator from operation parameters, for logging)
# ---------------------------------------------------------------------------


class SearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    operation: str
    entity_names: list[str] = Field(default_factory=list, description="Empty means all")
    query: str = Field(default="")
    post_filter: Filter | None = Field(default=None)
    sort_criterion: SortCriterion | None = Field(default=None)
    from_: int | None = Field(default=None, alias="from")
    size: int = Field(default=0)
    scroll_id: str | None = Field(default=None)
    keep_alive: str | None = Field(default=None)
    search_flags: SearchFlags | None = Field(default=None)
    facets: list[str] | None = Field(default=None)

    def summary(self) -> dict[str, Any]:
        """Compact dict for log events (unset optional parts omitted)."""
        return self.model_dump(exclude_none=True, by_alias=True, mode="json")
