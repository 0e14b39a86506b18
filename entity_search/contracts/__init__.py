"""Entity search contract v1: shared types for requests, matched documents, and results with facets."""

from entity_search.contracts.search_v1 import (
    AggregationMetadata,
    Filter,
    FilterValue,
    ScrollResult,
    SearchEntity,
    SearchFlags,
    SearchRequest,
    SearchResult,
    SearchResultMetadata,
    SortCriterion,
)

__all__ = [
    "AggregationMetadata",
    "Filter",
    "FilterValue",
    "ScrollResult",
    "SearchEntity",
    "SearchFlags",
    "SearchRequest",
    "SearchResult",
    "SearchResultMetadata",
    "SortCriterion",
]
