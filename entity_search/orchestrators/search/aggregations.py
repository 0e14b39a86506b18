"""Facet helpers: filter-value construction and the legacy "entity" facet.

Older clients ask for per-entity-type counts under the facet name "entity". The
backend only reports true per-entity-type counts under INDEX_VIRTUAL_FIELD, so
requests naming the legacy facet are widened to include it, and the result gets
an "entity" aggregation copied from it.
"""

import logging
from collections.abc import Iterable, Mapping

from entity_search.contracts.search_v1 import (
    AggregationMetadata,
    FilterValue,
    SearchEntity,
    SearchResult,
)
from entity_search.orchestrators.search.constants import (
    AGGREGATION_SEPARATOR_CHAR,
    ENTITY_FACET,
    ENTITY_FACET_DISPLAY_NAME,
    INDEX_VIRTUAL_FIELD,
    URN_PREFIX,
)

logger = logging.getLogger(__name__)


def is_urn(value: str) -> bool:
    """True for 'urn:<namespace>:<rest>' with non-empty parts."""
    if not value.startswith(URN_PREFIX):
        return False
    parts = value.split(":", 2)
    return len(parts) == 3 and all(parts)


def create_filter_value(value: str, facet_count: int, filtered: bool) -> FilterValue:
    """Filter value for one facet bucket; a trailing URN in a compound key is kept as its entity."""
    last = value.split(AGGREGATION_SEPARATOR_CHAR)[-1]
    return FilterValue(
        value=value,
        facet_count=facet_count,
        filtered=filtered,
        entity=last if is_urn(last) else None,
    )


def convert_to_filters(
    aggregations: Mapping[str, int], filtered_values: Iterable[str] = ()
) -> list[FilterValue]:
    """Filter values ordered by descending count; ties keep mapping order."""
    filtered = set(filtered_values)
    values = [
        create_filter_value(value, count, value in filtered)
        for value, count in aggregations.items()
    ]
    values.sort(key=lambda fv: -fv.facet_count)
    return values


def with_legacy_entity_facet(facets: list[str] | None) -> list[str] | None:
    """Facet list to send to the backend. Returns a new list; the caller's list is untouched."""
    if facets is None or ENTITY_FACET not in facets:
        return facets
    return [*facets, INDEX_VIRTUAL_FIELD]


def needs_entity_aggregation(facets: list[str] | None) -> bool:
    return facets is None or ENTITY_FACET in facets or INDEX_VIRTUAL_FIELD in facets


def count_entities_by_type(entities: Iterable[SearchEntity]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for entity in entities:
        counts[entity.entity_type] = counts.get(entity.entity_type, 0) + 1
    return counts


def entity_type_aggregation(counts: Mapping[str, int]) -> AggregationMetadata:
    counts = dict(counts)
    return AggregationMetadata(
        name=ENTITY_FACET,
        display_name=ENTITY_FACET_DISPLAY_NAME,
        aggregations=counts,
        filter_values=convert_to_filters(counts),
    )


def add_legacy_entity_aggregation(result: SearchResult) -> AggregationMetadata:
    """Append the "entity" aggregation to result.metadata in place and return it.

    Counts come from the INDEX_VIRTUAL_FIELD aggregation, which stays in place.
    If the backend left it out, counts are rebuilt from the returned page only:
    entity types with no hits on this page are missing and the rest are capped
    at the page size.
    """
    aggregations = result.metadata.aggregations
    virtual = next((agg for agg in aggregations if agg.name == INDEX_VIRTUAL_FIELD), None)
    if virtual is not None:
        counts = virtual.aggregations
    else:
        logger.warning(
            "Backend result has no '%s' aggregation; counting entity types on the returned page",
            INDEX_VIRTUAL_FIELD,
        )
        counts = count_entities_by_type(result.entities)
    legacy = entity_type_aggregation(counts)
    aggregations.append(legacy)
    return legacy
