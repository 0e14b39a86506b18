"""Entity search orchestrator: prune empty indices, delegate to the backend, shape results.

Pipeline (search / search_across_entities / scroll_across_entities):
  1. Resolve entity types: requested names (or all) that have at least one indexed document
  2. Short-circuit: nothing left to search -> canonical empty result, backend not called
  3. Backend search (facets widened for the legacy "entity" facet)
  4. search: rank the returned page
     search_across_entities: add the legacy "entity" aggregation
  5. Return the shaped result
"""

from entity_search.contracts.search_v1 import (
    Filter,
    ScrollResult,
    SearchFlags,
    SearchRequest,
    SearchResult,
    SearchResultMetadata,
    SortCriterion,
)
from entity_search.core.logger import logger
from entity_search.orchestrators.search.aggregations import (
    add_legacy_entity_aggregation,
    needs_entity_aggregation,
    with_legacy_entity_facet,
)
from entity_search.orchestrators.search.errors import RankingFailure
from entity_search.orchestrators.search.interface import (
    EntityDocCountCache,
    EntitySearchBackend,
    SearchRanker,
)
from entity_search.orchestrators.search.ranking import rank_entities


def empty_search_result(from_: int, size: int) -> SearchResult:
    return SearchResult(
        entities=[],
        num_entities=0,
        from_=from_,
        page_size=size,
        metadata=SearchResultMetadata(aggregations=[]),
    )


def empty_scroll_result(size: int) -> ScrollResult:
    return ScrollResult(
        entities=[],
        num_entities=0,
        page_size=size,
        scroll_id=None,
        metadata=SearchResultMetadata(aggregations=[]),
    )


class SearchService:
    """Stateless orchestrator over a doc-count cache, a search backend and a ranker.

    Build once and share; safe for concurrent use as long as the collaborators are.
    """

    def __init__(
        self,
        entity_doc_count_cache: EntityDocCountCache,
        search_backend: EntitySearchBackend,
        search_ranker: SearchRanker,
    ):
        self._doc_count_cache = entity_doc_count_cache
        self._backend = search_backend
        self._ranker = search_ranker

    def doc_count_per_entity(self, entity_names: list[str]) -> dict[str, int]:
        """Cached document count per requested name (keys as given, unknown types -> 0)."""
        counts = self._doc_count_cache.get_entity_doc_count()
        return {name: counts.get(name.lower(), 0) for name in entity_names}

    def _entities_to_search(self, entity_names: list[str]) -> list[str]:
        """Non-empty entity types, restricted to entity_names unless it is empty."""
        non_empty = self._doc_count_cache.get_non_empty_entities()
        if not entity_names:
            return list(non_empty)
        requested = {name.lower() for name in entity_names}
        return [name for name in non_empty if name.lower() in requested]

    def search(
        self,
        entity_names: list[str],
        query: str,
        post_filter: Filter | None,
        sort_criterion: SortCriterion | None,
        from_: int,
        size: int,
        search_flags: SearchFlags | None = None,
    ) -> SearchResult:
        """Paged search over the given entity types, re-ordered by the ranker.

        Filters apply to search hits, not to aggregations.

        Raises:
            RankingFailure: the ranker failed; no partial result is returned.
        """
        logger.search_request(
            SearchRequest(
                operation="search",
                entity_names=entity_names,
                query=query,
                post_filter=post_filter,
                sort_criterion=sort_criterion,
                from_=from_,
                size=size,
                search_flags=search_flags,
            )
        )
        entities_to_search = self._entities_to_search(entity_names)
        if not entities_to_search:
            logger.short_circuit("search", entity_names)
            return empty_search_result(from_, size)

        result = self._backend.search(
            entities_to_search,
            query,
            post_filter,
            sort_criterion,
            from_,
            size,
            search_flags,
            None,
        )

        outcome = rank_entities(self._ranker, result.entities)
        if not outcome.ok:
            logger.ranking_failed(result, outcome.error)
            raise RankingFailure(result) from outcome.error

        ranked = result.model_copy(update={"entities": outcome.entities})
        logger.search_result("search", len(ranked.entities), ranked.num_entities)
        return ranked

    def search_across_entities(
        self,
        entity_names: list[str],
        query: str,
        post_filter: Filter | None,
        sort_criterion: SortCriterion | None,
        from_: int,
        size: int,
        search_flags: SearchFlags | None = None,
        facets: list[str] | None = None,
    ) -> SearchResult:
        """Paged search across entity types with aggregations.

        Args:
            entity_names: Entity types to search; empty searches all of them.
            facets: Facets to aggregate on; None lets the backend decide. The legacy
                "entity" facet is still honored for older clients.

        Returns:
            The backend result with an "entity" (display name "Type") aggregation
            appended when facets is None or names "entity" or "_entityType".
        """
        logger.search_request(
            SearchRequest(
                operation="search_across_entities",
                entity_names=entity_names,
                query=query,
                post_filter=post_filter,
                sort_criterion=sort_criterion,
                from_=from_,
                size=size,
                search_flags=search_flags,
                facets=facets,
            )
        )
        backend_facets = with_legacy_entity_facet(facets)
        entities_to_search = self._entities_to_search(entity_names)
        if not entities_to_search:
            logger.short_circuit("search_across_entities", entity_names)
            return empty_search_result(from_, size)

        result = self._backend.search(
            entities_to_search,
            query,
            post_filter,
            sort_criterion,
            from_,
            size,
            search_flags,
            backend_facets,
        )
        if needs_entity_aggregation(facets):
            # Backend results may be cached and handed out again; shape a copy
            result = result.model_copy(
                update={
                    "metadata": SearchResultMetadata(
                        aggregations=list(result.metadata.aggregations)
                    )
                }
            )
            add_legacy_entity_aggregation(result)

        logger.search_result("search_across_entities", len(result.entities), result.num_entities)
        return result

    def scroll_across_entities(
        self,
        entity_names: list[str],
        query: str,
        post_filter: Filter | None,
        sort_criterion: SortCriterion | None,
        scroll_id: str | None,
        keep_alive: str | None,
        size: int,
        search_flags: SearchFlags | None = None,
    ) -> ScrollResult:
        """Cursor-based search across entity types; pass the returned scroll_id to continue."""
        logger.search_request(
            SearchRequest(
                operation="scroll_across_entities",
                entity_names=entity_names,
                query=query,
                post_filter=post_filter,
                sort_criterion=sort_criterion,
                scroll_id=scroll_id,
                keep_alive=keep_alive,
                size=size,
                search_flags=search_flags,
            )
        )
        entities_to_search = self._entities_to_search(entity_names)
        if not entities_to_search:
            logger.short_circuit("scroll_across_entities", entity_names)
            return empty_scroll_result(size)

        result = self._backend.scroll(
            entities_to_search,
            query,
            post_filter,
            sort_criterion,
            scroll_id,
            keep_alive,
            size,
            search_flags,
        )
        logger.search_result("scroll_across_entities", len(result.entities), result.num_entities)
        return result
