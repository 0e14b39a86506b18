"""Entity search: empty-index pruning, legacy facet shaping, and ranking over a search backend."""

from entity_search.orchestrators.search.doc_counts import InMemoryDocCountCache
from entity_search.orchestrators.search.errors import EntitySearchError, RankingFailure
from entity_search.orchestrators.search.interface import (
    EntityDocCountCache,
    EntitySearchBackend,
    SearchRanker,
)
from entity_search.orchestrators.search.orchestrator import SearchService
from entity_search.orchestrators.search.ranking import ScoreRanker

__all__ = [
    "EntityDocCountCache",
    "EntitySearchBackend",
    "EntitySearchError",
    "InMemoryDocCountCache",
    "RankingFailure",
    "ScoreRanker",
    "SearchRanker",
    "SearchService",
]
