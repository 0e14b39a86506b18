"""Orchestrators: request pipelines over external services (e.g. entity search)."""

from entity_search.orchestrators.search import (
    EntitySearchBackend,
    RankingFailure,
    SearchService,
)

__all__ = [
    "EntitySearchBackend",
    "RankingFailure",
    "SearchService",
]
