"""Interfaces of the collaborators the search orchestrator is wired with.

Implementations are shared across concurrent requests and must be safe for
concurrent read access.
"""

from abc import ABC, abstractmethod

from entity_search.contracts.search_v1 import (
    Filter,
    ScrollResult,
    SearchEntity,
    SearchFlags,
    SearchResult,
    SortCriterion,
)


class EntityDocCountCache(ABC):
    """Snapshot of indexed document counts per entity type."""

    @abstractmethod
    def get_entity_doc_count(self) -> dict[str, int]:
        """Lowercased entity-type name -> indexed document count."""

    def get_non_empty_entities(self) -> list[str]:
        """Entity types with at least one indexed document, in mapping order."""
        return [name for name, count in self.get_entity_doc_count().items() if count > 0]


class EntitySearchBackend(ABC):
    """Executes text/filter search over the indices of the given entity types."""

    @abstractmethod
    def search(
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
        """Paged search. facets=None means the backend's default aggregations."""

    @abstractmethod
    def scroll(
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
        """Cursor-based search. scroll_id is None for the first page."""


class SearchRanker(ABC):
    """Re-orders a page of matched entities."""

    @abstractmethod
    def rank(self, entities: list[SearchEntity]) -> list[SearchEntity]:
        """Return the same entities in ranked order, without additions or removals."""
