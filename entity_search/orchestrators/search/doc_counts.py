"""In-memory document-count snapshot used to prune empty entity indices.

Whatever refreshes the counts (a scheduled doc-count query against the index,
an ingestion hook) writes them here; the orchestrator only reads.
"""

import logging
import threading
from collections.abc import Mapping

from entity_search.orchestrators.search.interface import EntityDocCountCache

logger = logging.getLogger(__name__)


class InMemoryDocCountCache(EntityDocCountCache):
    """Thread-safe entity-type -> document-count store. Keys are lowercased on write."""

    def __init__(self, counts: Mapping[str, int] | None = None) -> None:
        self._lock = threading.Lock()
        self._counts: dict[str, int] = {}
        if counts:
            self.update(counts)

    def set_count(self, entity_name: str, count: int) -> None:
        if count < 0:
            raise ValueError(f"document count for '{entity_name}' must be non-negative")
        with self._lock:
            self._counts[entity_name.lower()] = count

    def update(self, counts: Mapping[str, int]) -> None:
        normalized = self._normalize(counts)
        with self._lock:
            self._counts.update(normalized)
        logger.debug("Doc counts updated: %s", normalized)

    def replace(self, counts: Mapping[str, int]) -> None:
        """Swap in a complete new snapshot; entity types not listed are dropped."""
        normalized = self._normalize(counts)
        with self._lock:
            self._counts = normalized
        logger.info(
            "Doc counts replaced: %s entity types, %s non-empty",
            len(normalized),
            sum(1 for c in normalized.values() if c > 0),
        )

    def get_entity_doc_count(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)

    @staticmethod
    def _normalize(counts: Mapping[str, int]) -> dict[str, int]:
        normalized: dict[str, int] = {}
        for name, count in counts.items():
            if count < 0:
                raise ValueError(f"document count for '{name}' must be non-negative")
            normalized[name.lower()] = count
        return normalized
