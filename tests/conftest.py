from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from entity_search.contracts.search_v1 import (
    AggregationMetadata,
    ScrollResult,
    SearchEntity,
    SearchResult,
    SearchResultMetadata,
)
from entity_search.orchestrators.search.doc_counts import InMemoryDocCountCache
from entity_search.orchestrators.search.interface import (
    EntitySearchBackend,
    SearchRanker,
)
from entity_search.orchestrators.search.orchestrator import SearchService
from entity_search.orchestrators.search.ranking import ScoreRanker


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "property: property-based deterministic tests")


def make_entity(entity_type: str, idx: int, score: float | None = None) -> SearchEntity:
    return SearchEntity(
        urn=f"urn:li:{entity_type}:{idx}",
        entity_type=entity_type,
        score=score,
    )


@pytest.fixture
def entity_factory() -> Callable[..., SearchEntity]:
    return make_entity


@pytest.fixture
def doc_count_cache() -> InMemoryDocCountCache:
    return InMemoryDocCountCache({"dataset": 42, "user": 7, "chart": 0, "dashboard": 3})


@pytest.fixture
def backend_result() -> SearchResult:
    entities = [make_entity("dataset", i, score=1.0 - i / 10) for i in range(5)]
    entities += [make_entity("user", i, score=0.5) for i in range(3)]
    return SearchResult(
        entities=entities,
        num_entities=120,
        from_=0,
        page_size=10,
        metadata=SearchResultMetadata(
            aggregations=[
                AggregationMetadata(
                    name="_entityType",
                    aggregations={"dataset": 100, "user": 20},
                ),
                AggregationMetadata(
                    name="platform",
                    display_name="Platform",
                    aggregations={"urn:li:dataPlatform:hive": 60},
                ),
            ]
        ),
    )


@pytest.fixture
def backend(backend_result: SearchResult) -> MagicMock:
    mock = MagicMock(spec=EntitySearchBackend)
    mock.search.return_value = backend_result
    mock.scroll.return_value = ScrollResult(
        entities=backend_result.entities,
        num_entities=120,
        page_size=8,
        scroll_id="scroll-2",
    )
    return mock


@pytest.fixture
def ranker() -> SearchRanker:
    return ScoreRanker()


@pytest.fixture
def service(doc_count_cache, backend, ranker) -> SearchService:
    return SearchService(
        entity_doc_count_cache=doc_count_cache,
        search_backend=backend,
        search_ranker=ranker,
    )
