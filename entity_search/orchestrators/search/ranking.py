"""Ranking of a result page: default score ranker plus a typed outcome wrapper.

A ranker only re-orders. rank_entities() checks that the output is a permutation
of the input and reports any failure as a value instead of raising, so the
orchestrator decides how a failed ranking ends the request.
"""

import logging
from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass

from entity_search.contracts.search_v1 import SearchEntity
from entity_search.orchestrators.search.interface import SearchRanker

logger = logging.getLogger(__name__)

# Feature weight hierarchy: text relevance > usage signals > freshness
FEATURE_WEIGHTS: dict[str, float] = {
    "search_score": 1.0,
    "usage_score": 0.6,
    "freshness": 0.3,
}


def compute_ranking_score(
    entity: SearchEntity, weights: dict[str, float] | None = None
) -> float:
    """Weighted average of the entity's feature scores.

    Features without a weight count at 0.5. Entities without features rank by
    their backend score.
    """
    weights = FEATURE_WEIGHTS if weights is None else weights
    if not entity.features:
        return entity.score or 0.0

    total_weight = 0.0
    total_score = 0.0
    for feature, value in entity.features.items():
        w = weights.get(feature, 0.5)
        total_weight += w
        total_score += value * w
    return total_score / total_weight if total_weight > 0 else 0.0


class ScoreRanker(SearchRanker):
    """Orders entities by descending ranking score; ties keep backend order."""

    def __init__(self, weights: dict[str, float] | None = None) -> None:
        self._weights = dict(FEATURE_WEIGHTS if weights is None else weights)

    def rank(self, entities: list[SearchEntity]) -> list[SearchEntity]:
        if not entities:
            return []
        scored = [(compute_ranking_score(e, self._weights), e) for e in entities]
        scored.sort(key=lambda x: -x[0])
        logger.debug("Ranked %s entities", len(scored))
        return [e for _, e in scored]


@dataclass(frozen=True)
class RankOutcome:
    """Ranked entities, or the error that prevented ranking."""

    entities: list[SearchEntity] | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def _membership_error(
    before: Sequence[SearchEntity], after: Sequence[SearchEntity]
) -> ValueError | None:
    expected = Counter(e.urn for e in before)
    actual = Counter(e.urn for e in after)
    if expected == actual:
        return None
    added = sorted((actual - expected).elements())
    removed = sorted((expected - actual).elements())
    return ValueError(f"ranker changed the result set: added={added}, removed={removed}")


def rank_entities(ranker: SearchRanker, entities: Sequence[SearchEntity]) -> RankOutcome:
    try:
        ranked = list(ranker.rank(list(entities)))
    except Exception as e:
        return RankOutcome(error=e)
    error = _membership_error(entities, ranked)
    if error is not None:
        return RankOutcome(error=error)
    return RankOutcome(entities=ranked)
