"""Errors raised by the search orchestrator."""

from typing import Any


class EntitySearchError(Exception):
    """Base class for errors raised by entity search."""


class RankingFailure(EntitySearchError):
    """The ranker failed on a result page. Fatal for the request; never retried."""

    def __init__(self, result: Any):
        super().__init__(f"Failed to rank {result!r}")
        self.result = result
