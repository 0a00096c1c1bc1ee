"""
Record and result types exchanged with the ranking engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class InputRecord:
    """A record as handed to the engine: id plus raw source and group values."""

    record_id: str
    source_value: Any
    group_value: Any = None


@dataclass(frozen=True)
class RankResult:
    """The rank assigned to one record."""

    record_id: str
    rank: int


@dataclass(frozen=True)
class GroupSummary:
    """Per-group counts for a group that produced at least one rank."""

    key: Any
    ranked: int
    excluded: int


@dataclass(frozen=True)
class RankingOutcome:
    """
    Ranks for every rankable record, in group order then rank order.

    ``group_count`` counts only groups with at least one ranked record, so an
    outcome with no results always has ``group_count == 0``.
    """

    results: list[RankResult] = field(default_factory=list)
    group_count: int = 0
    groups: list[GroupSummary] = field(default_factory=list)
    excluded_count: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.results

    def rank_by_id(self) -> dict[str, int]:
        """Map record id to rank. Later duplicates of an id win."""
        return {result.record_id: result.rank for result in self.results}
