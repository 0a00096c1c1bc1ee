"""
Grouped ranking: partition, rank each group, assemble the outcome.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from ..models import RankingConfig
from .assign import rank_group
from .grouping import partition
from .records import GroupSummary, InputRecord, RankingOutcome, RankResult

logger = logging.getLogger(__name__)


def calculate_grouped_ranking(
    records: Iterable[InputRecord], config: RankingConfig
) -> RankingOutcome:
    """
    Rank records within their groups.

    Results are concatenated in group order (first appearance of each group
    key) and, inside a group, in rank order. Ranking never crosses group
    boundaries. No usable data yields an empty outcome rather than an error.
    """
    results: list[RankResult] = []
    summaries: list[GroupSummary] = []
    excluded_count = 0

    for group in partition(records, config.grouping_enabled):
        ranking = rank_group(group.members, config)
        excluded_count += ranking.excluded
        if not ranking.results:
            continue
        results.extend(ranking.results)
        summaries.append(
            GroupSummary(
                key=group.key,
                ranked=len(ranking.results),
                excluded=ranking.excluded,
            )
        )

    logger.debug(
        "Ranked %d records in %d groups (%d excluded)",
        len(results),
        len(summaries),
        excluded_count,
    )
    return RankingOutcome(
        results=results,
        group_count=len(summaries),
        groups=summaries,
        excluded_count=excluded_count,
    )


class RankingEngine:
    """Ranks record sets with a fixed configuration."""

    def __init__(self, config: RankingConfig | None = None) -> None:
        self.config = config or RankingConfig()

    def rank(self, records: Iterable[InputRecord]) -> RankingOutcome:
        return calculate_grouped_ranking(records, self.config)
