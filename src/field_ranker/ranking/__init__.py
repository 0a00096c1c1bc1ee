"""Ranking engine: value normalization, grouping and tie-aware rank assignment."""

from .assign import GroupRanking, rank_group
from .engine import RankingEngine, calculate_grouped_ranking
from .grouping import UNGROUPED, RecordGroup, partition
from .records import GroupSummary, InputRecord, RankingOutcome, RankResult
from .values import NO_VALUE, normalize

__all__ = [
    "GroupRanking",
    "rank_group",
    "RankingEngine",
    "calculate_grouped_ranking",
    "UNGROUPED",
    "RecordGroup",
    "partition",
    "GroupSummary",
    "InputRecord",
    "RankingOutcome",
    "RankResult",
    "NO_VALUE",
    "normalize",
]
