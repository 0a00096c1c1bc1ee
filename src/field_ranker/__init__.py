"""
field-ranker - grouped numeric ranking for table records.

This package ranks the records of a table by a numeric field, optionally
within groups, using standard (1,2,2,4) or dense (1,2,2,3) tie handling, and
writes each record's rank back into a target field.

Example usage:
    >>> from field_ranker import InputRecord, RankingConfig, calculate_grouped_ranking
    >>> records = [InputRecord("a", 10), InputRecord("b", 10), InputRecord("c", 5)]
    >>> outcome = calculate_grouped_ranking(records, RankingConfig(ranking_method="dense"))
    >>> [(r.record_id, r.rank) for r in outcome.results]
    [('a', 1), ('b', 1), ('c', 2)]
"""

from .errors import ConfigurationMissingError
from .executor import ExecutionReport, RankingExecutor
from .models import RankingConfig, RankingJob
from .ranking import (
    NO_VALUE,
    GroupSummary,
    InputRecord,
    RankingEngine,
    RankingOutcome,
    RankResult,
    calculate_grouped_ranking,
    normalize,
)

__all__ = [
    # Engine
    "RankingEngine",
    "calculate_grouped_ranking",
    "normalize",
    "NO_VALUE",
    # Records
    "InputRecord",
    "RankResult",
    "GroupSummary",
    "RankingOutcome",
    # Configuration
    "RankingConfig",
    "RankingJob",
    # Orchestration
    "RankingExecutor",
    "ExecutionReport",
    "ConfigurationMissingError",
]
