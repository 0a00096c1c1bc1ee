"""
Tie-aware rank assignment within a single group.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from ..models import RankingConfig
from .records import InputRecord, RankResult
from .values import NO_VALUE, has_value, normalize


@dataclass(frozen=True)
class _Candidate:
    record_id: str
    value: Any


@dataclass(frozen=True)
class GroupRanking:
    """Ranks for one group plus how many of its members were left out."""

    results: list[RankResult]
    excluded: int


def rank_group(members: Iterable[InputRecord], config: RankingConfig) -> GroupRanking:
    """
    Rank one group's members by their normalized source value.

    Members without a usable number, and zeros when ``skipZero`` is set, are
    dropped before sorting and never take a rank slot. Equal values keep
    their input order.
    """
    candidates: list[_Candidate] = []
    excluded = 0
    for member in members:
        value = normalize(member.source_value)
        if not has_value(value) or (config.skip_zero and value == 0):
            excluded += 1
            continue
        candidates.append(_Candidate(record_id=member.record_id, value=value))

    # sorted() stays stable with reverse=True.
    ordered = sorted(candidates, key=lambda c: c.value, reverse=config.descending)
    return GroupRanking(
        results=_assign_ranks(ordered, method=config.ranking_method),
        excluded=excluded,
    )


def _assign_ranks(ordered: list[_Candidate], *, method: str) -> list[RankResult]:
    """Walk sorted candidates handing out standard (1,2,2,4) or dense (1,2,2,3) ranks."""
    results: list[RankResult] = []
    current_rank = 0
    previous_value: Any = NO_VALUE

    for position, candidate in enumerate(ordered, start=1):
        if position == 1 or candidate.value != previous_value:
            if method == "dense":
                current_rank += 1
            else:
                current_rank = position
            previous_value = candidate.value
        results.append(RankResult(record_id=candidate.record_id, rank=current_rank))

    return results
