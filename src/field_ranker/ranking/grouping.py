"""
Partitioning of records into independently ranked groups.
"""

from __future__ import annotations

from collections.abc import Hashable, Iterable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .records import InputRecord


class _Ungrouped(Enum):
    UNGROUPED = "ungrouped"

    def __repr__(self) -> str:
        return "UNGROUPED"

    __str__ = __repr__


# Key of the implicit bucket. Never equal to a real group value, including
# falsy ones like "" or 0.
UNGROUPED = _Ungrouped.UNGROUPED


@dataclass
class RecordGroup:
    """Records sharing one group key, in input order."""

    key: Any
    members: list[InputRecord] = field(default_factory=list)


def group_key(record: InputRecord, grouping_enabled: bool) -> Any:
    if not grouping_enabled or record.group_value is None:
        return UNGROUPED
    return record.group_value


def partition(
    records: Iterable[InputRecord], grouping_enabled: bool
) -> list[RecordGroup]:
    """
    Split records into groups ordered by first appearance of each key.

    Keys compare by equality of the raw group value. Unhashable values
    (multi-value cells) are matched by a linear scan.
    """
    groups: list[RecordGroup] = []
    by_key: dict[Any, RecordGroup] = {}

    for record in records:
        key = group_key(record, grouping_enabled)
        group = _find_group(key, groups, by_key)
        if group is None:
            group = RecordGroup(key=key)
            groups.append(group)
            if _is_hashable(key):
                by_key[key] = group
        group.members.append(record)

    return groups


def _find_group(
    key: Any, groups: list[RecordGroup], by_key: dict[Any, RecordGroup]
) -> RecordGroup | None:
    if _is_hashable(key):
        return by_key.get(key)
    for group in groups:
        if not _is_hashable(group.key) and group.key == key:
            return group
    return None


def _is_hashable(value: Any) -> bool:
    if not isinstance(value, Hashable):
        return False
    try:
        hash(value)
    except TypeError:
        # tuples holding lists
        return False
    return True
