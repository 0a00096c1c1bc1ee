"""
Storage interfaces and data models for ranked tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol

from ..ranking import RankResult


@dataclass(frozen=True)
class FieldInfo:
    """A field (column) of a table and what it can be used for."""

    name: str
    data_type: str
    is_numeric: bool
    is_multiple: bool = False
    is_computed: bool = False

    @property
    def can_be_source(self) -> bool:
        # Multi-value numeric cells rank by their first value.
        return self.is_numeric

    @property
    def can_be_target(self) -> bool:
        return self.is_numeric and not self.is_multiple and not self.is_computed


class TableStore(Protocol):
    """Protocol for the reads and writes a ranking run needs."""

    def list_fields(self, table: str) -> list[FieldInfo]:
        """Describe the fields of a table or view."""

    def fetch_page(
        self,
        table: str,
        *,
        fields: list[str],
        order_by: str,
        offset: int,
        limit: int,
        view: str | None = None,
    ) -> list[dict[str, Any]]:
        """Return one page of rows with an ``id`` key plus the projected fields."""

    def update_records(
        self,
        table: str,
        *,
        target_field: str,
        updates: list[RankResult],
    ) -> int:
        """Write ranks into the target field. Return count written."""
