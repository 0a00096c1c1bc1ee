"""
Ranking run orchestration.

Resolves the job's fields against the table, pages through every record,
ranks them in a single engine call and writes the ranks back in batches.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Literal

from .config import resolve_batch_size, resolve_page_size
from .errors import ConfigurationMissingError
from .models import RankingJob
from .ranking import InputRecord, RankingOutcome, RankResult, calculate_grouped_ranking
from .storage import FieldInfo, TableStore

logger = logging.getLogger(__name__)

ExecutionStatus = Literal["complete", "partial", "no_valid_data"]


@dataclass(frozen=True)
class ExecutionReport:
    """Summary output for a ranking run."""

    status: ExecutionStatus
    fetched: int
    succeeded: int = 0
    failed: int = 0
    group_count: int = 0
    grouped: bool = False
    dry_run: bool = False

    def summary(self) -> str:
        if self.status == "no_valid_data":
            return f"No valid data to rank among {self.fetched} records"
        verb = "Would rank" if self.dry_run else "Ranked"
        if self.grouped:
            message = (
                f"{verb} {self.succeeded} records across {self.group_count} groups"
            )
        else:
            message = f"{verb} {self.succeeded} records"
        if self.failed:
            message += f", {self.failed} records failed"
        return message


@dataclass(frozen=True)
class ResolvedFields:
    source: FieldInfo
    target: FieldInfo
    group: FieldInfo | None = None


class RankingExecutor:
    """Run ranking jobs against a table store."""

    def __init__(
        self,
        store: TableStore,
        *,
        page_size: int | None = None,
        batch_size: int | None = None,
    ) -> None:
        self.store = store
        self.page_size = resolve_page_size(page_size)
        self.batch_size = resolve_batch_size(batch_size)

    def execute(self, job: RankingJob, *, dry_run: bool = False) -> ExecutionReport:
        resolved = self.resolve_fields(job)
        grouped = resolved.group is not None
        logger.info(
            "Ranking %s.%s into %s (%s, %s, %s)",
            job.table,
            job.source_field,
            job.target_field,
            job.sort_direction,
            job.ranking_method,
            job.zero_value_handling,
        )

        rows = self.fetch_all(job)
        if not rows:
            logger.warning("Table %s has no records to rank", job.table)
            return ExecutionReport(status="no_valid_data", fetched=0, grouped=grouped)

        records = [self._to_input_record(row, job) for row in rows]
        outcome = calculate_grouped_ranking(records, job.to_ranking_config())
        if outcome.is_empty:
            logger.warning(
                "No valid %s values among %d records", job.source_field, len(rows)
            )
            return ExecutionReport(
                status="no_valid_data", fetched=len(rows), grouped=grouped
            )

        if dry_run:
            return ExecutionReport(
                status="complete",
                fetched=len(rows),
                succeeded=len(outcome.results),
                group_count=outcome.group_count,
                grouped=grouped,
                dry_run=True,
            )

        succeeded, failed = self.write_ranks(job, outcome)
        report = ExecutionReport(
            status="complete" if failed == 0 else "partial",
            fetched=len(rows),
            succeeded=succeeded,
            failed=failed,
            group_count=outcome.group_count,
            grouped=grouped,
        )
        logger.info("%s", report.summary())
        return report

    def preview(self, job: RankingJob) -> RankingOutcome:
        """Rank without writing anything back."""
        self.resolve_fields(job)
        records = [self._to_input_record(row, job) for row in self.fetch_all(job)]
        return calculate_grouped_ranking(records, job.to_ranking_config())

    def resolve_fields(self, job: RankingJob) -> ResolvedFields:
        fields = {field.name: field for field in self.store.list_fields(job.table)}

        source = fields.get(job.source_field)
        if source is None:
            raise ConfigurationMissingError(
                f"Source field {job.source_field!r} not found in {job.table!r}"
            )
        if not source.can_be_source:
            raise ConfigurationMissingError(
                f"Source field {job.source_field!r} is not numeric ({source.data_type})"
            )

        target = fields.get(job.target_field)
        if target is None:
            raise ConfigurationMissingError(
                f"Target field {job.target_field!r} not found in {job.table!r}"
            )
        if target.name == source.name:
            raise ConfigurationMissingError(
                "Target field must differ from the source field"
            )
        if not target.can_be_target:
            raise ConfigurationMissingError(
                f"Target field {job.target_field!r} must be a writable, "
                f"single-value numeric field ({target.data_type})"
            )

        group = None
        if job.group_field is not None:
            group = fields.get(job.group_field)
            if group is None:
                raise ConfigurationMissingError(
                    f"Group field {job.group_field!r} not found in {job.table!r}"
                )

        return ResolvedFields(source=source, target=target, group=group)

    def fetch_all(self, job: RankingJob) -> list[dict[str, Any]]:
        """Read every record, one page at a time, until a short page."""
        projection = [job.source_field]
        if job.group_field is not None:
            projection.append(job.group_field)

        rows: list[dict[str, Any]] = []
        offset = 0
        while True:
            page = self.store.fetch_page(
                job.table,
                fields=projection,
                order_by=job.source_field,
                offset=offset,
                limit=self.page_size,
                view=job.view,
            )
            rows.extend(page)
            if len(page) < self.page_size:
                break
            offset += self.page_size

        logger.info("Fetched %d records from %s", len(rows), job.view or job.table)
        return rows

    def write_ranks(self, job: RankingJob, outcome: RankingOutcome) -> tuple[int, int]:
        """Write ranks in batches. Return ``(succeeded, failed)`` record counts."""
        succeeded = 0
        failed = 0
        for batch in _batches(outcome.results, self.batch_size):
            try:
                self.store.update_records(
                    job.table, target_field=job.target_field, updates=batch
                )
            except Exception:
                logger.warning(
                    "Failed to update a batch of %d records", len(batch), exc_info=True
                )
                failed += len(batch)
            else:
                succeeded += len(batch)
        return succeeded, failed

    @staticmethod
    def _to_input_record(row: dict[str, Any], job: RankingJob) -> InputRecord:
        return InputRecord(
            record_id=str(row["id"]),
            source_value=row.get(job.source_field),
            group_value=row.get(job.group_field) if job.group_field else None,
        )


def _batches(results: list[RankResult], size: int) -> list[list[RankResult]]:
    return [results[i : i + size] for i in range(0, len(results), size)]
