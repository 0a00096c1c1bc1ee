"""
DuckDB storage backend for ranked tables.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any

import duckdb

from ..errors import ConfigurationMissingError
from ..ranking import RankResult
from .base import FieldInfo

logger = logging.getLogger(__name__)

_NUMERIC_TYPES: frozenset[str] = frozenset(
    {
        "TINYINT",
        "SMALLINT",
        "INTEGER",
        "BIGINT",
        "HUGEINT",
        "UTINYINT",
        "USMALLINT",
        "UINTEGER",
        "UBIGINT",
        "UHUGEINT",
        "FLOAT",
        "DOUBLE",
    }
)
_LIST_SUFFIX_RE = re.compile(r"\[\d*\]$")


def _quote(identifier: str) -> str:
    return '"' + identifier.replace('"', '""') + '"'


def parse_column_type(data_type: str) -> tuple[bool, bool]:
    """Return ``(is_numeric, is_multiple)`` for a DuckDB type name."""
    base = data_type.strip().upper()
    is_multiple = False
    while _LIST_SUFFIX_RE.search(base):
        base = _LIST_SUFFIX_RE.sub("", base)
        is_multiple = True
    is_numeric = base in _NUMERIC_TYPES or base.startswith("DECIMAL")
    return is_numeric, is_multiple


class DuckDBTableStore:
    """DuckDB-backed table store: field listing, paged reads, batched rank writes."""

    def __init__(
        self,
        db_path: str,
        *,
        id_field: str = "id",
        read_only: bool = False,
    ) -> None:
        if db_path == ":memory:":
            self.db_path = db_path
        else:
            self.db_path = str(Path(db_path).expanduser().resolve())
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        self.id_field = id_field
        self.read_only = read_only
        try:
            self._conn = duckdb.connect(self.db_path, read_only=read_only)
        except duckdb.Error as exc:
            raise ConfigurationMissingError(
                f"Cannot open database {self.db_path!r}: {exc}"
            ) from exc

    def close(self) -> None:
        """Close the underlying DuckDB connection."""
        self._conn.close()

    def __enter__(self) -> DuckDBTableStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def list_fields(self, table: str) -> list[FieldInfo]:
        table_type = self._table_type(table)
        rows = self._conn.execute(
            """
            SELECT column_name, data_type
            FROM information_schema.columns
            WHERE table_name = ?
            ORDER BY ordinal_position
            """,
            [table],
        ).fetchall()

        fields: list[FieldInfo] = []
        for column_name, data_type in rows:
            if column_name == self.id_field:
                continue
            is_numeric, is_multiple = parse_column_type(str(data_type))
            fields.append(
                FieldInfo(
                    name=str(column_name),
                    data_type=str(data_type),
                    is_numeric=is_numeric,
                    is_multiple=is_multiple,
                    # Views are read-only in DuckDB.
                    is_computed=table_type == "VIEW",
                )
            )
        return fields

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
        relation = view or table
        self._table_type(relation)

        projection = [self.id_field]
        for name in fields:
            if name not in projection:
                projection.append(name)
        select_list = ", ".join(_quote(name) for name in projection)

        try:
            cursor = self._conn.execute(
                f"""
                SELECT {select_list}
                FROM {_quote(relation)}
                ORDER BY {_quote(order_by)} DESC NULLS LAST, {_quote(self.id_field)}
                LIMIT ? OFFSET ?
                """,
                [limit, offset],
            )
        except (duckdb.BinderException, duckdb.CatalogException) as exc:
            # A view may not expose every field of its base table.
            wanted = ", ".join(projection)
            raise ConfigurationMissingError(
                f"Cannot read {wanted} from {relation!r}: {exc}"
            ) from exc
        columns = [column[0] for column in cursor.description]
        rows = cursor.fetchall()
        logger.debug("Fetched %d rows from %s at offset %d", len(rows), relation, offset)

        page: list[dict[str, Any]] = []
        for row in rows:
            record = dict(zip(columns, row))
            record["id"] = str(record.pop(self.id_field))
            page.append(record)
        return page

    def update_records(
        self,
        table: str,
        *,
        target_field: str,
        updates: list[RankResult],
    ) -> int:
        if not updates:
            return 0

        self._conn.begin()
        try:
            self._conn.executemany(
                f"""
                UPDATE {_quote(table)}
                SET {_quote(target_field)} = ?
                WHERE CAST({_quote(self.id_field)} AS VARCHAR) = ?
                """,
                [(update.rank, update.record_id) for update in updates],
            )
        except duckdb.Error:
            self._conn.rollback()
            raise
        self._conn.commit()
        return len(updates)

    def _table_type(self, name: str) -> str:
        row = self._conn.execute(
            "SELECT table_type FROM information_schema.tables WHERE table_name = ?",
            [name],
        ).fetchone()
        if row is None:
            raise ConfigurationMissingError(f"No such table or view: {name!r}")
        return str(row[0])
