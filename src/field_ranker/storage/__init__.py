"""Storage backends for field-ranker tables."""

from .base import FieldInfo, TableStore
from .duckdb import DuckDBTableStore

__all__ = [
    "FieldInfo",
    "TableStore",
    "DuckDBTableStore",
]
