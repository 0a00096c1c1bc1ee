"""
Configuration helpers for table storage and run sizing.
"""

from __future__ import annotations

import os
from pathlib import Path


DEFAULT_DB_PATH = "~/.field_ranker/tables.duckdb"
ENV_DB_PATH = "FIELD_RANKER_DB_PATH"

DEFAULT_PAGE_SIZE = 1000
ENV_PAGE_SIZE = "FIELD_RANKER_PAGE_SIZE"

DEFAULT_BATCH_SIZE = 100
ENV_BATCH_SIZE = "FIELD_RANKER_BATCH_SIZE"


def resolve_db_path(override_path: str | None = None) -> str:
    """
    Resolve the DuckDB path from CLI override, env var, or default.

    Precedence:
    1) explicit override_path
    2) FIELD_RANKER_DB_PATH
    3) default path
    """
    raw_path = override_path or os.getenv(ENV_DB_PATH) or DEFAULT_DB_PATH
    if raw_path == ":memory:":
        return raw_path
    resolved = Path(raw_path).expanduser().resolve()
    resolved.parent.mkdir(parents=True, exist_ok=True)
    return str(resolved)


def resolve_page_size(override: int | None = None) -> int:
    """Records fetched per page, same precedence as :func:`resolve_db_path`."""
    return _resolve_size(override, ENV_PAGE_SIZE, DEFAULT_PAGE_SIZE)


def resolve_batch_size(override: int | None = None) -> int:
    """Records written per update batch, same precedence as :func:`resolve_db_path`."""
    return _resolve_size(override, ENV_BATCH_SIZE, DEFAULT_BATCH_SIZE)


def _resolve_size(override: int | None, env_name: str, default: int) -> int:
    if override is not None:
        value = override
    else:
        raw = os.getenv(env_name)
        if raw is None or not raw.strip():
            return default
        try:
            value = int(raw)
        except ValueError as exc:
            raise ValueError(f"{env_name} must be an integer, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{env_name} must be positive, got {value}")
    return value
