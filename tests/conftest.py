from pathlib import Path

import duckdb
import pytest


@pytest.fixture()
def scores_db(tmp_path: Path) -> str:
    """Create a small scores table (plus a view) and return the db path."""
    db_path = str(tmp_path / "scores.duckdb")
    conn = duckdb.connect(db_path)
    conn.execute(
        """
        CREATE TABLE scores (
            id VARCHAR,
            points DOUBLE,
            bonus DOUBLE[],
            league VARCHAR,
            place INTEGER,
            label VARCHAR
        );
        """
    )
    conn.executemany(
        "INSERT INTO scores (id, points, bonus, league, label) VALUES (?, ?, ?, ?, ?)",
        [
            ("rec1", 10.0, [1.0, 9.0], "north", "first"),
            ("rec2", 30.0, [7.0], "south", "second"),
            ("rec3", 10.0, None, "north", "third"),
            ("rec4", 0.0, None, "south", "fourth"),
            ("rec5", None, [2.0], "north", "fifth"),
            ("rec6", 25.0, [3.0], None, "sixth"),
        ],
    )
    conn.execute("CREATE VIEW north_scores AS SELECT * FROM scores WHERE league = 'north'")
    conn.close()
    return db_path


@pytest.fixture()
def read_column():
    """Return a reader for one column of the scores table, keyed by id."""

    def _read(db_path: str, column: str) -> dict[str, object]:
        conn = duckdb.connect(db_path, read_only=True)
        try:
            rows = conn.execute(
                f'SELECT id, "{column}" FROM scores ORDER BY id'
            ).fetchall()
        finally:
            conn.close()
        return {str(row[0]): row[1] for row in rows}

    return _read
