"""DuckDB-backed document collections.

Each collection is a table of ``(id, doc)`` rows where ``id`` is the
application-assigned string identifier and ``doc`` the JSON-encoded entity.
Nested structures (roster slots, league schedules) stay embedded in the
document.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Iterable, Optional

import duckdb

logger = logging.getLogger(__name__)

PLAYERS = "players"
FANTASY_TEAMS = "fantasy_teams"
LEAGUES = "leagues"
USERS = "users"
TRADES = "trades"

COLLECTIONS = (PLAYERS, FANTASY_TEAMS, LEAGUES, USERS, TRADES)


class DocumentStore:
    """Data access layer - one DuckDB table per collection."""

    def __init__(self, database_path: str | Path = ":memory:"):
        """Open (or create) the database and ensure every collection exists.

        Args:
            database_path: Path to the .duckdb file, or ":memory:" for an
                ephemeral store (tests)
        """
        self._db_path = str(database_path)
        if self._db_path != ":memory:":
            Path(self._db_path).parent.mkdir(parents=True, exist_ok=True)

        # A single connection guarded by a lock; DuckDB allows one writer per file
        self._conn = duckdb.connect(self._db_path)
        self._lock = threading.Lock()

        with self._lock:
            for collection in COLLECTIONS:
                self._conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {collection} (id VARCHAR PRIMARY KEY, doc VARCHAR NOT NULL)"
                )
        logger.info(f"DocumentStore: Using {self._db_path} ({len(COLLECTIONS)} collections)")

    @staticmethod
    def _check_collection(collection: str) -> None:
        if collection not in COLLECTIONS:
            raise ValueError(f"Unknown collection: {collection}")

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        """Fetch one document by id, or None."""
        self._check_collection(collection)
        with self._lock:
            row = self._conn.execute(
                f"SELECT doc FROM {collection} WHERE id = ?", [doc_id]
            ).fetchone()
        return json.loads(row[0]) if row else None

    def find_all(self, collection: str) -> list[dict]:
        """All documents in a collection, ordered by id."""
        self._check_collection(collection)
        with self._lock:
            rows = self._conn.execute(f"SELECT doc FROM {collection} ORDER BY id").fetchall()
        return [json.loads(row[0]) for row in rows]

    def count(self, collection: str) -> int:
        self._check_collection(collection)
        with self._lock:
            return self._conn.execute(f"SELECT COUNT(*) FROM {collection}").fetchone()[0]

    def save(self, collection: str, doc: dict) -> None:
        """Insert or replace a document keyed by ``doc["id"]``."""
        self._check_collection(collection)
        with self._lock:
            self._conn.execute(
                f"INSERT OR REPLACE INTO {collection} (id, doc) VALUES (?, ?)",
                [doc["id"], json.dumps(doc)],
            )

    def save_many(self, collection: str, docs: Iterable[dict]) -> int:
        self._check_collection(collection)
        rows = [[doc["id"], json.dumps(doc)] for doc in docs]
        if not rows:
            return 0
        with self._lock:
            self._conn.executemany(
                f"INSERT OR REPLACE INTO {collection} (id, doc) VALUES (?, ?)", rows
            )
        return len(rows)

    def delete(self, collection: str, doc_id: str) -> bool:
        self._check_collection(collection)
        with self._lock:
            existed = self._conn.execute(
                f"SELECT COUNT(*) FROM {collection} WHERE id = ?", [doc_id]
            ).fetchone()[0]
            if existed:
                self._conn.execute(f"DELETE FROM {collection} WHERE id = ?", [doc_id])
        return bool(existed)

    def close(self) -> None:
        with self._lock:
            self._conn.close()
