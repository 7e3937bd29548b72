"""SQLite storage adapter.

Implements the core StoragePort using a simple SQLite database.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from typing import Iterable, Iterator, Optional

from core.errors import StorageError
from core.models import PatternRecord, StoredPattern


class SQLiteStorage:
    """Thin SQLite wrapper that satisfies the StoragePort contract.

    The connection is opened on first use and held until disconnect(), so a
    sync cycle works on one connection and releases it when it ends.
    """

    def __init__(self, db_path: str, timeout: float = 5.0) -> None:
        self._db_path = db_path
        self._timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None
        self._in_transaction = False

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            try:
                conn = sqlite3.connect(self._db_path, timeout=self._timeout)
            except sqlite3.Error as exc:
                raise StorageError(f"Cannot open {self._db_path}: {exc}") from exc
            conn.row_factory = sqlite3.Row
            self._conn = conn
        return self._conn

    def _execute(self, sql: str, params: tuple = ()) -> sqlite3.Cursor:
        conn = self._connection()
        try:
            cur = conn.execute(sql, params)
            if not self._in_transaction:
                conn.commit()
            return cur
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc

    def init_db(self) -> None:
        """Create the pii_patterns table if it does not exist."""

        # pii_patterns mirrors the remote file; rows have no life of their own.
        # Fields:
        # - id: auto-increment primary key used for batch deletes
        # - name: pattern identity, unique across the table
        # - regex_pattern: detection expression
        # - sensitive / on_key: flags stored as 0/1
        self._execute(
            """
            CREATE TABLE IF NOT EXISTS pii_patterns (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                regex_pattern TEXT NOT NULL,
                sensitive INTEGER NOT NULL,
                on_key INTEGER NOT NULL
            )
            """
        )

    @staticmethod
    def _row_to_pattern(row: sqlite3.Row) -> StoredPattern:
        return StoredPattern(
            id=int(row["id"]),
            name=row["name"],
            regex_pattern=row["regex_pattern"],
            sensitive=bool(row["sensitive"]),
            on_key=bool(row["on_key"]),
        )

    def find_many(self) -> list[StoredPattern]:
        """Return every stored pattern ordered by id."""

        rows = self._execute(
            "SELECT id, name, regex_pattern, sensitive, on_key FROM pii_patterns ORDER BY id"
        ).fetchall()
        return [self._row_to_pattern(row) for row in rows]

    def delete_many(self, ids: Iterable[int]) -> int:
        """Delete rows by id and return the number removed."""

        id_list = list(ids)
        if not id_list:
            return 0
        placeholders = ", ".join("?" for _ in id_list)
        cur = self._execute(
            f"DELETE FROM pii_patterns WHERE id IN ({placeholders})",
            tuple(id_list),
        )
        return cur.rowcount

    def update_many(self, name: str, record: PatternRecord) -> int:
        """Replace the payload of rows matching `name`; return rows touched."""

        cur = self._execute(
            """
            UPDATE pii_patterns
            SET name = ?, regex_pattern = ?, sensitive = ?, on_key = ?
            WHERE name = ?
            """,
            (
                record.name,
                record.regex_pattern,
                int(record.sensitive),
                int(record.on_key),
                name,
            ),
        )
        return cur.rowcount

    def create(self, record: PatternRecord) -> StoredPattern:
        """Insert a new pattern row and return it with its id."""

        cur = self._execute(
            """
            INSERT INTO pii_patterns (name, regex_pattern, sensitive, on_key)
            VALUES (?, ?, ?, ?)
            """,
            (record.name, record.regex_pattern, int(record.sensitive), int(record.on_key)),
        )
        return StoredPattern(
            id=int(cur.lastrowid),
            name=record.name,
            regex_pattern=record.regex_pattern,
            sensitive=record.sensitive,
            on_key=record.on_key,
        )

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Group writes; commit on success, roll back if the block raises."""

        conn = self._connection()
        self._in_transaction = True
        try:
            yield
        except BaseException:
            try:
                conn.rollback()
            except sqlite3.Error as exc:
                raise StorageError(f"Rollback failed: {exc}") from exc
            raise
        else:
            try:
                conn.commit()
            except sqlite3.Error as exc:
                raise StorageError(str(exc)) from exc
        finally:
            self._in_transaction = False

    def disconnect(self) -> None:
        """Close the open connection, if any. Safe to call repeatedly."""

        if self._conn is None:
            return
        conn, self._conn = self._conn, None
        try:
            conn.close()
        except sqlite3.Error as exc:
            raise StorageError(str(exc)) from exc
