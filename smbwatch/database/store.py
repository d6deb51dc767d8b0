"""Store operations for files and share state."""

import time
from collections.abc import Iterable

from .connection import Database
from .models import FileRecord, ShareRecord, ShareState

INSERT_FILE_SQL = """
    INSERT INTO files (
        server, sharename, name, path, extension, size,
        modified_at_unix, modified_at, mode,
        scanned_at_unix, scanned_at
    ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
"""


class CrawlStore:
    """Reads and writes crawl results.

    Each method holds the database lock for its statement and commit, so
    callers on different threads never interleave inside a transaction.
    """

    def __init__(self, db: Database):
        self.db = db

    def insert_file(self, record: FileRecord) -> None:
        self.insert_files([record])

    def insert_files(self, records: Iterable[FileRecord]) -> None:
        now = time.time()
        rows = [_file_row(record, now) for record in records]
        if not rows:
            return

        with self.db.lock:
            conn = self.db.conn
            try:
                conn.executemany(INSERT_FILE_SQL, rows)
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def insert_share_started(self, server: str, share: str) -> None:
        """Insert a started row, raises sqlite3.IntegrityError if one exists."""
        now = time.time()
        with self.db.lock:
            conn = self.db.conn
            try:
                conn.execute(
                    """
                    INSERT INTO shares
                    (server, sharename, state, created_at_unix, created_at)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (server, share, ShareState.STARTED.value, now, int(now)),
                )
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def update_share_state(self, server: str, share: str, state: ShareState) -> None:
        now = time.time()
        with self.db.lock:
            conn = self.db.conn
            try:
                conn.execute(
                    """
                    UPDATE shares
                    SET state = ?, updated_at_unix = ?, updated_at = ?
                    WHERE server = ? AND sharename = ?
                    """,
                    (state.value, now, int(now), server, share),
                )
                conn.commit()
            except Exception:
                conn.rollback()
                raise

    def share_exists(self, server: str, share: str) -> bool:
        with self.db.lock:
            row = self.db.conn.execute(
                "SELECT 1 FROM shares WHERE server = ? AND sharename = ?",
                (server, share),
            ).fetchone()
        return row is not None

    def get_share(self, server: str, share: str) -> ShareRecord | None:
        with self.db.lock:
            row = self.db.conn.execute(
                """
                SELECT server, sharename, state, created_at, updated_at
                FROM shares WHERE server = ? AND sharename = ?
                """,
                (server, share),
            ).fetchone()
        return _share_record(row) if row else None

    def list_shares(self, state: ShareState | None = None) -> list[ShareRecord]:
        query = "SELECT server, sharename, state, created_at, updated_at FROM shares"
        params: tuple = ()
        if state is not None:
            query += " WHERE state = ?"
            params = (state.value,)
        query += " ORDER BY server, sharename"

        with self.db.lock:
            rows = self.db.conn.execute(query, params).fetchall()
        return [_share_record(row) for row in rows]

    def share_state_counts(self) -> dict[ShareState, int]:
        with self.db.lock:
            rows = self.db.conn.execute(
                "SELECT state, COUNT(*) AS count FROM shares GROUP BY state"
            ).fetchall()
        counts = {state: 0 for state in ShareState}
        for row in rows:
            counts[ShareState(row["state"])] = row["count"]
        return counts

    def delete_shares(self, state: ShareState) -> int:
        """Delete share rows in the given state so the next run retries them."""
        with self.db.lock:
            conn = self.db.conn
            cursor = conn.execute("DELETE FROM shares WHERE state = ?", (state.value,))
            conn.commit()
        return cursor.rowcount

    def count_files(self, server: str | None = None) -> int:
        query = "SELECT COUNT(*) FROM files"
        params: tuple = ()
        if server is not None:
            query += " WHERE server = ?"
            params = (server,)

        with self.db.lock:
            return self.db.conn.execute(query, params).fetchone()[0]

    def list_files(self, server: str | None = None) -> list[FileRecord]:
        query = """
            SELECT server, sharename, name, path, extension, size,
                   modified_at_unix, mode
            FROM files
        """
        params: tuple = ()
        if server is not None:
            query += " WHERE server = ?"
            params = (server,)
        query += " ORDER BY id"

        with self.db.lock:
            rows = self.db.conn.execute(query, params).fetchall()
        return [
            FileRecord(
                server=row["server"],
                share=row["sharename"],
                name=row["name"],
                folder=row["path"],
                extension=row["extension"],
                size=row["size"],
                modified_at=row["modified_at_unix"],
                mode=row["mode"],
            )
            for row in rows
        ]


def _file_row(record: FileRecord, now: float) -> tuple:
    modified_at = int(record.modified_at) if record.modified_at is not None else None
    return (
        record.server,
        record.share,
        record.name,
        record.folder,
        record.extension,
        record.size,
        record.modified_at,
        modified_at,
        record.mode,
        now,
        int(now),
    )


def _share_record(row) -> ShareRecord:
    return ShareRecord(
        server=row["server"],
        share=row["sharename"],
        state=ShareState(row["state"]),
        created_at=row["created_at"],
        updated_at=row["updated_at"],
    )
