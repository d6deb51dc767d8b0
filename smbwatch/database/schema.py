"""Database schema definition."""

import sqlite3

SCHEMA_SQL = """
-- File inventory, one row per file observed on a share
CREATE TABLE IF NOT EXISTS files (
    id INTEGER PRIMARY KEY,
    server TEXT NOT NULL,
    sharename TEXT NOT NULL,
    name TEXT NOT NULL,
    path TEXT NOT NULL,
    extension TEXT NOT NULL,
    size INTEGER NOT NULL,
    modified_at_unix REAL,
    modified_at INTEGER,
    mode INTEGER,
    scanned_at_unix REAL NOT NULL,
    scanned_at INTEGER NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_files_extension ON files(extension);
CREATE INDEX IF NOT EXISTS idx_files_name ON files(name);
CREATE INDEX IF NOT EXISTS idx_files_share ON files(server, sharename);

-- Share scan state (for resumability)
CREATE TABLE IF NOT EXISTS shares (
    server TEXT NOT NULL,
    sharename TEXT NOT NULL,
    state TEXT NOT NULL,
    created_at_unix REAL NOT NULL,
    created_at INTEGER NOT NULL,
    updated_at_unix REAL,
    updated_at INTEGER,
    PRIMARY KEY (server, sharename)
);

CREATE INDEX IF NOT EXISTS idx_shares_state ON shares(state);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create tables and indexes if they don't exist."""
    conn.executescript(SCHEMA_SQL)
    conn.commit()
