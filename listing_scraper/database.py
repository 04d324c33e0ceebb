"""
Database operations for the Change Guard's persisted state.
"""
import os
import sqlite3
from typing import Dict, Optional


# Schema definitions
DDL_LAST_SEEN = """
CREATE TABLE IF NOT EXISTS last_seen (
  slot INTEGER PRIMARY KEY CHECK (slot = 1),
  ad_id TEXT,
  observed_at TEXT NOT NULL
);
"""


def db_connect(path: str) -> sqlite3.Connection:
    """Create database connection with optimized settings."""
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    conn = sqlite3.connect(path, check_same_thread=False)
    conn.execute("PRAGMA journal_mode=WAL;")
    conn.execute("PRAGMA synchronous=NORMAL;")
    return conn


def db_init(conn: sqlite3.Connection):
    """Initialize database schema."""
    conn.execute(DDL_LAST_SEEN)
    conn.commit()


def row_to_dict(cur, row):
    """Convert a result row to a dictionary."""
    return {desc[0]: row[i] for i, desc in enumerate(cur.description)}


def db_get_last_seen(conn: sqlite3.Connection) -> Optional[Dict]:
    """Return {ad_id, observed_at} or None before the first scan."""
    cur = conn.cursor()
    cur.execute("SELECT ad_id, observed_at FROM last_seen WHERE slot = 1")
    r = cur.fetchone()
    if not r:
        return None
    return row_to_dict(cur, r)


def db_set_last_seen(conn: sqlite3.Connection, ad_id: Optional[str], observed_at: str):
    """Replace the single state row in one statement."""
    conn.execute(
        "INSERT OR REPLACE INTO last_seen (slot, ad_id, observed_at) VALUES (1, ?, ?)",
        (ad_id, observed_at),
    )
    conn.commit()
