# -*- coding: utf-8 -*-
"""
Processing ledger.

One sqlite table records every lifelog id that has been handled. The id is
the table's PRIMARY KEY, so a second insert for the same id is refused by
the database itself; that refusal, surfaced as DuplicateEntryError, is what
keeps a record from being handled twice across runs. Entries are only ever
inserted, never updated or deleted.

Pass ":memory:" as the path for a throwaway ledger that lives as long as
the object does.
"""

from __future__ import annotations
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Union

from .config import MEMORY_PATH
from .errors import DuplicateEntryError, StorageError
from .schemas import Lifelog
from .utils import eprint

SCHEMA = '''
    CREATE TABLE IF NOT EXISTS processed_lifelogs (
        id TEXT PRIMARY KEY,
        title TEXT NOT NULL,
        processed_at DATETIME DEFAULT CURRENT_TIMESTAMP,
        updated_at DATETIME NOT NULL,
        start_time DATETIME NOT NULL,
        end_time DATETIME NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_processed_lifelogs_processed_at
        ON processed_lifelogs(processed_at);
    CREATE INDEX IF NOT EXISTS idx_processed_lifelogs_updated_at
        ON processed_lifelogs(updated_at);
'''


# CURRENT_TIMESTAMP layout plus microseconds, so explicit values and the
# column default sort together
PROCESSED_AT_FMT = "%Y-%m-%d %H:%M:%S.%f"


def _parse_processed_at(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    dt = datetime.fromisoformat(value)
    # CURRENT_TIMESTAMP is UTC without an offset
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


@dataclass(frozen=True)
class LedgerEntry:
    id: str
    title: str
    updated_at: str
    start_time: str
    end_time: str
    processed_at: Optional[datetime] = None

    @classmethod
    def from_lifelog(cls, lifelog: Lifelog) -> LedgerEntry:
        return cls(
            id=lifelog.id,
            title=lifelog.title,
            updated_at=lifelog.updated_at,
            start_time=lifelog.start_time,
            end_time=lifelog.end_time,
        )


class Ledger:
    def __init__(self, path: Union[str, Path]=MEMORY_PATH, verbose: bool=False):
        self.path = str(path)
        self.verbose = verbose
        if self.path != MEMORY_PATH:
            Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn: Optional[sqlite3.Connection] = sqlite3.connect(self.path)
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(SCHEMA)
        except sqlite3.Error as e:
            raise StorageError(f"Cannot open ledger at {self.path}: {e}", e) from e
        self._log(f"opened {self.path}")

    def _log(self, msg: str):
        eprint(f"[Ledger] {msg}", self.verbose)

    def _db(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError("Ledger is closed")
        return self._conn

    @property
    def closed(self) -> bool:
        return self._conn is None

    def is_processed(self, lifelog_id: str) -> bool:
        conn = self._db()
        try:
            row = conn.execute("SELECT 1 FROM processed_lifelogs WHERE id = ?", (lifelog_id,)).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Lookup of {lifelog_id} failed: {e}", e) from e
        return row is not None

    def mark_as_processed(self, entry: Union[LedgerEntry, Lifelog]):
        if isinstance(entry, Lifelog):
            entry = LedgerEntry.from_lifelog(entry)
        conn = self._db()
        processed_at = (entry.processed_at or datetime.now(timezone.utc)).astimezone(timezone.utc)
        try:
            with conn:
                conn.execute('''
                    INSERT INTO processed_lifelogs (id, title, processed_at, updated_at, start_time, end_time)
                    VALUES (?, ?, ?, ?, ?, ?)
                ''', (
                    entry.id,
                    entry.title,
                    processed_at.strftime(PROCESSED_AT_FMT),
                    entry.updated_at,
                    entry.start_time,
                    entry.end_time,
                ))
        except sqlite3.IntegrityError as e:
            if "UNIQUE" in str(e):
                raise DuplicateEntryError(entry.id, e) from e
            raise StorageError(f"Recording {entry.id} rejected: {e}", e) from e
        except sqlite3.Error as e:
            raise StorageError(f"Recording {entry.id} failed: {e}", e) from e
        self._log(f"recorded {entry.id}")

    def get(self, lifelog_id: str) -> Optional[LedgerEntry]:
        conn = self._db()
        try:
            row = conn.execute(
                "SELECT id, title, processed_at, updated_at, start_time, end_time FROM processed_lifelogs WHERE id = ?",
                (lifelog_id,),
            ).fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Lookup of {lifelog_id} failed: {e}", e) from e
        if row is None:
            return None
        return LedgerEntry(
            id=row["id"],
            title=row["title"],
            updated_at=row["updated_at"],
            start_time=row["start_time"],
            end_time=row["end_time"],
            processed_at=_parse_processed_at(row["processed_at"]),
        )

    def count(self) -> int:
        conn = self._db()
        try:
            return conn.execute("SELECT COUNT(*) FROM processed_lifelogs").fetchone()[0]
        except sqlite3.Error as e:
            raise StorageError(f"Count failed: {e}", e) from e

    def last_processed_at(self) -> Optional[datetime]:
        conn = self._db()
        try:
            row = conn.execute("SELECT MAX(processed_at) FROM processed_lifelogs").fetchone()
        except sqlite3.Error as e:
            raise StorageError(f"Query failed: {e}", e) from e
        return _parse_processed_at(row[0])

    def close(self):
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            self._log(f"closed {self.path}")

    def __enter__(self) -> Ledger:
        return self

    def __exit__(self, *exc):
        self.close()
