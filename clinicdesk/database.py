"""SQLite connection handling, result tables and the desk's schema."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Any, Iterator

DEFAULT_PATH = "clinicdesk.db"

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS EMPLOYEE (
        ID_EMPLOYEE INTEGER PRIMARY KEY
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS RESSOURCE_LIBRARY (
        ID_RESSOURCE INTEGER PRIMARY KEY,
        TITLE TEXT,
        RLANGUAGE TEXT,
        RTYPE TEXT,
        RAVAILABILITY TEXT,
        RDATE TEXT,
        RDESCRIPTION TEXT,
        ID_EMPLOYEE INTEGER REFERENCES EMPLOYEE (ID_EMPLOYEE)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS TREATMENT (
        ID_TREATMENT INTEGER PRIMARY KEY,
        TNAME TEXT,
        START_DATE TEXT,
        END_DATE TEXT,
        TYPEE TEXT,
        DOSAGE TEXT,
        TCOST INTEGER,
        ID_EMPLOYEE INTEGER REFERENCES EMPLOYEE (ID_EMPLOYEE)
    )
    """,
)


class DatabaseError(Exception):
    """Raised when the database cannot be opened or a statement fails."""


class NotFoundError(DatabaseError):
    """Raised when a record that should be changed does not exist."""


@dataclass(frozen=True)
class Table:
    """The result of a query: column headers and the rows under them."""

    headers: tuple[str, ...]
    rows: tuple[tuple[Any, ...], ...]

    def __len__(self) -> int:
        return len(self.rows)

    def __iter__(self) -> Iterator[tuple[Any, ...]]:
        return iter(self.rows)

    def __getitem__(self, index: int) -> tuple[Any, ...]:
        return self.rows[index]


class Connection:
    """A connection to the desk's SQLite database."""

    def __init__(self, path: str = DEFAULT_PATH) -> None:
        self.path = str(path)
        self.sqlite: sqlite3.Connection | None = None

    def open(self) -> "Connection":
        """Open the database; raise DatabaseError if that is not possible."""
        if self.sqlite is not None:
            return self
        try:
            db = sqlite3.connect(self.path)
            db.execute("PRAGMA foreign_keys = ON")
        except sqlite3.Error as exc:
            raise DatabaseError(f"cannot open database {self.path!r}: {exc}") from exc
        self.sqlite = db
        return self

    def close(self) -> None:
        """Close the database; closing twice is harmless."""
        if self.sqlite is not None:
            self.sqlite.close()
            self.sqlite = None

    def __enter__(self) -> "Connection":
        return self.open()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def ensure_schema(connection: Connection) -> None:
    """Create the desk's tables where they are missing."""
    db = connection.sqlite
    if db is None:
        raise DatabaseError("connection is not open")
    try:
        with db:
            for statement in _SCHEMA:
                db.execute(statement)
    except sqlite3.Error as exc:
        raise DatabaseError(str(exc)) from exc