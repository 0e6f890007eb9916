"""Records of the resource library and the queries over them."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Any

from clinicdesk.database import Connection, DatabaseError, NotFoundError, Table

HEADERS = (
    "ID_RESSOURCE",
    "TITLE",
    "RLANGUAGE",
    "RTYPE",
    "RAVAILABILITY",
    "RDATE",
    "RDESCRIPTION",
    "ID_EMPLOYEE",
)

_SELECT = f"SELECT {', '.join(HEADERS)} FROM RESSOURCE_LIBRARY"

_INSERT = (
    "INSERT INTO RESSOURCE_LIBRARY (ID_RESSOURCE, TITLE, RLANGUAGE, RTYPE, "
    "RAVAILABILITY, RDATE, RDESCRIPTION, ID_EMPLOYEE) VALUES (:ID_RESSOURCE, "
    ":TITLE, :RLANGUAGE, :RTYPE, :RAVAILABILITY, :RDATE, :RDESCRIPTION, "
    "(SELECT ID_EMPLOYEE FROM EMPLOYEE WHERE ID_EMPLOYEE = :ID_EMPLOYEE))"
)

_UPDATE = (
    "UPDATE RESSOURCE_LIBRARY SET TITLE = :TITLE, RLANGUAGE = :RLANGUAGE, "
    "RTYPE = :RTYPE, RAVAILABILITY = :RAVAILABILITY, RDATE = :RDATE, "
    "RDESCRIPTION = :RDESCRIPTION, ID_EMPLOYEE = :ID_EMPLOYEE "
    "WHERE ID_RESSOURCE = :ID_RESSOURCE"
)


@dataclass
class Resource:
    """One entry of the resource library."""

    resource_id: int
    title: str
    language: str
    resource_type: str
    availability: str
    date: date
    description: str
    employee_id: int

    def _params(self) -> dict[str, Any]:
        return {
            "ID_RESSOURCE": self.resource_id,
            "TITLE": self.title,
            "RLANGUAGE": self.language,
            "RTYPE": self.resource_type,
            "RAVAILABILITY": self.availability,
            "RDATE": self.date.isoformat(),
            "RDESCRIPTION": self.description,
            "ID_EMPLOYEE": self.employee_id,
        }


class ResourceRepository:
    """Create, read, change, sort and search resources."""

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def _db(self) -> sqlite3.Connection:
        db = self._connection.sqlite
        if db is None:
            raise DatabaseError("connection is not open")
        return db

    def _query(self, sql: str, params: Any = ()) -> Table:
        try:
            rows = self._db().execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc
        return Table(HEADERS, tuple(rows))

    def _write(self, sql: str, params: Any) -> int:
        db = self._db()
        try:
            with db:
                return db.execute(sql, params).rowcount
        except sqlite3.Error as exc:
            raise DatabaseError(str(exc)) from exc

    def create(self, resource: Resource) -> None:
        """Insert a resource; an unknown employee is stored as empty."""
        self._write(_INSERT, resource._params())

    def read(self) -> Table:
        """Return every resource."""
        return self._query(_SELECT)

    def delete(self, resource_id: int) -> int:
        """Delete a resource by id and return how many rows went."""
        return self._write(
            "DELETE FROM RESSOURCE_LIBRARY WHERE ID_RESSOURCE = ?", (resource_id,)
        )

    def update(self, resource: Resource) -> None:
        """Overwrite a stored resource; raise NotFoundError if it is absent."""
        found = self._query(
            "SELECT 1 FROM RESSOURCE_LIBRARY WHERE ID_RESSOURCE = ?",
            (resource.resource_id,),
        )
        if not found.rows:
            raise NotFoundError(f"resource {resource.resource_id} not found")
        self._write(_UPDATE, resource._params())

    def sort_by_type(self) -> Table:
        return self._query(f"{_SELECT} ORDER BY RTYPE")

    def sort_by_availability(self) -> Table:
        return self._query(f"{_SELECT} ORDER BY RAVAILABILITY")

    def sort_by_language(self) -> Table:
        return self._query(f"{_SELECT} ORDER BY RLANGUAGE")

    def search(self, text: str) -> Table:
        """Resources whose id, title or language starts with the text."""
        pattern = f"{text}%"
        return self._query(
            f"{_SELECT} WHERE ID_RESSOURCE LIKE ? OR TITLE LIKE ? OR RLANGUAGE LIKE ?",
            (pattern, pattern, pattern),
        )