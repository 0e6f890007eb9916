"""Treatment records and the queries over them."""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from datetime import date
from typing import Any

from clinicdesk.database import Connection, DatabaseError, NotFoundError, Table

HEADERS = (
    "ID_TREATMENT",
    "TNAME",
    "START_DATE",
    "END_DATE",
    "TYPEE",
    "DOSAGE",
    "TCOST",
    "ID_EMPLOYEE",
)

_SELECT = f"SELECT {', '.join(HEADERS)} FROM TREATMENT"

_INSERT = (
    "INSERT INTO TREATMENT (ID_TREATMENT, TNAME, START_DATE, END_DATE, TYPEE, "
    "DOSAGE, TCOST, ID_EMPLOYEE) VALUES (:ID_TREATMENT, :TNAME, :START_DATE, "
    ":END_DATE, :TYPEE, :DOSAGE, :TCOST, "
    "(SELECT ID_EMPLOYEE FROM EMPLOYEE WHERE ID_EMPLOYEE = :ID_EMPLOYEE))"
)

_UPDATE = (
    "UPDATE TREATMENT SET TNAME = :TNAME, START_DATE = :START_DATE, "
    "END_DATE = :END_DATE, TYPEE = :TYPEE, DOSAGE = :DOSAGE, TCOST = :TCOST, "
    "ID_EMPLOYEE = :ID_EMPLOYEE WHERE ID_TREATMENT = :ID_TREATMENT"
)


@dataclass
class Treatment:
    """One treatment given to a patient."""

    treatment_id: int
    name: str
    start_date: date
    end_date: date
    treatment_type: str
    dosage: str
    cost: int
    employee_id: int

    def _params(self) -> dict[str, Any]:
        return {
            "ID_TREATMENT": self.treatment_id,
            "TNAME": self.name,
            "START_DATE": self.start_date.isoformat(),
            "END_DATE": self.end_date.isoformat(),
            "TYPEE": self.treatment_type,
            "DOSAGE": self.dosage,
            "TCOST": self.cost,
            "ID_EMPLOYEE": self.employee_id,
        }


class TreatmentRepository:
    """Create, read, change, sort and search treatments."""

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

    def create(self, treatment: Treatment) -> None:
        """Insert a treatment; an unknown employee is stored as empty."""
        self._write(_INSERT, treatment._params())

    def read(self) -> Table:
        """Return every treatment."""
        return self._query(_SELECT)

    def delete(self, treatment_id: int) -> int:
        """Delete a treatment by id and return how many rows went."""
        return self._write(
            "DELETE FROM TREATMENT WHERE ID_TREATMENT = ?", (treatment_id,)
        )

    def update(self, treatment: Treatment) -> None:
        """Overwrite a stored treatment; raise NotFoundError if it is absent."""
        found = self._query(
            "SELECT 1 FROM TREATMENT WHERE ID_TREATMENT = ?",
            (treatment.treatment_id,),
        )
        if not found.rows:
            raise NotFoundError(f"treatment {treatment.treatment_id} not found")
        self._write(_UPDATE, treatment._params())

    def sort_by_type(self) -> Table:
        return self._query(f"{_SELECT} ORDER BY TYPEE")

    def sort_by_cost(self) -> Table:
        return self._query(f"{_SELECT} ORDER BY TCOST ASC")

    def sort_by_dosage(self) -> Table:
        return self._query(f"{_SELECT} ORDER BY DOSAGE DESC")

    def search(self, text: str) -> Table:
        """Treatments whose id, cost or name starts with the text."""
        pattern = f"{text}%"
        return self._query(
            f"{_SELECT} WHERE ID_TREATMENT LIKE ? OR TCOST LIKE ? OR TNAME LIKE ?",
            (pattern, pattern, pattern),
        )