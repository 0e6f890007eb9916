from datetime import date

import pytest

from clinicdesk.database import Connection, DatabaseError, NotFoundError, ensure_schema
from clinicdesk.treatment import HEADERS, Treatment, TreatmentRepository


@pytest.fixture
def connection():
    with Connection(":memory:") as conn:
        ensure_schema(conn)
        with conn.sqlite:
            conn.sqlite.execute("INSERT INTO EMPLOYEE (ID_EMPLOYEE) VALUES (1)")
        yield conn


@pytest.fixture
def repo(connection):
    return TreatmentRepository(connection)


def make(treatment_id, name="Physio", treatment_type="Therapy", dosage="10mg",
         cost=100, employee_id=1):
    return Treatment(treatment_id, name, date(2023, 1, 2), date(2023, 2, 3),
                     treatment_type, dosage, cost, employee_id)


def test_create_then_read(repo):
    t = make(1)
    repo.create(t)
    table = repo.read()
    assert table.headers == HEADERS
    assert table.rows == ((1, "Physio", t.start_date.isoformat(),
                           t.end_date.isoformat(), "Therapy", "10mg", 100, 1),)


def test_headers_match_source_columns(repo):
    assert repo.read().headers[4] == "TYPEE"
    assert repo.read().headers[6] == "TCOST"


def test_unknown_employee_is_stored_empty(repo):
    repo.create(make(1, employee_id=77))
    assert repo.read()[0][7] is None


def test_duplicate_id_raises(repo):
    repo.create(make(1))
    with pytest.raises(DatabaseError):
        repo.create(make(1))
    assert len(repo.read()) == 1


def test_delete_reports_rows(repo):
    repo.create(make(1))
    assert repo.delete(1) == 1
    assert repo.delete(1) == 0
    assert repo.read().rows == ()


def test_update_changes_fields(repo):
    repo.create(make(1))
    repo.update(make(1, name="Massage", cost=250))
    row = repo.read()[0]
    assert row[1] == "Massage"
    assert row[6] == 250


def test_update_missing_raises_not_found(repo):
    with pytest.raises(NotFoundError):
        repo.update(make(9))


def test_sort_by_type(repo):
    for i, kind in enumerate(["Surgery", "Drug", "Therapy"], start=1):
        repo.create(make(i, treatment_type=kind))
    types = [row[4] for row in repo.sort_by_type()]
    assert types == sorted(["Surgery", "Drug", "Therapy"])


def test_sort_by_cost_ascending(repo):
    for i, cost in enumerate([300, 50, 120], start=1):
        repo.create(make(i, cost=cost))
    costs = [row[6] for row in repo.sort_by_cost()]
    assert costs == sorted([300, 50, 120])


def test_sort_by_dosage_descending(repo):
    for i, dosage in enumerate(["b", "c", "a"], start=1):
        repo.create(make(i, dosage=dosage))
    dosages = [row[5] for row in repo.sort_by_dosage()]
    assert dosages == sorted(["b", "c", "a"], reverse=True)


def test_search_by_name_cost_and_id(repo):
    repo.create(make(1, name="Physio", cost=100))
    repo.create(make(2, name="Massage", cost=450))
    assert [row[0] for row in repo.search("Mas")] == [2]
    assert [row[0] for row in repo.search("45")] == [2]
    assert [row[0] for row in repo.search("1")] == [1]


def test_search_without_match_is_empty(repo):
    repo.create(make(1))
    assert len(repo.search("Zzz")) == 0
    assert len(repo.search("' OR 1=1 --")) == 0


def test_closed_connection_raises():
    repo = TreatmentRepository(Connection(":memory:"))
    with pytest.raises(DatabaseError):
        repo.create(make(1))