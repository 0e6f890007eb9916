from datetime import date

import pytest

from clinicdesk.cli import (
    NOT_FOUND,
    REPORT_TITLE,
    RESOURCE_TYPES,
    lookup_title,
    main,
    resource_report,
    sorted_view,
    type_statistics,
)
from clinicdesk.database import Connection, ensure_schema
from clinicdesk.resource import Resource, ResourceRepository


@pytest.fixture
def connection(tmp_path):
    conn = Connection(str(tmp_path / "desk.db")).open()
    ensure_schema(conn)
    conn.sqlite.execute("INSERT INTO EMPLOYEE (ID_EMPLOYEE) VALUES (7)")
    conn.sqlite.commit()
    yield conn
    conn.close()


@pytest.fixture
def repository(connection):
    return ResourceRepository(connection)


def _resource(resource_id, title, language="English", kind="Book", availability="Yes"):
    return Resource(
        resource_id=resource_id,
        title=title,
        language=language,
        resource_type=kind,
        availability=availability,
        date=date(2023, 5, 1),
        description="desc",
        employee_id=7,
    )


def test_type_statistics_counts_known_types(repository):
    repository.create(_resource(1, "A", kind="Book"))
    repository.create(_resource(2, "B", kind="Book"))
    repository.create(_resource(3, "C", kind="Online"))
    repository.create(_resource(4, "D", kind="Other"))
    stats = type_statistics(repository)
    assert list(stats) == list(RESOURCE_TYPES)
    assert stats["Book"] == 2
    assert stats["Online"] == 1
    assert stats["Article"] == 0
    assert sum(stats.values()) == 3


def test_lookup_title_found_and_missing(connection, repository):
    repository.create(_resource(1, "Anatomy"))
    assert lookup_title(connection, "Anatomy") == "Anatomy"
    assert lookup_title(connection, "Physics") == NOT_FOUND


def test_sorted_view_by_language(repository):
    repository.create(_resource(1, "A", language="French"))
    repository.create(_resource(2, "B", language="Arabic"))
    repository.create(_resource(3, "C", language="English"))
    languages = [row[2] for row in sorted_view(repository, "Language")]
    assert languages == sorted(languages)
    assert len(languages) == 3


def test_sorted_view_by_availability(repository):
    repository.create(_resource(1, "A", availability="Yes"))
    repository.create(_resource(2, "B", availability="No"))
    values = [row[4] for row in sorted_view(repository, "Availability")]
    assert values == ["No", "Yes"]


def test_sorted_view_other_key_sorts_by_type(repository):
    repository.create(_resource(1, "A", kind="Online"))
    repository.create(_resource(2, "B", kind="Article"))
    kinds = [row[3] for row in sorted_view(repository, "whatever")]
    assert kinds == ["Article", "Online"]


def test_resource_report_lists_every_resource(repository):
    repository.create(_resource(1, "Anatomy"))
    repository.create(_resource(2, "Surgery"))
    report = resource_report(repository)
    lines = report.splitlines()
    assert lines[0] == REPORT_TITLE
    assert "Title" in lines[2]
    assert any(line.startswith("1\tAnatomy") for line in lines)
    assert any(line.startswith("2\tSurgery") for line in lines)


def _add_args(db, resource_id="1", title="Anatomy", kind="Book"):
    return [
        "--database", db, "add", resource_id, title, "English", kind,
        "Yes", "2023-05-01", "desc", "7",
    ]


def test_main_add_list_and_delete(tmp_path, capsys):
    db = str(tmp_path / "desk.db")
    assert main(_add_args(db)) == 0
    assert "Insert done" in capsys.readouterr().out
    assert main(["--database", db, "list"]) == 0
    assert "Anatomy" in capsys.readouterr().out
    assert main(["--database", db, "delete", "1"]) == 0
    assert "delete done" in capsys.readouterr().out
    main(["--database", db, "list"])
    assert "Anatomy" not in capsys.readouterr().out


def test_main_duplicate_insert_fails(tmp_path, capsys):
    db = str(tmp_path / "desk.db")
    main(_add_args(db))
    capsys.readouterr()
    assert main(_add_args(db)) == 1
    assert "Insert failed." in capsys.readouterr().err


def test_main_update_missing_fails(tmp_path, capsys):
    db = str(tmp_path / "desk.db")
    args = _add_args(db)
    args[2] = "update"
    assert main(args) == 1
    assert "update failed." in capsys.readouterr().err


def test_main_update_existing(tmp_path, capsys):
    db = str(tmp_path / "desk.db")
    main(_add_args(db))
    args = _add_args(db, title="Physiology")
    args[2] = "update"
    assert main(args) == 0
    assert "update successful." in capsys.readouterr().out
    main(["--database", db, "search", "Phys"])
    assert "Physiology" in capsys.readouterr().out


def test_main_stats_and_report(tmp_path, capsys):
    db = str(tmp_path / "desk.db")
    main(_add_args(db, kind="Magazine"))
    capsys.readouterr()
    assert main(["--database", db, "stats"]) == 0
    assert "Magazine: 1" in capsys.readouterr().out.splitlines()
    out_file = tmp_path / "report.txt"
    assert main(["--database", db, "report", "--output", str(out_file)]) == 0
    assert out_file.read_text(encoding="utf-8").startswith(REPORT_TITLE)


def test_main_lookup(tmp_path, capsys):
    db = str(tmp_path / "desk.db")
    main(_add_args(db))
    capsys.readouterr()
    main(["--database", db, "lookup", "Missing"])
    assert capsys.readouterr().out.strip() == NOT_FOUND


def test_main_rejects_bad_date(tmp_path):
    db = str(tmp_path / "desk.db")
    args = _add_args(db)
    args[8] = "not-a-date"
    with pytest.raises(SystemExit) as info:
        main(args)
    assert info.value.code == 2


def test_main_reports_unopenable_database(tmp_path, capsys):
    missing = str(tmp_path / "no_such_dir" / "desk.db")
    assert main(["--database", missing, "list"]) == 1
    assert "connection failed." in capsys.readouterr().err