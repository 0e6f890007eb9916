"""Command line front end for the resource library."""

from __future__ import annotations

import argparse
import getpass
import sqlite3
import sys
import time
from datetime import date
from pathlib import Path
from typing import Sequence

from clinicdesk.arduino import Arduino, ConnectResult
from clinicdesk.database import (
    DEFAULT_PATH,
    Connection,
    DatabaseError,
    NotFoundError,
    Table,
    ensure_schema,
)
from clinicdesk.resource import Resource, ResourceRepository
from clinicdesk.smtp import MESSAGE_SENT, AttachmentError, SmtpClient

RESOURCE_TYPES = ("Book", "Article", "Magazine", "Online", "Retailer")
NOT_FOUND = "not found"
REPORT_TITLE = "List of Ressource Library"
REPORT_HEADERS = (
    "Id Ressource",
    "Title",
    "Language",
    "Type",
    "Availability",
    "Date",
    "Description",
    "Id Employee",
)
SORT_KEYS = ("Language", "Availability", "Type")
DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 465

_TYPE_COLUMN = 3


def type_statistics(repository: ResourceRepository) -> dict[str, int]:
    """How many resources there are of each known type."""
    counts = dict.fromkeys(RESOURCE_TYPES, 0)
    for row in repository.read():
        kind = row[_TYPE_COLUMN]
        if kind in counts:
            counts[kind] += 1
    return counts


def lookup_title(connection: Connection, value: str) -> str:
    """The stored title equal to value, or 'not found'."""
    db = connection.sqlite
    if db is None:
        return NOT_FOUND
    try:
        row = db.execute(
            "SELECT TITLE FROM RESSOURCE_LIBRARY WHERE TITLE = ?", (value,)
        ).fetchone()
    except sqlite3.Error:
        return NOT_FOUND
    if row is None:
        return NOT_FOUND
    return "" if row[0] is None else str(row[0])


def _cell(value) -> str:
    return "" if value is None else str(value)


def resource_report(repository: ResourceRepository) -> str:
    """A printable listing of every resource."""
    lines = [REPORT_TITLE, "", "\t".join(REPORT_HEADERS)]
    lines.extend("\t".join(_cell(value) for value in row) for row in repository.read())
    return "\n".join(lines) + "\n"


def sorted_view(repository: ResourceRepository, key: str) -> Table:
    """Resources sorted by language, availability, or otherwise by type."""
    if key == "Language":
        return repository.sort_by_language()
    if key == "Availability":
        return repository.sort_by_availability()
    return repository.sort_by_type()


def _format_table(table: Table) -> str:
    lines = [" | ".join(table.headers)]
    lines.extend(" | ".join(_cell(value) for value in row) for row in table)
    return "\n".join(lines)


def _resource_from(args: argparse.Namespace) -> Resource:
    return Resource(
        resource_id=args.id,
        title=args.title,
        language=args.language,
        resource_type=args.type,
        availability=args.availability,
        date=args.date,
        description=args.description,
        employee_id=args.employee,
    )


def _add_resource_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("id", type=int)
    parser.add_argument("title")
    parser.add_argument("language")
    parser.add_argument("type")
    parser.add_argument("availability")
    parser.add_argument("date", type=date.fromisoformat)
    parser.add_argument("description")
    parser.add_argument("employee", type=int)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clinicdesk", description="Manage the resource library."
    )
    parser.add_argument("--database", default=DEFAULT_PATH, help="database file")
    commands = parser.add_subparsers(dest="command", required=True)

    commands.add_parser("list", help="show every resource")
    _add_resource_arguments(commands.add_parser("add", help="add a resource"))
    _add_resource_arguments(commands.add_parser("update", help="change a resource"))
    delete = commands.add_parser("delete", help="delete a resource")
    delete.add_argument("id", type=int)
    sort = commands.add_parser("sort", help="show resources sorted")
    sort.add_argument("key", choices=SORT_KEYS)
    search = commands.add_parser("search", help="search resources")
    search.add_argument("text")
    commands.add_parser("stats", help="count resources by type")
    report = commands.add_parser("report", help="write a listing of resources")
    report.add_argument("--output", type=Path)
    lookup = commands.add_parser("lookup", help="look a title up")
    lookup.add_argument("value")

    mail = commands.add_parser("mail", help="send a mail")
    mail.add_argument("--sender", required=True)
    mail.add_argument("--to", required=True)
    mail.add_argument("--subject", default="")
    mail.add_argument("--body", default="")
    mail.add_argument("--attach", action="append", default=[])
    mail.add_argument("--host", default=DEFAULT_SMTP_HOST)
    mail.add_argument("--port", type=int, default=DEFAULT_SMTP_PORT)

    bridge = commands.add_parser("bridge", help="answer title lookups from the board")
    bridge.add_argument("--interval", type=float, default=1.0)
    return parser


def _bridge(connection: Connection, interval: float) -> int:
    arduino = Arduino()
    result = arduino.connect()
    if result is ConnectResult.CONNECTED:
        print(f"arduino is available and connected to : {arduino.port_name}")
    elif result is ConnectResult.NOT_OPENED:
        print(f"arduino is available but not connected to :{arduino.port_name}")
        return 1
    else:
        print("arduino is not available")
        return 1
    try:
        while True:
            value = arduino.read().decode("utf-8", errors="replace")
            if value:
                print(value)
                arduino.write(lookup_title(connection, value))
            time.sleep(interval)
    except KeyboardInterrupt:
        pass
    finally:
        arduino.close()
    return 0


def _mail(args: argparse.Namespace) -> int:
    password = getpass.getpass()
    client = SmtpClient(args.sender, password, args.host, args.port)
    try:
        status = client.send_mail(
            args.sender, args.to, args.subject, args.body, args.attach
        )
    except AttachmentError:
        print("Couldn't open the file", file=sys.stderr)
        return 1
    if status == MESSAGE_SENT:
        print("Message sent!")
        return 0
    print(status, file=sys.stderr)
    return 1


def _run(args: argparse.Namespace, connection: Connection) -> int:
    repository = ResourceRepository(connection)
    command = args.command

    if command == "list":
        print(_format_table(repository.read()))
    elif command == "add":
        try:
            repository.create(_resource_from(args))
        except DatabaseError:
            print("Insert failed.", file=sys.stderr)
            return 1
        print("Insert done")
    elif command == "update":
        try:
            repository.update(_resource_from(args))
        except NotFoundError:
            print(NOT_FOUND, file=sys.stderr)
            print("update failed.", file=sys.stderr)
            return 1
        except DatabaseError:
            print("update failed.", file=sys.stderr)
            return 1
        print("update successful.")
    elif command == "delete":
        try:
            repository.delete(args.id)
        except DatabaseError:
            print("delete failed.", file=sys.stderr)
            return 1
        print("delete done")
    elif command == "sort":
        print(_format_table(sorted_view(repository, args.key)))
    elif command == "search":
        print(_format_table(repository.search(args.text)))
    elif command == "stats":
        for kind, count in type_statistics(repository).items():
            print(f"{kind}: {count}")
    elif command == "report":
        text = resource_report(repository)
        if args.output is None:
            print(text, end="")
        else:
            args.output.write_text(text, encoding="utf-8")
            print(f"Report written to {args.output}")
    elif command == "lookup":
        print(lookup_title(connection, args.value))
    elif command == "mail":
        return _mail(args)
    elif command == "bridge":
        return _bridge(connection, args.interval)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run one command against the desk's database."""
    args = _build_parser().parse_args(argv)
    connection = Connection(args.database)
    try:
        connection.open()
        ensure_schema(connection)
    except DatabaseError:
        print("connection failed.", file=sys.stderr)
        connection.close()
        return 1
    with connection:
        return _run(args, connection)


if __name__ == "__main__":
    sys.exit(main())