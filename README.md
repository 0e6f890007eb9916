# clinicdesk

Back-office tooling for a small clinic, built on an SQLite database:

- a **resource library** (books, articles, magazines and other material),
  with create, read, update and delete, sorting by type, availability or
  language, and prefix search on id, title and language;
- **treatment records**, with the same operations, sorting by type, cost
  (ascending) or dosage (descending), and prefix search on id, cost and name;
- an **SMTP client** that builds a multipart message with base64-encoded
  attachments and walks through the login and delivery conversation;
- a **serial link** to an Arduino Uno board, found by its USB vendor and
  product identifiers and opened at 9600 baud, 8N1;
- **media player helpers**: the end-time label, playback-rate choices, volume
  and mute state, and a grabber that keeps the first presented video frame.

## Installation

```
pip install .
```

For running the test suite:

```
pip install ".[test]"
pytest
```

## Command line

The package installs one command, `clinicdesk`. Every run opens the
database named by `--database` (default `clinicdesk.db`), creates the
tables that are missing, and carries out one subcommand on the resource
library:

```
clinicdesk --help
clinicdesk list
clinicdesk add 1 "Intro to Anatomy" English Book Available 2024-01-15 "Reference copy" 3
clinicdesk update 1 "Intro to Anatomy" French Book Borrowed 2024-02-01 "Reference copy" 3
clinicdesk delete 1
clinicdesk sort Language          # or Availability, Type
clinicdesk search Intro
clinicdesk stats
clinicdesk report --output resources.txt
clinicdesk lookup "Intro to Anatomy"
```

- `add` and `update` take the id, title, language, type, availability, an
  ISO date, a description and an employee id. An employee id that is not
  in the `EMPLOYEE` table is stored as empty. `update` of an id that is not
  stored prints `not found` and fails.
- `sort` and `search` print the matching rows as a table; `search` matches
  rows whose id, title or language starts with the given text.
- `stats` prints how many resources there are of each of the types Book,
  Article, Magazine, Online and Retailer.
- `report` writes a tab-separated listing headed "List of Ressource
  Library" to the `--output` file, or to standard output without it.
- `lookup` prints the stored title equal to the value, or `not found`.

Mail is sent with:

```
clinicdesk mail --sender desk@example.com --to doctor@example.com \
    --subject "Weekly list" --body "See attached." --attach resources.txt
```

The password is asked for at the prompt. `--host` and `--port` choose the
server (default `smtp.gmail.com`, port 465); the connection is encrypted
from the start. `--attach` may be given several times.

The serial lookup runs with:

```
clinicdesk bridge --interval 1.0
```

It looks for an Arduino Uno, and every `--interval` seconds reads what the
board has sent, prints it, and writes back the matching title or
`not found`, followed by a newline. It exits with status 1 if the board is
not found or its port cannot be opened, and stops on Ctrl+C.

The command exits with status 0 on success and 1 on failure.

## Using the library

```python
from clinicdesk.database import Connection, ensure_schema
from clinicdesk.resource import ResourceRepository
from clinicdesk.treatment import TreatmentRepository

with Connection("clinic.db") as connection:
    ensure_schema(connection)

    resources = ResourceRepository(connection)
    for row in resources.sort_by_language():
        print(row)

    matches = resources.search("Intro")

    treatments = TreatmentRepository(connection)
    cheapest_first = treatments.sort_by_cost()
```

Queries return a `clinicdesk.database.Table`, which holds `headers` and
`rows` and can be iterated, indexed and measured with `len`. Records are the
dataclasses `clinicdesk.resource.Resource` and
`clinicdesk.treatment.Treatment`; dates are `datetime.date` values and are
stored in ISO form.

`update` of a record that does not exist raises
`clinicdesk.database.NotFoundError`; `delete` returns the number of rows it
removed (0 when there was none). Other database failures, including using a
connection that is not open, raise `clinicdesk.database.DatabaseError`.

### Mail

`clinicdesk.smtp.build_message(from_addr, to, subject, body, files)` returns
the complete message text with CRLF line endings, one plain-text part and
one `application/octet-stream` part per attachment. Files that do not exist
are skipped; a file that exists but cannot be read raises
`clinicdesk.smtp.AttachmentError`.

`SmtpClient(user, password, host, port=465, timeout=30.0).send_mail(...)`
sends it over TLS and returns `"Message sent"` or
`"Failed to send message"`. The protocol steps are kept in `SmtpSession`,
whose `handle` method takes each server reply and returns the text to send
next, tracking its progress in an `SmtpState`.

### Serial link

`clinicdesk.arduino.find_arduino_port(ports)` picks the board out of a list
of port descriptions by vendor id 9025 and product id 67.
`Arduino.connect()` returns a `ConnectResult` (`CONNECTED`, `NOT_OPENED` or
`NOT_AVAILABLE`). `write` sends data followed by a newline and returns
`False` when the port is not open; `read` returns the bytes waiting, or
`b""`; `close` returns whether the port had been open. A custom serial
object can be passed in through `serial_factory`.

### Media helpers

`clinicdesk.media.format_duration(milliseconds)` gives the end-time label
as `00:MM:SS`; whole hours are folded away and not shown.
`playback_rate(index)` maps the speed menu entries 0, 1 and 2 to 1.0, 0.5
and 2.0, and anything else to 0.0. `is_format_supported(pixel_format, width,
height)` tells whether frames can be turned into images. `PlayerControls`
keeps the volume (starting at 50, held within 0 to 100) and
`volume_icon()` names the mute or voice icon. `FrameGrabber` keeps the first
frame presented after `start`; while a frame is kept, each later frame hands
it to the `on_frame` callback, `clear` drops it, and a frame whose format or
size does not match stops the grabber with an error.

## What it does not do

- There is no graphical window: the resource views, statistics and report
  are plain text on the command line, not a table widget, a chart or a PDF.
- The command line covers the resource library only; treatment records are
  reached through `clinicdesk.treatment` in Python.
- The media helpers do not decode or play audio or video; they only hold
  the state and values a player would show.
- Employees, patients and appointments are not managed; the `EMPLOYEE`
  table holds only ids, for other records to refer to.