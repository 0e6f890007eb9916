"""Composing multipart mail and sending it over an encrypted SMTP link."""

from __future__ import annotations

import base64
import enum
import logging
import socket
import ssl
from pathlib import Path
from typing import BinaryIO, Iterable

log = logging.getLogger(__name__)

BOUNDARY = "frontier"
MESSAGE_SENT = "Message sent"
SEND_FAILED = "Failed to send message"


class AttachmentError(Exception):
    """Raised when an attachment exists but cannot be read."""


class SmtpState(enum.Enum):
    """Where an SMTP conversation stands."""

    TLS = enum.auto()
    HANDSHAKE = enum.auto()
    AUTH = enum.auto()
    USER = enum.auto()
    PASS = enum.auto()
    RCPT = enum.auto()
    MAIL = enum.auto()
    DATA = enum.auto()
    INIT = enum.auto()
    BODY = enum.auto()
    QUIT = enum.auto()
    CLOSE = enum.auto()


def build_message(from_addr, to, subject, body, files=()) -> str:
    """Build the multipart message text, with CRLF line ends, ready for DATA.

    Files that do not exist are skipped; a file that exists but cannot be
    read raises AttachmentError.
    """
    parts = [
        f"To: {to}\n",
        f"From: {from_addr}\n",
        f"Subject: {subject}\n",
        "MIME-Version: 1.0\n",
        f"Content-Type: multipart/mixed; boundary={BOUNDARY}\n\n",
        f"--{BOUNDARY}\n",
        "Content-Type: text/plain\n\n",
        body,
        "\n\n",
    ]
    paths = [Path(name) for name in files]
    if paths:
        log.debug("Files to be sent: %d", len(paths))
    else:
        log.debug("No attachments found")
    for path in paths:
        if not path.exists():
            continue
        try:
            content = path.read_bytes()
        except OSError as exc:
            raise AttachmentError(f"Couldn't open the file {str(path)!r}") from exc
        parts.append(f"--{BOUNDARY}\n")
        parts.append(
            "Content-Type: application/octet-stream\n"
            f"Content-Disposition: attachment; filename={path.name};\n"
            "Content-Transfer-Encoding: base64\n\n"
        )
        parts.append(base64.b64encode(content).decode("ascii"))
        parts.append("\n")
    parts.append(f"--{BOUNDARY}--\n")
    message = "".join(parts).replace("\n", "\r\n")
    return message.replace("\r\n.\r\n", "\r\n..\r\n")


def _reply_code(response: str) -> str:
    """The code of a reply: taken from its first final line, else its last line."""
    lines = response.splitlines() or [""]
    for line in lines:
        if len(line) > 3 and line[3] == " ":
            return line[:3]
    return lines[-1][:3]


def _b64(text: str) -> str:
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


class SmtpSession:
    """The client side of one SMTP conversation, driven by server replies."""

    def __init__(self, user, password, from_addr, rcpt, message) -> None:
        self.user = user
        self.password = password
        self.from_addr = from_addr
        self.rcpt = rcpt
        self.message = message
        self.state = SmtpState.INIT
        self.status: str | None = None

    def handle(self, response: str) -> str | None:
        """Take a server reply and return the text to send back, if any."""
        code = _reply_code(response)
        log.debug("Server response code: %s", code)
        state = self.state

        if state is SmtpState.INIT and code == "220":
            self.state = SmtpState.HANDSHAKE
            return "EHLO localhost\r\n"
        if state is SmtpState.TLS and code == "250":
            self.state = SmtpState.HANDSHAKE
            return "STARTTLS\r\n"
        if state is SmtpState.HANDSHAKE and code == "250":
            # The link is encrypted from the start; greet again over it.
            self.state = SmtpState.AUTH
            return "EHLO localhost\r\n"
        if state is SmtpState.AUTH and code == "250":
            self.state = SmtpState.USER
            return "AUTH LOGIN\r\n"
        if state is SmtpState.USER and code == "334":
            self.state = SmtpState.PASS
            return _b64(self.user) + "\r\n"
        if state is SmtpState.PASS and code == "334":
            self.state = SmtpState.MAIL
            return _b64(self.password) + "\r\n"
        if state is SmtpState.MAIL and code == "235":
            self.state = SmtpState.RCPT
            return f"MAIL FROM:<{self.from_addr}>\r\n"
        if state is SmtpState.RCPT and code == "250":
            self.state = SmtpState.DATA
            return f"RCPT TO:<{self.rcpt}>\r\n"
        if state is SmtpState.DATA and code == "250":
            self.state = SmtpState.BODY
            return "DATA\r\n"
        if state is SmtpState.BODY and code == "354":
            self.state = SmtpState.QUIT
            return f"{self.message}\r\n.\r\n"
        if state is SmtpState.QUIT and code == "250":
            self.status = MESSAGE_SENT
            return "QUIT\r\n"
        if state is SmtpState.CLOSE:
            return None
        self.state = SmtpState.CLOSE
        self.status = SEND_FAILED
        return None


def _read_reply(stream: BinaryIO) -> str:
    """Read one (possibly multi-line) reply; empty when the server has gone."""
    lines = []
    while True:
        line = stream.readline()
        if not line:
            break
        lines.append(line)
        if line[3:4] == b" ":
            break
    return b"".join(lines).decode("utf-8", errors="replace")


class SmtpClient:
    """Sends mail through an SMTP server reached over TLS."""

    def __init__(self, user, password, host, port=465, timeout=30.0) -> None:
        self.user = user
        self.password = password
        self.host = host
        self.port = port
        self.timeout = timeout

    def send_mail(self, from_addr, to, subject, body, files=()) -> str:
        """Send a message and return the resulting status text."""
        message = build_message(from_addr, to, subject, body, files)
        session = SmtpSession(self.user, self.password, from_addr, to, message)
        context = ssl.create_default_context()
        try:
            with socket.create_connection(
                (self.host, self.port), timeout=self.timeout
            ) as raw, context.wrap_socket(
                raw, server_hostname=self.host
            ) as conn, conn.makefile(
                "rb"
            ) as replies:
                while session.status is None:
                    reply = _read_reply(replies)
                    if not reply:
                        break
                    command = session.handle(reply)
                    if command is not None:
                        conn.sendall(command.encode("utf-8"))
        except OSError as exc:
            log.debug("send_mail %s", exc)
        return session.status or SEND_FAILED