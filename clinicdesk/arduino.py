"""Finding and talking to an Arduino Uno over a serial line."""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Iterable

import serial
from serial.tools import list_ports

log = logging.getLogger(__name__)

ARDUINO_UNO_VENDOR_ID = 9025
ARDUINO_UNO_PRODUCT_ID = 67
BAUD_RATE = 9600


class ConnectResult(enum.IntEnum):
    """Outcome of trying to connect to the board."""

    CONNECTED = 0
    NOT_OPENED = 1
    NOT_AVAILABLE = -1


def find_arduino_port(ports: Iterable[Any]) -> str | None:
    """Name of the last listed port that belongs to an Arduino Uno, if any."""
    found = None
    for info in ports:
        vid = getattr(info, "vid", None)
        pid = getattr(info, "pid", None)
        if vid is None or pid is None:
            continue
        if vid == ARDUINO_UNO_VENDOR_ID and pid == ARDUINO_UNO_PRODUCT_ID:
            found = info.device
    return found


class Arduino:
    """A serial link to an Arduino board."""

    def __init__(self, serial_factory: Callable[[], Any] | None = None) -> None:
        self.serial = (serial_factory or serial.Serial)()
        self.port_name = ""
        self.is_available = False

    def connect(self) -> ConnectResult:
        """Look for the board, then open and configure its port."""
        name = find_arduino_port(list_ports.comports())
        if name is not None:
            self.is_available = True
            self.port_name = name
        log.debug("arduino_port_name is: %s", self.port_name)
        if not self.is_available:
            return ConnectResult.NOT_AVAILABLE
        port = self.serial
        port.port = self.port_name
        port.baudrate = BAUD_RATE
        port.bytesize = serial.EIGHTBITS
        port.parity = serial.PARITY_NONE
        port.stopbits = serial.STOPBITS_ONE
        port.xonxoff = False
        port.rtscts = False
        try:
            port.open()
        except (serial.SerialException, OSError) as exc:
            log.debug("cannot open %s: %s", self.port_name, exc)
            return ConnectResult.NOT_OPENED
        return ConnectResult.CONNECTED

    def close(self) -> bool:
        """Close the port; False if it was not open."""
        if self.serial.is_open:
            self.serial.close()
            return True
        return False

    def read(self) -> bytes:
        """Everything received so far; empty when the port is not open."""
        if not self.serial.is_open:
            return b""
        waiting = self.serial.in_waiting
        return self.serial.read(waiting) if waiting else b""

    def write(self, data: bytes | str) -> bool:
        """Send data followed by a newline; False if the port is not writable."""
        if not self.serial.is_open:
            log.debug("Couldn't write to serial!")
            return False
        if isinstance(data, str):
            data = data.encode("utf-8")
        self.serial.write(data)
        self.serial.write(b"\n")
        return True