from types import SimpleNamespace
from unittest import mock

import serial

from clinicdesk.arduino import (
    ARDUINO_UNO_PRODUCT_ID,
    ARDUINO_UNO_VENDOR_ID,
    Arduino,
    ConnectResult,
    find_arduino_port,
)


class FakeSerial:
    def __init__(self, fail_open=False, incoming=b""):
        self.port = None
        self.baudrate = None
        self.is_open = False
        self.fail_open = fail_open
        self.buffer = bytearray(incoming)
        self.written = []

    def open(self):
        if self.fail_open:
            raise serial.SerialException("busy")
        self.is_open = True

    def close(self):
        self.is_open = False

    @property
    def in_waiting(self):
        return len(self.buffer)

    def read(self, size):
        data = bytes(self.buffer[:size])
        del self.buffer[:size]
        return data

    def write(self, data):
        self.written.append(bytes(data))
        return len(data)


def _port(device, vid, pid):
    return SimpleNamespace(device=device, vid=vid, pid=pid)


UNO = _port("/dev/ttyACM0", ARDUINO_UNO_VENDOR_ID, ARDUINO_UNO_PRODUCT_ID)
OTHER = _port("/dev/ttyUSB0", 1027, 24577)
UNKNOWN = _port("/dev/ttyS0", None, None)


def test_find_port_matches_uno_ids():
    assert find_arduino_port([OTHER, UNKNOWN, UNO]) == "/dev/ttyACM0"


def test_find_port_none_without_uno():
    assert find_arduino_port([OTHER, UNKNOWN]) is None


def test_find_port_takes_last_match():
    second = _port("/dev/ttyACM1", ARDUINO_UNO_VENDOR_ID, ARDUINO_UNO_PRODUCT_ID)
    assert find_arduino_port([UNO, second]) == "/dev/ttyACM1"


def test_connect_opens_and_configures():
    fake = FakeSerial()
    board = Arduino(lambda: fake)
    with mock.patch("serial.tools.list_ports.comports", return_value=[UNO]):
        result = board.connect()
    assert result is ConnectResult.CONNECTED
    assert fake.is_open
    assert fake.port == "/dev/ttyACM0"
    assert fake.baudrate == 9600
    assert board.port_name == "/dev/ttyACM0"


def test_connect_without_board():
    board = Arduino(FakeSerial)
    with mock.patch("serial.tools.list_ports.comports", return_value=[OTHER]):
        result = board.connect()
    assert result is ConnectResult.NOT_AVAILABLE
    assert result == -1
    assert board.port_name == ""


def test_connect_when_port_cannot_open():
    board = Arduino(lambda: FakeSerial(fail_open=True))
    with mock.patch("serial.tools.list_ports.comports", return_value=[UNO]):
        result = board.connect()
    assert result is ConnectResult.NOT_OPENED
    assert result == 1


def test_close_reports_whether_open():
    fake = FakeSerial()
    board = Arduino(lambda: fake)
    assert board.close() is False
    fake.open()
    assert board.close() is True
    assert fake.is_open is False


def test_write_appends_newline():
    fake = FakeSerial()
    fake.open()
    board = Arduino(lambda: fake)
    assert board.write("not found") is True
    assert b"".join(fake.written) == b"not found\n"


def test_write_fails_when_closed():
    fake = FakeSerial()
    board = Arduino(lambda: fake)
    assert board.write(b"hello") is False
    assert fake.written == []


def test_read_drains_buffer():
    fake = FakeSerial(incoming=b"Anatomy")
    fake.open()
    board = Arduino(lambda: fake)
    assert board.read() == b"Anatomy"
    assert board.read() == b""


def test_read_when_closed_is_empty():
    board = Arduino(lambda: FakeSerial(incoming=b"data"))
    assert board.read() == b""