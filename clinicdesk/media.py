"""Media player helpers: the time label, playback rates, volume and frame capture."""

from __future__ import annotations

from typing import Callable

MUTE_ICON = ":/Resources/ui_icons/Mute_48px.png"
VOICE_ICON = ":/Resources/ui_icons/Voice_48px.png"
DEFAULT_VOLUME = 50

INCORRECT_FORMAT_ERROR = "IncorrectFormatError"

# Pixel formats the frame grabber accepts for frames held in plain memory.
SUPPORTED_PIXEL_FORMATS = (
    "RGB32",
    "ARGB32",
    "ARGB32_PREMULTIPLIED",
    "RGB565",
    "RGB555",
)

# Pixel formats that can be turned straight into an image.
_IMAGE_PIXEL_FORMATS = frozenset(SUPPORTED_PIXEL_FORMATS) | {
    "RGB24",
    "ARGB8565_PREMULTIPLIED",
    "Y8",
    "Y16",
}

_PLAYBACK_RATES = {0: 1.0, 1: 0.5, 2: 2.0}


def _trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(a) // abs(b)
    return quotient if (a >= 0) == (b >= 0) else -quotient


def _two_digits(value: int) -> str:
    return str(value) if value > 9 else f"0{value}"


def format_duration(milliseconds: int) -> str:
    """The end-time label for a duration, as '00:MM:SS'.

    Whole hours are folded away and never shown: the label always opens
    with '00:'.
    """
    seconds = _trunc_div(int(milliseconds), 1000)
    minutes = _trunc_div(seconds, 60)
    if minutes > 0:
        seconds -= minutes * 60
        hours = _trunc_div(minutes, 60)
        if hours > 0:
            minutes -= hours * 60
    else:
        minutes = 0
    return f"00:{_two_digits(minutes)}:{_two_digits(seconds)}"


def playback_rate(index: int) -> float:
    """The playback rate chosen by the rate box entry; 0.0 for unknown entries."""
    return _PLAYBACK_RATES.get(index, 0.0)


def _image_ready(pixel_format: str, width: int, height: int) -> bool:
    return pixel_format in _IMAGE_PIXEL_FORMATS and width > 0 and height > 0


def is_format_supported(pixel_format: str, width: int, height: int) -> bool:
    """Whether frames of this format and size can be turned into images."""
    return _image_ready(pixel_format, width, height)


class FrameGrabber:
    """A video surface that keeps the first frame it is shown.

    Once a frame has been captured, every later frame hands the captured
    one to ``on_frame`` until ``clear`` drops it.
    """

    def __init__(self) -> None:
        self.on_frame: Callable[[bytes], None] | None = None
        self.captured: bytes | None = None
        self.surface_format: tuple[str, int, int] | None = None
        self.active = False
        self.error: str | None = None

    def start(self, pixel_format: str, width: int, height: int) -> bool:
        """Begin accepting frames of the given format; False if it is unusable."""
        if not _image_ready(pixel_format, width, height):
            return False
        self.surface_format = (pixel_format, width, height)
        self.active = True
        self.error = None
        return True

    def present(self, pixel_format: str, width: int, height: int, data: bytes) -> bool:
        """Show one frame; a frame that does not match the surface stops it."""
        if self.surface_format != (pixel_format, width, height):
            self.error = INCORRECT_FORMAT_ERROR
            self.stop()
            return False
        if self.captured is not None and self.on_frame is not None:
            self.on_frame(self.captured)
        if self.captured is None:
            self.captured = bytes(data)
        return True

    def clear(self) -> None:
        """Drop the captured frame so the next one is kept."""
        self.captured = None

    def stop(self) -> None:
        """Stop accepting frames and forget the surface format."""
        self.active = False
        self.surface_format = None


class PlayerControls:
    """Volume state of the player and the icon that goes with it."""

    def __init__(self) -> None:
        self.volume = 0
        self.set_volume(DEFAULT_VOLUME)

    def set_volume(self, value: int) -> None:
        """Set the volume, kept within 0 to 100."""
        self.volume = max(0, min(100, int(value)))

    def mute(self) -> None:
        self.set_volume(0)

    def volume_icon(self) -> str:
        """The mute icon when silent, the voice icon otherwise."""
        return MUTE_ICON if self.volume == 0 else VOICE_ICON