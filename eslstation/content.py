"""Content modes, display geometry and the small formatters used to build tag content."""

from __future__ import annotations

import enum
import json
import re
from dataclasses import dataclass
from datetime import datetime
from email.utils import formatdate
from pathlib import Path
from typing import Any, Optional

NFC_TLV_NDEF = 0x03
NFC_RECORD_HEADER = 0xD1
NFC_WELL_KNOWN = 0x01
NFC_URI_RECORD = 0x55
NFC_URI_NO_PREFIX = 0x00
NFC_TLV_TERMINATOR = 0xFE

LUT_MAX_VALUES = 76
_LUT_DELIMITERS = re.compile(r"[, \t]+")
_HEX_NUMBER = re.compile(r"\s*([+-]?)(0[xX](?=[0-9a-fA-F]))?([0-9a-fA-F]*)")
_LONG_MAX = 0x7FFFFFFF
_LONG_MIN = -0x80000000

_UNRESERVED = frozenset(b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_.~")


class ContentMode(enum.IntEnum):
    IMAGE = 0
    TODAY = 1
    COUNT_DAYS = 2
    COUNT_HOURS = 3
    WEATHER = 4
    FIRMWARE = 5
    MEMO = 6
    IMAGE_URL = 7
    FORECAST = 8
    RSS_FEED = 9
    QR_CODE = 10
    CALENDAR = 11
    REMOTE_AP = 12
    SEG_STATIC = 13
    NFC_URL = 14
    GRAY_LUT = 15
    BUIENRADAR = 16
    TAG_COMMAND = 17
    TAG_CONFIG = 18


@dataclass(frozen=True)
class Display:
    """Screen geometry of a tag; base_type selects the content template."""

    base_type: int
    width: int
    height: int


_DISPLAYS = {
    0: Display(0, 152, 152),
    1: Display(1, 296, 128),
    2: Display(2, 400, 300),
    17: Display(1, 296, 128),
}


def display_for(hw_type: int) -> Display:
    """Screen geometry for a hardware type."""
    try:
        return _DISPLAYS[int(hw_type)]
    except KeyError:
        raise ValueError(f"unknown display hardware type: {hw_type:#x}") from None


def url_encode(msg: str) -> str:
    """Percent-encode everything but unreserved characters, byte by byte in UTF-8."""
    return "".join(
        chr(byte) if byte in _UNRESERVED else f"%{byte:02X}" for byte in msg.encode("utf-8")
    )


def format_http_date(t: float) -> str:
    """An HTTP date in GMT for a unix timestamp."""
    return formatdate(t, usegmt=True)


def epoch_to_display(utc: float, now: Optional[float] = None) -> str:
    """Short local label for an event start: "HH:MM" today or later, else "DD-MM".

    Events starting exactly at midnight are shown by date as well.
    """
    event = datetime.fromtimestamp(utc)
    current = datetime.fromtimestamp(now) if now is not None else datetime.now()
    earlier_day = (event.year, event.month, event.day) < (current.year, current.month, current.day)
    if earlier_day or (event.hour == 0 and event.minute == 0):
        return event.strftime("%d-%m")
    return event.strftime("%H:%M")


def nfc_url_payload(url: str) -> bytes:
    """NDEF TLV memory content holding a single URI record."""
    raw = url.encode("utf-8")
    length = len(raw)
    if length + 5 > 0xFF:
        raise ValueError(f"url too long for a short NDEF record: {length} bytes")
    return (
        bytes(
            [
                NFC_TLV_NDEF,
                4 + length + 1,
                NFC_RECORD_HEADER,
                NFC_WELL_KNOWN,
                length + 1,
                NFC_URI_RECORD,
                NFC_URI_NO_PREFIX,
            ]
        )
        + raw
        + bytes([NFC_TLV_TERMINATOR])
    )


def _parse_hex(token: str) -> int:
    match = _HEX_NUMBER.match(token)
    sign, _, digits = match.groups()
    value = int(digits, 16) if digits else 0
    if sign == "-":
        value = -value
    value = max(_LONG_MIN, min(_LONG_MAX, value))
    return value & 0xFF


def parse_lut_bytes(text: str) -> bytes:
    """Parse hex byte values separated by commas, spaces or tabs into a LUT.

    At most 76 values are read; the result is always 76 bytes, zero-padded.
    """
    tokens = [token for token in _LUT_DELIMITERS.split(text) if token]
    values = [_parse_hex(token) for token in tokens[:LUT_MAX_VALUES]]
    return bytes(values).ljust(LUT_MAX_VALUES, b"\x00")


def segments_for_number(count: int, hours: bool) -> tuple[str, int]:
    """Segment text and symbol bits for a day or hour counter."""
    if count > 19999:
        return "over  flow", 0x00
    symbols = 0x00
    if count > 9999:
        symbols = 0x02
        text = f"{count - 10000:04d}"
    else:
        text = f"{count:4d}"
    return text + ("  hour" if hours else "  days"), symbols


def segments_for_date(day: int, month: int, weekday: str, year: int) -> tuple[str, int]:
    """Segment text and symbol bits for a date; month is 1-based."""
    return f"{day:2d}{month:2d}{weekday[:2]:<2}{year:04d}", 0x04


def segments_static(line1: Optional[str], line2: Optional[str], line3: Optional[str]) -> str:
    """Fixed segment text: four, two and four characters, space padded."""
    return f"{(line1 or '')[:4]:<4}{(line2 or '')[:2]:<2}{(line3 or '')[:4]:<4}"


def load_template(path, template_id: int, base_type: int) -> Any:
    """The layout for a content type and display base type, or None if absent."""
    text = Path(path).read_text(encoding="utf-8")
    try:
        document = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValueError(f"json error in template {path}: {exc}") from exc
    if not isinstance(document, dict):
        return None
    by_type = document.get(str(template_id))
    if not isinstance(by_type, dict):
        return None
    return by_type.get(str(base_type))