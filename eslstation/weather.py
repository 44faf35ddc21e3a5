"""Weather helpers: wind scales, icon and text tables, service URLs and rain data."""

from __future__ import annotations

import re
import struct
from dataclasses import dataclass
from urllib.parse import quote

GEOCODE_ENDPOINT = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_ENDPOINT = "https://api.open-meteo.com/v1/forecast"

_BEAUFORT_LIMITS = (0.3, 1.5, 3.3, 5.5, 8, 10.8, 13.9, 17.2, 20.8, 24.5, 28.5, 32.7)

_DIRECTION_ICONS = ("\uf044", "\uf043", "\uf048", "\uf087", "\uf058", "\uf057", "\uf04d", "\uf088")

_WEATHER_ICONS = (
    "\uf00d", "\uf00c", "\uf002", "\uf013", "\uf013", "\uf014", "", "", "\uf014", "", "",
    "\uf01a", "", "\uf01a", "", "\uf01a", "\uf017", "\uf017", "", "", "",
    "\uf019", "", "\uf019", "", "\uf019", "\uf015", "\uf015", "", "", "",
    "\uf01b", "", "\uf01b", "", "\uf01b", "", "\uf076", "", "", "\uf01a",
    "\uf01a", "\uf01a", "", "", "\uf064", "\uf064", "", "", "", "",
    "", "", "", "", "\uf01e", "\uf01d", "", "", "\uf01e",
)

_NIGHT_ICONS = ("\uf02e", "\uf083", "\uf086")

_WEATHER_TEXT = (
    "sun", "sun", "sun", "CLDY", "CLDY", "FOG", "", "", "FOG", "", "",
    "DRZL", "", "DRZL", "", "DRZL", "ice", "ice", "", "", "",
    "rain", "", "rain", "", "rain", "ice", "ice", "", "", "",
    "SNOW", "", "SNOW", "", "SNOW", "", "SNOW", "", "", "rain",
    "rain", "rain", "", "", "SNOW", "SNOW", "", "", "", "",
    "", "", "", "", "STRM", "HAIL", "", "", "HAIL",
)

_SEVERE_CODES = frozenset({55, 65, 75, 82, 86, 95, 99})

RAIN_ENTRIES = 24
RAIN_ENTRY_WIDTH = 11
RAIN_LEVEL_MIN = 60
RAIN_LEVEL_MAX = 170

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


def _f32(value: float) -> float:
    return struct.unpack("<f", struct.pack("<f", value))[0]


def wind_speed_to_beaufort(speed: float) -> int:
    """Beaufort number for a wind speed in metres per second."""
    speed = _f32(speed)
    beaufort = 0
    for number, limit in enumerate(_BEAUFORT_LIMITS, start=1):
        if speed >= _f32(limit):
            beaufort = number
    return beaufort


def wind_direction_icon(degrees: int) -> str:
    """Icon glyph for a wind direction in degrees, in eight 45-degree sectors."""
    degrees = int(degrees)
    if degrees < 0:
        raise ValueError(f"wind direction must not be negative, got {degrees}")
    index = (degrees + 22) // 45
    if index >= len(_DIRECTION_ICONS):
        index = 0
    return _DIRECTION_ICONS[index]


def normalize_weather_code(code: int) -> int:
    """Fold a WMO weather code into the range of the icon and text tables."""
    code = int(code) & 0xFF
    if code > 40:
        code -= 40
    return code


def _table_index(code: int) -> int:
    code = int(code)
    if not 0 <= code < len(_WEATHER_ICONS):
        raise ValueError(f"weather code out of range: {code}")
    return code


def weather_icon(code: int, is_day: bool = True) -> str:
    """Icon glyph for a normalised weather code; clear-sky icons differ at night."""
    index = _table_index(code)
    if not is_day and index < len(_NIGHT_ICONS):
        return _NIGHT_ICONS[index]
    return _WEATHER_ICONS[index]


def weather_text(code: int) -> str:
    """Short text for a normalised weather code, as shown on segmented displays."""
    return _WEATHER_TEXT[_table_index(code)]


def is_severe(code: int) -> bool:
    """Whether a normalised weather code is drawn in red."""
    return int(code) in _SEVERE_CODES


def segments_for_weather(temperature: float, wind: int, weathercode: int) -> tuple[str, int]:
    """Segment text and symbol bits showing temperature, Beaufort wind and weather.

    Above -9.9 degrees the temperature is shown in tenths with the decimal
    point symbol lit.
    """
    text = weather_text(weathercode)[:4].ljust(4)
    if temperature < -9.9:
        return f"{int(temperature):3d}^{wind:2d}{text}", 0x00
    return f"{int(temperature * 10):3d}^{wind:2d}{text}", 0x04


def geocode_url(location: str) -> str:
    """Geocoding lookup URL returning the single best match for a place name."""
    return f"{GEOCODE_ENDPOINT}?name={quote(location, safe='')}&count=1"


def current_weather_url(lat: str, lon: str, tz: str) -> str:
    """URL for the current weather at a location, wind in m/s."""
    return (
        f"{FORECAST_ENDPOINT}?latitude={lat}&longitude={lon}"
        f"&current_weather=true&windspeed_unit=ms&timezone={tz}"
    )


def forecast_url(lat: str, lon: str, tz: str) -> str:
    """URL for the daily forecast at a location, with unix timestamps."""
    return (
        f"{FORECAST_ENDPOINT}?latitude={lat}&longitude={lon}"
        "&daily=weathercode,temperature_2m_max,temperature_2m_min,precipitation_sum,"
        "windspeed_10m_max,winddirection_10m_dominant"
        f"&windspeed_unit=ms&timeformat=unixtime&timezone={tz}"
    )


def _to_int(text: str) -> int:
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else 0


@dataclass(frozen=True)
class RainSample:
    """One rain forecast entry: clamped level, its time, and whether to label it."""

    level: int
    time: str
    labelled: bool


def parse_buienradar(text: str) -> list[RainSample]:
    """Parse the 24 fixed-width "LLL|HH:MM" entries of a rain radar reply."""
    samples = []
    for i in range(RAIN_ENTRIES):
        start = i * RAIN_ENTRY_WIDTH
        level = _to_int(text[start : start + 3]) & 0xFF
        level = max(RAIN_LEVEL_MIN, min(RAIN_LEVEL_MAX, level))
        time = text[start + 4 : start + 9]
        minutes = _to_int(time[3:])
        samples.append(RainSample(level, time, minutes % 15 == 0))
    return samples