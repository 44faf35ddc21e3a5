import pytest

from eslstation.weather import (
    RAIN_ENTRIES,
    RAIN_LEVEL_MAX,
    RAIN_LEVEL_MIN,
    current_weather_url,
    forecast_url,
    geocode_url,
    is_severe,
    normalize_weather_code,
    parse_buienradar,
    segments_for_weather,
    weather_icon,
    weather_text,
    wind_direction_icon,
    wind_speed_to_beaufort,
)


@pytest.mark.parametrize(
    "speed, expected",
    [(0.0, 0), (0.3, 1), (1.5, 2), (3.3, 3), (5.5, 4), (8, 5), (10.8, 6), (32.7, 12), (60.0, 12)],
)
def test_beaufort_thresholds(speed, expected):
    assert wind_speed_to_beaufort(speed) == expected


def test_beaufort_is_monotonic():
    values = [wind_speed_to_beaufort(s / 10) for s in range(0, 400)]
    assert values == sorted(values)


def test_wind_direction_sectors():
    assert wind_direction_icon(0) == "\uf044"
    assert wind_direction_icon(45) == "\uf043"
    assert wind_direction_icon(359) == "\uf044"


def test_wind_direction_rejects_negative():
    with pytest.raises(ValueError):
        wind_direction_icon(-10)


def test_normalize_weather_code():
    assert normalize_weather_code(3) == 3
    assert normalize_weather_code(40) == 40
    assert normalize_weather_code(45) == 5
    assert normalize_weather_code(99) == 59


def test_weather_icon_day_and_night():
    assert weather_icon(0, True) == "\uf00d"
    assert weather_icon(0, False) == "\uf02e"
    assert weather_icon(3, False) == weather_icon(3, True)


def test_weather_text_and_range():
    assert weather_text(normalize_weather_code(45)) == "FOG"
    assert weather_text(normalize_weather_code(95)) == "STRM"
    with pytest.raises(ValueError):
        weather_text(60)


def test_is_severe():
    assert is_severe(55)
    assert not is_severe(3)


def test_segments_for_weather_shape():
    segments, symbols = segments_for_weather(21.5, 3, 0)
    assert segments == "215^ 3sun "
    assert symbols == 0x04
    segments, symbols = segments_for_weather(-12.0, 4, 3)
    assert segments.startswith("-12^")
    assert segments.endswith("CLDY")
    assert symbols == 0x00


def test_geocode_url_encodes_location():
    url = geocode_url("Den Haag")
    assert "name=Den%20Haag&count=1" in url
    assert " " not in url


def test_weather_urls_carry_location():
    assert "latitude=52.5&longitude=13.4" in current_weather_url("52.5", "13.4", "Europe/Berlin")
    assert "current_weather=true" in current_weather_url("1", "2", "UTC")
    url = forecast_url("1", "2", "UTC")
    assert "timeformat=unixtime" in url
    assert url.endswith("timezone=UTC")


def test_parse_buienradar_entries():
    text = "077|12:00\r\n200|12:05\r\n000|12:10\r\n"
    samples = parse_buienradar(text)
    assert len(samples) == RAIN_ENTRIES
    assert samples[0].level == 77
    assert samples[0].time == "12:00"
    assert samples[0].labelled
    assert samples[1].level == RAIN_LEVEL_MAX
    assert not samples[1].labelled
    assert samples[2].level == RAIN_LEVEL_MIN


def test_parse_buienradar_levels_within_bounds():
    samples = parse_buienradar("garbage")
    assert all(RAIN_LEVEL_MIN <= s.level <= RAIN_LEVEL_MAX for s in samples)