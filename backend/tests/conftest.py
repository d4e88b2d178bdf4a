"""Pytest configuration and shared fixtures."""

import pytest

from models.forecast import DailySunTable, WeatherBundle
from models.scoring import ScoringAlgorithm

BASE_TIME = 1_700_000_000  # 2023-11-14T22:13:20Z
HOUR = 3600
DAY = 86400
HOURS = 48


def hourly_times(count: int = HOURS, start: int = BASE_TIME) -> list[int]:
    return [start + i * HOUR for i in range(count)]


def constant_bundle(count: int = HOURS, **values: float) -> WeatherBundle:
    """Bundle whose series hold the same value at every hour."""
    return WeatherBundle(
        time=hourly_times(count),
        series={name: [value] * count for name, value in values.items()},
    )


IDEAL_CONDITIONS = {
    "cloudcover_high": 40.0,
    "cloudcover_mid": 20.0,
    "cloudcover_low": 10.0,
    "relativehumidity_150hPa": 3.0,
    "relativehumidity_500hPa": 15.0,
    "relativehumidity_1000hPa": 40.0,
    "visibility": 20000.0,
}

OVERCAST_CONDITIONS = {
    "cloudcover_high": 100.0,
    "cloudcover_mid": 100.0,
    "cloudcover_low": 100.0,
    "relativehumidity_150hPa": 100.0,
    "relativehumidity_500hPa": 100.0,
    "relativehumidity_1000hPa": 100.0,
    "visibility": 2000.0,
}


@pytest.fixture
def ideal_bundle():
    """Broken high cloud, little low/mid cloud, humidity at optimum, clear air."""
    return constant_bundle(**IDEAL_CONDITIONS)


@pytest.fixture
def overcast_bundle():
    """Full overcast, saturated air, poor visibility."""
    return constant_bundle(**OVERCAST_CONDITIONS)


@pytest.fixture
def daily_table():
    """Three days starting at BASE_TIME; sunrise 06:00 and sunset 18:00 after day start."""
    days = [BASE_TIME + i * DAY for i in range(3)]
    return DailySunTable(
        time=days,
        sunrise=[day + 6 * HOUR for day in days],
        sunset=[day + 18 * HOUR for day in days],
    )


@pytest.fixture
def open_meteo_payload(daily_table):
    """Open-Meteo style response covering the daily table's three days."""
    count = 3 * 24
    hourly = {"time": hourly_times(count)}
    for name, value in IDEAL_CONDITIONS.items():
        hourly[name] = [value] * count
    # Unrequested/unavailable variables come back as all-null series
    hourly["windspeed_80m"] = [None] * count
    return {
        "latitude": 49.25,
        "longitude": -123.1,
        "timezone": "GMT",
        "hourly": hourly,
        "daily": {
            "time": list(daily_table.time),
            "sunrise": list(daily_table.sunrise),
            "sunset": list(daily_table.sunset),
        },
    }


@pytest.fixture
def scoring_algorithm():
    """Default scoring algorithm configuration."""
    return ScoringAlgorithm()
