"""Forecast data models: hourly weather bundles, sun events, and scoring results."""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


# Open-Meteo renamed its variables in 2023; both spellings map to the legacy names.
OPEN_METEO_ALIASES = {
    "cloud_cover": "cloudcover",
    "relative_humidity": "relativehumidity",
}


def _canonical_name(name: str) -> str:
    for alias, canonical in OPEN_METEO_ALIASES.items():
        if name.startswith(alias):
            return canonical + name[len(alias):]
    return name


class WeatherBundle(BaseModel):
    """Hourly forecast series sharing one timestamp axis.

    ``series`` maps an Open-Meteo variable name (e.g. ``cloudcover_high``,
    ``relativehumidity_500hPa``, ``visibility``) to its samples. Sample ``i``
    of every series belongs to ``time[i]``.
    """

    time: list[int] = Field(
        default_factory=list, description="Ascending UNIX timestamps (seconds)"
    )
    series: dict[str, list[float | None]] = Field(
        default_factory=dict, description="Variable name -> hourly samples"
    )

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_lengths(self) -> "WeatherBundle":
        for name, samples in self.series.items():
            if len(samples) != len(self.time):
                raise ValueError(
                    f"Series '{name}' has {len(samples)} samples "
                    f"but time has {len(self.time)}"
                )
        return self

    @classmethod
    def from_open_meteo(cls, payload: dict[str, Any]) -> "WeatherBundle":
        """Build a bundle from an Open-Meteo response fetched with timeformat=unixtime.

        Accepts either the full response or just its ``hourly`` block. Series
        with no usable samples are dropped so they count as missing data.
        """
        hourly = payload.get("hourly", payload)
        times = hourly.get("time") or []
        series = {}
        for name, samples in hourly.items():
            if name == "time" or not isinstance(samples, list):
                continue
            if all(sample is None for sample in samples):
                continue
            series[_canonical_name(name)] = samples
        return cls(time=times, series=series)

    @property
    def variables(self) -> list[str]:
        """Names of the series present in this bundle."""
        return list(self.series.keys())

    def __len__(self) -> int:
        return len(self.time)


class SunEventType(str, Enum):
    """Kinds of sun event that can be scored."""

    SUNRISE = "sunrise"
    SUNSET = "sunset"


class DailySunTable(BaseModel):
    """Daily sunrise/sunset instants, one entry per forecast day."""

    time: list[int] = Field(..., description="Day start as UNIX timestamp")
    sunrise: list[int] = Field(..., description="Sunrise instant per day")
    sunset: list[int] = Field(..., description="Sunset instant per day")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_lengths(self) -> "DailySunTable":
        if not (len(self.time) == len(self.sunrise) == len(self.sunset)):
            raise ValueError("Daily time, sunrise and sunset must have equal lengths")
        return self

    @classmethod
    def from_open_meteo(cls, payload: dict[str, Any]) -> "DailySunTable":
        """Build the table from the ``daily`` block of an Open-Meteo response."""
        daily = payload.get("daily", payload)
        return cls(
            time=daily.get("time") or [],
            sunrise=daily.get("sunrise") or [],
            sunset=daily.get("sunset") or [],
        )

    def events_for_day(self, day_index: int) -> list["SunEvent"]:
        """Sunrise then sunset for the given day."""
        return [
            SunEvent(
                type=SunEventType.SUNRISE,
                timestamp=self.sunrise[day_index],
                day=self.time[day_index],
            ),
            SunEvent(
                type=SunEventType.SUNSET,
                timestamp=self.sunset[day_index],
                day=self.time[day_index],
            ),
        ]


class SunEvent(BaseModel):
    """A single sunrise or sunset."""

    type: SunEventType
    timestamp: int = Field(..., description="Event instant as UNIX timestamp")
    day: int = Field(..., description="Day the event belongs to (UNIX timestamp)")

    model_config = ConfigDict(use_enum_values=True)


class ViewingQuality(str, Enum):
    """Viewing quality levels for a sunrise or sunset."""

    EXCELLENT = "excellent"  # Vivid colour likely, broken high cloud over clear horizon
    GOOD = "good"
    FAIR = "fair"
    POOR = "poor"
    BAD = "bad"  # Overcast, saturated or hazy
    UNKNOWN = "unknown"  # No scoreable data


# Rating descriptions for UI info indicators
VIEWING_QUALITY_EXPLANATIONS: dict[ViewingQuality, dict[str, str]] = {
    ViewingQuality.EXCELLENT: {
        "title": "Excellent",
        "description": "High cloud to catch the light, a clear horizon and dry air. Worth getting up for.",
    },
    ViewingQuality.GOOD: {
        "title": "Good",
        "description": "Some colour likely. Conditions are close to ideal in most layers.",
    },
    ViewingQuality.FAIR: {
        "title": "Fair",
        "description": "A visible sun with modest colour. One or more layers are off their ideal.",
    },
    ViewingQuality.POOR: {
        "title": "Poor",
        "description": "Clear and flat, or mostly blocked by low and mid cloud.",
    },
    ViewingQuality.BAD: {
        "title": "Bad",
        "description": "Overcast, saturated or hazy. Little chance of seeing the sun.",
    },
    ViewingQuality.UNKNOWN: {
        "title": "Unknown",
        "description": "No cloud, humidity or visibility data was available for this time.",
    },
}


class BreakdownItem(BaseModel):
    """Contribution of one quality family to the final score."""

    key: str = Field(..., description="Quality family identifier")
    weight: float = Field(..., description="Weight used for this family")
    score: float = Field(..., ge=0.0, le=1.0, description="Family score 0-1")
    share: float = Field(
        ..., ge=0.0, le=1.0, description="Portion of the final score from this family"
    )
    details: dict[str, float] = Field(
        default_factory=dict, description="Per-band or per-level scores"
    )


class QualityAssessment(BaseModel):
    """Quality score for one target instant, with its ranked breakdown."""

    target: int = Field(..., description="Scored instant as UNIX timestamp")
    score: float = Field(..., ge=0.0, le=1.0, description="Viewing quality 0-1")
    quality: ViewingQuality = Field(
        default=ViewingQuality.UNKNOWN, description="Score bucketed into a rating"
    )
    breakdown: list[BreakdownItem] = Field(
        default_factory=list, description="Families ranked by share, highest first"
    )
    explanation: list[str] = Field(
        default_factory=list, description="Human-readable reasoning"
    )
    conditions: dict[str, float] = Field(
        default_factory=dict, description="Window-averaged variable values at the target"
    )

    model_config = ConfigDict(use_enum_values=True)

    @property
    def score_percent(self) -> int:
        """Score on a 0-100 scale."""
        return round(self.score * 100)


class EventForecast(BaseModel):
    """Quality forecast for a specific sun event."""

    event: SunEvent
    quality: float = Field(..., ge=0.0, le=1.0)


class ForecastResult(BaseModel):
    """Current event assessment plus the upcoming week of events."""

    current: EventForecast
    assessment: QualityAssessment
    upcoming: list[EventForecast] = Field(default_factory=list)

    def should_notify(self, threshold: float) -> bool:
        """Whether the current event meets a user's notify threshold."""
        return meets_threshold(self.current.quality, threshold)

    @property
    def best_upcoming(self) -> EventForecast | None:
        """Highest scoring upcoming event, earliest first on ties."""
        if not self.upcoming:
            return None
        return max(self.upcoming, key=lambda f: (f.quality, -f.event.timestamp))


def meets_threshold(score: float, threshold: float) -> bool:
    """Return True when a score reaches the notify threshold."""
    return score >= threshold
