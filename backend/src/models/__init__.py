"""Data models for Horizon Forecaster."""

from .forecast import (
    DailySunTable,
    ForecastResult,
    QualityAssessment,
    SunEvent,
    SunEventType,
    ViewingQuality,
    WeatherBundle,
)
from .scoring import ScoringAlgorithm

__all__ = [
    "WeatherBundle",
    "DailySunTable",
    "SunEvent",
    "SunEventType",
    "ViewingQuality",
    "QualityAssessment",
    "ForecastResult",
    "ScoringAlgorithm",
]
