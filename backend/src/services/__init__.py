"""Services for Horizon Forecaster backend."""

from .forecast_quality_service import ForecastQualityService, compute_quality
from .scoring_engine import WeightedQualityEngine

__all__ = [
    "ForecastQualityService",
    "WeightedQualityEngine",
    "compute_quality",
]
