"""FastAPI application for sunrise/sunset quality scoring, deployable to Lambda."""

import logging
import os
import time
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from mangum import Mangum
from pydantic import BaseModel, Field

from models.forecast import (
    DailySunTable,
    QualityAssessment,
    WeatherBundle,
)
from services.forecast_quality_service import ForecastQualityService
from utils.config_loader import load_scoring_algorithm

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

# Environment variables
NOTIFY_THRESHOLD = float(os.environ.get("NOTIFY_THRESHOLD", "0.7"))
SUN_EVENT_MARGIN_MINUTES = int(os.environ.get("SUN_EVENT_MARGIN_MINUTES", "30"))
FORECAST_DAYS = int(os.environ.get("FORECAST_DAYS", "7"))

app = FastAPI(
    title="Horizon Forecaster API",
    description="API for predicting sunrise and sunset viewing quality",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
)

CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log API requests with timing."""
    start = time.time()
    response = await call_next(request)
    duration_ms = (time.time() - start) * 1000

    path = request.url.path
    if response.status_code >= 500:
        logger.error(
            "[ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )
    elif response.status_code >= 400:
        logger.info(
            "[CLIENT_ERROR] %s %s %.0fms status=%d",
            request.method,
            path,
            duration_ms,
            response.status_code,
        )

    return response


# Lazy-initialized service; the scoring config is read once per container
_forecast_quality_service = None


def reset_services():
    """Reset lazy-initialized services. Useful for testing."""
    global _forecast_quality_service
    _forecast_quality_service = None


def get_forecast_quality_service() -> ForecastQualityService:
    global _forecast_quality_service
    if _forecast_quality_service is None:
        _forecast_quality_service = ForecastQualityService(load_scoring_algorithm())
    return _forecast_quality_service


# MARK: - Request Models


class QualityRequest(BaseModel):
    """Score one instant against a prepared bundle."""

    bundle: WeatherBundle
    target: int = Field(..., description="UNIX timestamp to score")


class ForecastRequest(BaseModel):
    """An Open-Meteo forecast response (timeformat=unixtime) plus scoring options."""

    hourly: dict[str, Any] = Field(..., description="Open-Meteo hourly block")
    daily: dict[str, Any] = Field(..., description="Open-Meteo daily block")
    now: int | None = Field(None, description="Reference time, defaults to server time")
    threshold: float | None = Field(None, ge=0.0, le=1.0)
    margin_minutes: int | None = Field(None, ge=0)
    days: int | None = Field(None, ge=0, le=16)


# MARK: - Health Check


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "version": "1.0.0",
    }


# MARK: - Quality Endpoints


@app.post("/api/v1/quality", response_model=QualityAssessment)
async def score_quality(request: QualityRequest):
    """Score a single instant and return the ranked breakdown."""
    return get_forecast_quality_service().assess(request.bundle, request.target)


@app.post("/api/v1/forecast")
async def score_forecast(request: ForecastRequest):
    """Score the next sun event and the following days from an Open-Meteo response."""
    bundle = WeatherBundle.from_open_meteo({"hourly": request.hourly})
    daily = DailySunTable.from_open_meteo({"daily": request.daily})

    now = request.now if request.now is not None else int(datetime.now(UTC).timestamp())
    threshold = request.threshold if request.threshold is not None else NOTIFY_THRESHOLD
    margin_minutes = (
        request.margin_minutes
        if request.margin_minutes is not None
        else SUN_EVENT_MARGIN_MINUTES
    )
    days = request.days if request.days is not None else FORECAST_DAYS

    result = get_forecast_quality_service().forecast(
        bundle, daily, now=now, margin_seconds=margin_minutes * 60, days=days
    )
    return {
        **result.model_dump(mode="json"),
        "threshold": threshold,
        "should_notify": result.should_notify(threshold),
    }


# MARK: - Error Handlers


@app.exception_handler(ValueError)
async def value_error_handler(request, exc: ValueError):
    """Handle value errors."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
    )


# MARK: - Lambda Handler

api_handler = Mangum(app, lifespan="off")


# For local development
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
