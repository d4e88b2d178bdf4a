"""Lambda handlers for Horizon Forecaster API."""

from .api_handler import api_handler

__all__ = ["api_handler"]
