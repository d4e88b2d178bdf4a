"""Utility functions for Horizon Forecaster."""

from .config_loader import load_scoring_algorithm
from .time_index import InvalidArgumentError, nearest_index

__all__ = [
    "InvalidArgumentError",
    "load_scoring_algorithm",
    "nearest_index",
]
