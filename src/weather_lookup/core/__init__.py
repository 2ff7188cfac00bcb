"""Core business logic package.

This package contains the pure business logic separated from UI concerns.
"""

from .app import WeatherApp
from .forecast import aggregate, parse_forecast_samples, weekly_overview
from .models import CurrentWeather, DailySummary, Location, RawSample
from .exceptions import WeatherAppError

__all__ = [
    "WeatherApp",
    "aggregate",
    "parse_forecast_samples",
    "weekly_overview",
    "CurrentWeather",
    "DailySummary",
    "Location",
    "RawSample",
    "WeatherAppError",
]
