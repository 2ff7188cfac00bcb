"""
Core application orchestrator.

This module provides the main application class that orchestrates
all core services and provides a unified interface for the UI layers.
"""

import logging
from datetime import datetime
from typing import List, Optional

from .config_service import ConfigService
from .exceptions import LocationError
from .forecast import aggregate
from .location_service import LocationService
from .models import CurrentWeather, DailySummary
from .storage_service import KeyValueStore, WeatherStore
from .weather_service import WeatherService

logger = logging.getLogger(__name__)


class WeatherApp:
    """Core application class that orchestrates all services."""

    def __init__(self, config: Optional[ConfigService] = None):
        """Initialize the weather application."""
        self.config = config or ConfigService()
        self.weather_service = WeatherService(self.config.api_key)
        self.location_service = LocationService()
        self.store = WeatherStore(KeyValueStore(self.config.data_dir))

    # Weather-related methods
    def search_city(self, city: str) -> CurrentWeather:
        """Get current weather for a city and remember the search."""
        weather = self.weather_service.get_current_weather_by_city(city)
        self.store.save_weather(weather)
        # The API resolves "paris " or "PARIS" to its canonical name
        self.store.add_recent_search(weather.city or city)
        logger.debug(f"Weather for '{weather.city}' fetched and saved")
        return weather

    def weather_at_coordinates(self, lat: float, lon: float) -> CurrentWeather:
        """Get current weather for coordinates."""
        if not self.location_service.validate_coordinates(lat, lon):
            raise LocationError("Invalid coordinates")
        weather = self.weather_service.get_current_weather_by_coords(lat, lon)
        self.store.save_weather(weather)
        return weather

    def weather_at_current_location(self) -> CurrentWeather:
        """Get current weather where the device is."""
        location = self.location_service.get_current_location()
        return self.weather_at_coordinates(location.latitude, location.longitude)

    def last_weather(self) -> Optional[CurrentWeather]:
        """Get the last viewed current weather, if any."""
        return self.store.load_weather()

    def get_forecast(
        self,
        current: Optional[CurrentWeather] = None,
        reference: Optional[datetime] = None,
    ) -> List[DailySummary]:
        """Get the daily forecast for a city's weather record.

        Uses the last viewed weather when ``current`` is not given. Returns an
        empty list when there is nothing to forecast for.
        """
        if current is None:
            current = self.last_weather()
        if current is None:
            logger.debug("No weather data saved, nothing to forecast")
            return []

        samples = self.weather_service.get_forecast_samples(current.latitude, current.longitude)
        if reference is None:
            # "today" as seen in the queried city, not on this machine
            reference = datetime.now(current.city_timezone)
        return aggregate(samples, reference)

    # Recent search methods
    def recent_searches(self) -> List[str]:
        """Get recent city searches, most recent first."""
        return self.store.load_recent_searches()

    def clear_recent_searches(self) -> None:
        """Forget recent city searches."""
        self.store.clear_recent_searches()

    # Utility methods
    def clear_storage(self) -> int:
        """Delete the saved weather and search history."""
        return self.store.store.clear()

    def clear_logs(self) -> None:
        """Clear application logs."""
        for file in self.config.log_dir.iterdir():
            if file.is_file():
                file.unlink()
        logger.debug("Cleared logs successfully.")
