"""
Core weather service module.

This module talks to the OpenWeatherMap API. Every request is made with
metric units, so temperatures leaving this module are always Celsius.
"""

import logging
from typing import Dict, List

import requests

from .exceptions import CityNotFoundError, ConfigError, WeatherAPIError, WeatherAppError
from .forecast import parse_forecast_samples
from .models import CurrentWeather, RawSample

logger = logging.getLogger(__name__)

BASE_URL = "https://api.openweathermap.org/data/2.5"
CURRENT_WEATHER_URL = f"{BASE_URL}/weather"
FORECAST_URL = f"{BASE_URL}/forecast"
UNITS = "metric"


class WeatherService:
    """Core weather service for fetching and parsing weather data."""

    def __init__(self, api_key: str, timeout: int = 10):
        self.api_key = api_key
        self.timeout = timeout

    def _request(self, url: str, params: Dict, what: str, city_search: bool = False) -> Dict:
        """Send a GET request to the API and return the decoded JSON body.

        A 404 means an unknown city only for city searches; for coordinate
        lookups it is reported as unavailable data.
        """
        if not self.api_key:
            raise ConfigError("OpenWeatherMap API key is missing. Set OWM_API_KEY in your .env file.")

        query = dict(params, units=UNITS, appid=self.api_key)
        try:
            logger.debug(f"Fetching {what}")
            response = requests.get(url, params=query, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
            logger.debug(f"Data for {what} fetched successfully.")
            return data

        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            if status == 404 and city_search:
                logger.error(f"Failed to fetch {what}. City not found.")
                raise CityNotFoundError("City not found. Please check the spelling and try again.", e)
            elif status == 404:
                logger.error(f"Failed to fetch {what}. Location not found.")
                raise WeatherAPIError("Weather data not available for this location.", e)
            elif status == 401:
                logger.error(f"Failed to fetch {what}. Invalid API key.")
                raise WeatherAPIError("Failed to fetch weather data. Invalid API key.", e)
            else:
                reason = e.response.reason if e.response is not None else e
                logger.error(f"Failed to fetch {what}, HTTP error occurred: {status} {reason}")
                raise WeatherAPIError("Weather data not available.", e)
        except requests.exceptions.Timeout as e:
            logger.error(f"Error fetching {what}, connection timed out: {e}")
            raise WeatherAPIError("Request timed out, Please check your network connection.", e)
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Failed to fetch {what}, connection error: {e}")
            raise WeatherAPIError("Network error, Please check your connection and try again.", e)
        except ValueError as e:
            # requests' JSONDecodeError is both a ValueError and a RequestException
            logger.error(f"Invalid JSON in response for {what}: {e}")
            raise WeatherAPIError("Weather service returned an invalid response.", e)
        except requests.exceptions.RequestException as e:
            logger.exception(f"Error fetching {what}: {e}")
            raise WeatherAPIError("Failed to fetch weather data, Unexpected request error occurred.", e)

    def fetch_current_by_city(self, city: str) -> Dict:
        """Fetch the raw current-weather payload for a city name."""
        if not city or not city.strip():
            raise WeatherAppError("Please enter a city name")
        return self._request(
            CURRENT_WEATHER_URL, {"q": city.strip()}, f"current weather for '{city.strip()}'", city_search=True
        )

    def fetch_current_by_coords(self, lat: float, lon: float) -> Dict:
        """Fetch the raw current-weather payload for coordinates."""
        return self._request(CURRENT_WEATHER_URL, {"lat": lat, "lon": lon}, f"current weather for {lat}, {lon}")

    def fetch_forecast_by_coords(self, lat: float, lon: float) -> Dict:
        """Fetch the raw 5-day / 3-hour forecast payload for coordinates."""
        return self._request(FORECAST_URL, {"lat": lat, "lon": lon}, f"forecast for {lat}, {lon}")

    def parse_current_weather(self, data: Dict) -> CurrentWeather:
        """Parse a current-weather payload."""
        logger.debug("Parsing current weather data")
        try:
            return CurrentWeather.from_dict(data)
        except ValueError as e:
            logger.error(f"Unexpected current weather payload: {e}")
            raise WeatherAPIError("Weather service returned an invalid response.", e)

    def get_current_weather_by_city(self, city: str) -> CurrentWeather:
        """Get current weather for a city name."""
        return self.parse_current_weather(self.fetch_current_by_city(city))

    def get_current_weather_by_coords(self, lat: float, lon: float) -> CurrentWeather:
        """Get current weather for coordinates."""
        return self.parse_current_weather(self.fetch_current_by_coords(lat, lon))

    def get_forecast_samples(self, lat: float, lon: float) -> List[RawSample]:
        """Get the interval forecast samples for coordinates."""
        return parse_forecast_samples(self.fetch_forecast_by_coords(lat, lon))
