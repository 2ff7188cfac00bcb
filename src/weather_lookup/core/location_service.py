"""
Core location service module.

Finds where the device is. There is no GPS on a terminal, so the
position comes from IP geolocation and is refined with reverse geocoding.
"""

import logging
from json.decoder import JSONDecodeError

import geopy
import requests
from geopy.geocoders import Nominatim
from geopy.exc import (
    GeocoderTimedOut,
    GeocoderServiceError,
    GeocoderUnavailable,
)

from .exceptions import LocationError
from .models import Location

logger = logging.getLogger(__name__)

IP_GEOLOCATION_URL = "https://ipinfo.io/json"
FALLBACK_ADDRESS = "Approximate location based on IP"


class LocationService:
    """Core location service for device geolocation."""

    def __init__(self, timeout: int = 10):
        self.timeout = timeout
        self.geolocator = Nominatim(user_agent="weather_lookup", timeout=timeout)
        geopy.adapters.BaseAdapter.session = requests.Session()

    def validate_coordinates(self, lat: float, lon: float) -> bool:
        """Validate latitude and longitude values."""
        return -90 <= lat <= 90 and -180 <= lon <= 180

    def reverse_geocode(self, lat: float, lon: float) -> str:
        """Return a readable address for coordinates, or a generic label."""
        try:
            result = self.geolocator.reverse((lat, lon), exactly_one=True)
            return result.address if result else FALLBACK_ADDRESS
        except (GeocoderTimedOut, GeocoderUnavailable, GeocoderServiceError) as e:
            logger.warning(f"Reverse geocoding failed: {e}")
            return FALLBACK_ADDRESS

    def get_current_location(self) -> Location:
        """Get approximate current location using IP geolocation."""
        logger.debug("Getting current location...")
        try:
            response = requests.get(IP_GEOLOCATION_URL, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
            lat, lon = map(float, data["loc"].split(","))

        except requests.exceptions.Timeout as e:
            logger.error(f"Error getting current location from IP, Connection timed out: {e}")
            raise LocationError(
                "Failed to get your current location, Request timed out. Please check your network connection.", e
            )
        except requests.exceptions.ConnectionError as e:
            logger.error(f"Error getting current location from IP, Connection error: {e}")
            raise LocationError(
                "Failed to get your current location, Network error. Please check your connection and try again.", e
            )
        except (requests.exceptions.RequestException, JSONDecodeError) as e:
            logger.exception(f"Error getting current location: {e}")
            raise LocationError("Could not get current location.", e)
        except (KeyError, ValueError, AttributeError) as e:
            logger.error(f"Unexpected IP geolocation response: {e}")
            raise LocationError("Could not get current location.", e)

        if not self.validate_coordinates(lat, lon):
            logger.error(f"IP geolocation returned invalid coordinates: {lat}, {lon}")
            raise LocationError("Could not get current location.")

        return Location("Current location", lat, lon, self.reverse_geocode(lat, lon))
