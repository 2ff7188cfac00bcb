"""Custom exceptions for the Weather Lookup application."""


class WeatherAppError(Exception):
    """Base exception for Weather Lookup application."""

    def __init__(self, message: str, cause: Exception = None):
        super().__init__(message)
        self.cause = cause


class WeatherAPIError(WeatherAppError):
    """Exception raised when weather API requests fail."""
    pass


class CityNotFoundError(WeatherAPIError):
    """Exception raised when the weather API does not know the searched city."""
    pass


class LocationError(WeatherAppError):
    """Exception raised for geolocation errors."""
    pass


class StorageError(WeatherAppError):
    """Exception raised when local storage cannot be written."""
    pass


class ConfigError(WeatherAppError):
    """Exception raised for configuration-related errors."""
    pass
