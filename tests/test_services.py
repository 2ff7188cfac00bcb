"""
Tests for the core services.

HTTP calls are mocked at requests.get and storage runs in temporary
directories, so these tests need neither network nor API key.
"""

import os
import json
import tempfile
import unittest
from pathlib import Path
from datetime import date, datetime, timedelta, timezone
from unittest.mock import patch, MagicMock, Mock

import requests
import geopy.exc

from weather_lookup.core.app import WeatherApp
from weather_lookup.core.config_service import ConfigService
from weather_lookup.core.exceptions import (
    CityNotFoundError,
    ConfigError,
    LocationError,
    StorageError,
    WeatherAPIError,
    WeatherAppError,
)
from weather_lookup.core.location_service import LocationService, FALLBACK_ADDRESS
from weather_lookup.core.models import CurrentWeather, Location
from weather_lookup.core.storage_service import KeyValueStore, WeatherStore
from weather_lookup.core.weather_service import WeatherService, CURRENT_WEATHER_URL, FORECAST_URL

SAMPLE_CURRENT_RESPONSE = {
    "coord": {"lon": 2.3488, "lat": 48.8534},
    "weather": [{"id": 800, "main": "Clear", "description": "clear sky"}],
    "main": {
        "temp": 18.2,
        "feels_like": 17.5,
        "temp_min": 16.9,
        "temp_max": 19.4,
        "pressure": 1015,
        "humidity": 55,
    },
    "wind": {"speed": 4.1},
    "dt": 1710590400,
    "sys": {"country": "FR", "sunrise": 1710568800, "sunset": 1710611940},
    "timezone": 3600,
    "name": "Paris",
}


def forecast_entry(local_time, temp, humidity=50, wind=5.0, condition_id=800, description="clear sky"):
    timestamp = int(datetime.strptime(local_time, "%Y-%m-%d %H:%M:%S").replace(tzinfo=timezone.utc).timestamp())
    return {
        "dt": timestamp,
        "dt_txt": local_time,
        "main": {"temp": temp, "humidity": humidity, "pressure": 1010},
        "weather": [{"id": condition_id, "description": description}],
        "wind": {"speed": wind},
    }


SAMPLE_FORECAST_RESPONSE = {
    "list": [
        forecast_entry("2024-03-16 09:00:00", 14.0, humidity=70, wind=3.0, condition_id=500, description="light rain"),
        forecast_entry("2024-03-16 12:00:00", 17.6, humidity=60, wind=4.0, condition_id=803, description="broken clouds"),
        forecast_entry("2024-03-17 12:00:00", 21.0, humidity=40, wind=2.0),
        forecast_entry("2024-03-17 15:00:00", 22.4, humidity=44, wind=2.0),
    ]
}


def mock_response(payload=None, status_code=200, reason="OK"):
    """Build a requests response mock."""
    response = Mock()
    response.status_code = status_code
    response.reason = reason
    response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} {reason}", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


class TestWeatherService(unittest.TestCase):
    """Test the WeatherService class."""

    def setUp(self):
        self.weather_service = WeatherService("test_api_key")

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_fetch_current_by_city(self, mock_get):
        mock_get.return_value = mock_response(SAMPLE_CURRENT_RESPONSE)

        result = self.weather_service.fetch_current_by_city("  Paris ")

        self.assertEqual(result, SAMPLE_CURRENT_RESPONSE)
        mock_get.assert_called_once_with(
            CURRENT_WEATHER_URL,
            params={"q": "Paris", "units": "metric", "appid": "test_api_key"},
            timeout=10,
        )

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_fetch_forecast_uses_metric_units(self, mock_get):
        mock_get.return_value = mock_response(SAMPLE_FORECAST_RESPONSE)

        self.weather_service.fetch_forecast_by_coords(48.85, 2.35)

        args, kwargs = mock_get.call_args
        self.assertEqual(args[0], FORECAST_URL)
        self.assertEqual(kwargs["params"]["units"], "metric")
        self.assertEqual(kwargs["params"]["lat"], 48.85)
        self.assertEqual(kwargs["params"]["lon"], 2.35)

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_blank_city_is_rejected_without_request(self, mock_get):
        with self.assertRaisesRegex(WeatherAppError, "Please enter a city name"):
            self.weather_service.fetch_current_by_city("   ")
        mock_get.assert_not_called()

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_city_not_found(self, mock_get):
        mock_get.return_value = mock_response({"cod": "404"}, status_code=404, reason="Not Found")

        with self.assertRaises(CityNotFoundError):
            self.weather_service.fetch_current_by_city("Atlantis")

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_invalid_api_key(self, mock_get):
        mock_get.return_value = mock_response({"cod": 401}, status_code=401, reason="Unauthorized")

        with self.assertRaisesRegex(WeatherAPIError, "Invalid API key"):
            self.weather_service.fetch_current_by_coords(0, 0)

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_server_error(self, mock_get):
        mock_get.return_value = mock_response(None, status_code=503, reason="Service Unavailable")

        with self.assertRaises(WeatherAPIError) as ctx:
            self.weather_service.fetch_forecast_by_coords(0, 0)
        self.assertNotIsInstance(ctx.exception, CityNotFoundError)

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout

        with self.assertRaisesRegex(WeatherAPIError, "Request timed out"):
            self.weather_service.fetch_current_by_city("Paris")

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.exceptions.ConnectionError("offline")

        with self.assertRaisesRegex(WeatherAPIError, "Network error") as ctx:
            self.weather_service.fetch_current_by_city("Paris")
        self.assertIsInstance(ctx.exception.cause, requests.exceptions.ConnectionError)

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_invalid_json(self, mock_get):
        response = mock_response()
        response.json.side_effect = ValueError("No JSON object could be decoded")
        mock_get.return_value = response

        with self.assertRaisesRegex(WeatherAPIError, "invalid response"):
            self.weather_service.fetch_current_by_city("Paris")

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_html_body_is_an_invalid_response(self, mock_get):
        response = requests.Response()
        response.status_code = 200
        response.encoding = "utf-8"
        response._content = b"<html>oops"
        mock_get.return_value = response

        with self.assertRaisesRegex(WeatherAPIError, "invalid response") as ctx:
            self.weather_service.fetch_forecast_by_coords(48.85, 2.35)
        self.assertIsInstance(ctx.exception.cause, ValueError)

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_coordinates_not_found_is_not_a_missing_city(self, mock_get):
        mock_get.return_value = mock_response({"cod": "404"}, status_code=404, reason="Not Found")

        with self.assertRaisesRegex(WeatherAPIError, "not available") as ctx:
            self.weather_service.fetch_current_by_coords(48.85, 2.35)
        self.assertNotIsInstance(ctx.exception, CityNotFoundError)

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_forecast_not_found_is_not_a_missing_city(self, mock_get):
        mock_get.return_value = mock_response({"cod": "404"}, status_code=404, reason="Not Found")

        with self.assertRaises(WeatherAPIError) as ctx:
            self.weather_service.fetch_forecast_by_coords(48.85, 2.35)
        self.assertNotIsInstance(ctx.exception, CityNotFoundError)

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_missing_api_key(self, mock_get):
        service = WeatherService("")

        with self.assertRaises(ConfigError):
            service.fetch_current_by_city("Paris")
        mock_get.assert_not_called()

    def test_parse_current_weather(self):
        weather = self.weather_service.parse_current_weather(SAMPLE_CURRENT_RESPONSE)

        self.assertIsInstance(weather, CurrentWeather)
        self.assertEqual(weather.city, "Paris")
        self.assertEqual(weather.country, "FR")
        self.assertEqual(weather.temperature, 18.2)
        self.assertEqual(weather.humidity, 55)
        self.assertEqual(weather.pressure, 1015)
        self.assertEqual(weather.wind_speed, 4.1)
        self.assertEqual(weather.condition_id, 800)
        self.assertEqual(weather.condition_text, "clear sky")
        self.assertEqual(weather.utc_offset, 3600)
        self.assertEqual(weather.location.to_coordinates(), (48.8534, 2.3488))
        self.assertEqual(weather.to_dict(), SAMPLE_CURRENT_RESPONSE)

    def test_parse_current_weather_invalid(self):
        with self.assertRaises(WeatherAPIError):
            self.weather_service.parse_current_weather({"name": "Paris"})

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_get_forecast_samples(self, mock_get):
        mock_get.return_value = mock_response(SAMPLE_FORECAST_RESPONSE)

        samples = self.weather_service.get_forecast_samples(48.85, 2.35)

        self.assertEqual(len(samples), 4)
        self.assertEqual(samples[0].local_time, "2024-03-16 09:00:00")
        self.assertEqual(samples[0].condition_text, "light rain")


class TestKeyValueStore(unittest.TestCase):
    """Test the KeyValueStore class."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.data_dir = Path(self.temp_dir.name) / "data"
        self.store = KeyValueStore(self.data_dir)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_creates_directory(self):
        self.assertTrue(self.data_dir.is_dir())

    def test_set_and_get(self):
        self.store.set("last_search", '{"name": "Paris"}')

        self.assertEqual(self.store.get("last_search"), '{"name": "Paris"}')

    def test_set_replaces_value(self):
        self.store.set("key", "one")
        self.store.set("key", "two")

        self.assertEqual(self.store.get("key"), "two")
        self.assertEqual(len(list(self.data_dir.iterdir())), 1)

    def test_get_missing_key(self):
        self.assertIsNone(self.store.get("missing"))

    def test_survives_new_instance(self):
        self.store.set("key", "value")

        self.assertEqual(KeyValueStore(self.data_dir).get("key"), "value")

    def test_corrupted_entry_is_removed(self):
        self.store.set("key", "value")
        entry_file = next(self.data_dir.iterdir())
        entry_file.write_text("{not json")

        self.assertIsNone(self.store.get("key"))
        self.assertFalse(entry_file.exists())

    def test_remove(self):
        self.store.set("key", "value")

        self.assertTrue(self.store.remove("key"))
        self.assertFalse(self.store.remove("key"))
        self.assertIsNone(self.store.get("key"))

    def test_clear(self):
        self.store.set("a", "1")
        self.store.set("b", "2")

        self.assertEqual(self.store.clear(), 2)
        self.assertIsNone(self.store.get("a"))

    def test_write_failure_raises_storage_error(self):
        with patch.object(Path, "open", side_effect=PermissionError("read-only")):
            with self.assertRaises(StorageError):
                self.store.set("key", "value")


class TestWeatherStore(unittest.TestCase):
    """Test the WeatherStore class."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.kv_store = KeyValueStore(Path(self.temp_dir.name))
        self.store = WeatherStore(self.kv_store)

    def tearDown(self):
        self.temp_dir.cleanup()

    def test_save_and_load_weather(self):
        weather = CurrentWeather.from_dict(SAMPLE_CURRENT_RESPONSE)

        self.assertTrue(self.store.save_weather(weather))
        loaded = self.store.load_weather()

        self.assertEqual(loaded.city, "Paris")
        self.assertEqual(loaded.to_dict(), SAMPLE_CURRENT_RESPONSE)

    def test_load_weather_when_nothing_saved(self):
        self.assertIsNone(self.store.load_weather())

    def test_load_weather_with_invalid_record(self):
        self.kv_store.set("last_search", json.dumps({"name": "Paris"}))

        self.assertIsNone(self.store.load_weather())

    def test_save_weather_failure_is_reported(self):
        weather = CurrentWeather.from_dict(SAMPLE_CURRENT_RESPONSE)

        with patch.object(self.kv_store, "set", side_effect=StorageError("disk full")):
            self.assertFalse(self.store.save_weather(weather))

    def test_recent_searches_start_empty(self):
        self.assertEqual(self.store.load_recent_searches(), [])

    def test_add_recent_search_normalizes(self):
        self.assertEqual(self.store.add_recent_search("  New York "), ["new york"])
        self.assertEqual(self.store.load_recent_searches(), ["new york"])

    def test_add_recent_search_moves_to_front_without_duplicates(self):
        self.store.add_recent_search("Paris")
        self.store.add_recent_search("London")
        result = self.store.add_recent_search("PARIS")

        self.assertEqual(result, ["paris", "london"])

    def test_recent_searches_are_capped(self):
        for city in ["Oslo", "Rome", "Lima", "Kyiv", "Doha", "Baku"]:
            self.store.add_recent_search(city)

        self.assertEqual(
            self.store.load_recent_searches(),
            ["baku", "doha", "kyiv", "lima", "rome"],
        )

    def test_blank_search_is_ignored(self):
        self.store.add_recent_search("Paris")

        self.assertEqual(self.store.add_recent_search("   "), ["paris"])

    def test_clear_recent_searches(self):
        self.store.add_recent_search("Paris")
        self.store.clear_recent_searches()

        self.assertEqual(self.store.load_recent_searches(), [])

    def test_invalid_recent_searches_entry(self):
        self.kv_store.set("recent_searches", json.dumps({"paris": 1}))

        self.assertEqual(self.store.load_recent_searches(), [])


class TestLocationService(unittest.TestCase):
    """Test the LocationService class."""

    def setUp(self):
        self.location_service = LocationService()
        self.location_service.geolocator = MagicMock()

    @patch("weather_lookup.core.location_service.requests.get")
    def test_get_current_location(self, mock_get):
        mock_get.return_value = mock_response({"loc": "14.5995,120.9842"})
        self.location_service.geolocator.reverse.return_value = Mock(address="Manila, Philippines")

        location = self.location_service.get_current_location()

        self.assertIsInstance(location, Location)
        self.assertEqual(location.name, "Current location")
        self.assertEqual(location.to_coordinates(), (14.5995, 120.9842))
        self.assertEqual(location.address, "Manila, Philippines")

    @patch("weather_lookup.core.location_service.requests.get")
    def test_reverse_geocoding_failure_keeps_coordinates(self, mock_get):
        mock_get.return_value = mock_response({"loc": "14.5995,120.9842"})
        self.location_service.geolocator.reverse.side_effect = geopy.exc.GeocoderTimedOut("timeout")

        location = self.location_service.get_current_location()

        self.assertEqual(location.latitude, 14.5995)
        self.assertEqual(location.address, FALLBACK_ADDRESS)

    @patch("weather_lookup.core.location_service.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.exceptions.Timeout

        with self.assertRaisesRegex(LocationError, "Request timed out"):
            self.location_service.get_current_location()

    @patch("weather_lookup.core.location_service.requests.get")
    def test_unexpected_response(self, mock_get):
        mock_get.return_value = mock_response({"ip": "127.0.0.1"})

        with self.assertRaises(LocationError):
            self.location_service.get_current_location()

    def test_validate_coordinates(self):
        self.assertTrue(self.location_service.validate_coordinates(45, 90))
        self.assertTrue(self.location_service.validate_coordinates(-90, -180))
        self.assertFalse(self.location_service.validate_coordinates(91, 0))
        self.assertFalse(self.location_service.validate_coordinates(0, 181))


class TestConfigService(unittest.TestCase):
    """Test the ConfigService class."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.root_dir = Path(self.temp_dir.name)
        self.env_file = self.root_dir / ".env"

    def tearDown(self):
        self.temp_dir.cleanup()

    @patch.dict(os.environ, {}, clear=True)
    def test_values_from_env_file(self):
        self.env_file.write_text("OWM_API_KEY=abc123\nLOG_LEVEL=debug\nTZ=Asia/Manila\n")

        config = ConfigService(self.root_dir, env_file=self.env_file)

        self.assertEqual(config.api_key, "abc123")
        self.assertEqual(config.log_level, "DEBUG")
        self.assertEqual(config.timezone, "Asia/Manila")

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults(self):
        self.env_file.write_text("")

        config = ConfigService(self.root_dir, env_file=self.env_file)

        self.assertEqual(config.api_key, "")
        self.assertEqual(config.log_level, "ERROR")
        self.assertEqual(config.timezone, "UTC")

    @patch.dict(os.environ, {"OWM_API_KEY": "from-environment"}, clear=True)
    def test_falls_back_to_process_environment(self):
        self.env_file.write_text("")

        config = ConfigService(self.root_dir, env_file=self.env_file)

        self.assertEqual(config.api_key, "from-environment")

    @patch.dict(os.environ, {}, clear=True)
    def test_unknown_log_level(self):
        self.env_file.write_text("LOG_LEVEL=LOUD\n")

        config = ConfigService(self.root_dir, env_file=self.env_file)

        self.assertEqual(config.log_level, "ERROR")

    @patch.dict(os.environ, {}, clear=True)
    def test_creates_directories(self):
        self.env_file.write_text("")

        config = ConfigService(self.root_dir / "app", env_file=self.env_file)

        self.assertTrue(config.data_dir.is_dir())
        self.assertTrue(config.log_dir.is_dir())
        self.assertEqual(config.log_file.name, "weather_lookup.log")

    @patch.dict(os.environ, {}, clear=True)
    def test_home_from_environment_setting(self):
        home = self.root_dir / "custom_home"
        self.env_file.write_text(f"WEATHER_LOOKUP_HOME={home}\n")

        config = ConfigService(env_file=self.env_file)

        self.assertEqual(config.root_dir, home)
        self.assertTrue((home / "data").is_dir())


class TestWeatherApp(unittest.TestCase):
    """Test the WeatherApp orchestrator."""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        root_dir = Path(self.temp_dir.name)
        env_file = root_dir / ".env"
        env_file.write_text("OWM_API_KEY=test_api_key\n")
        self.app = WeatherApp(ConfigService(root_dir, env_file=env_file))

    def tearDown(self):
        self.temp_dir.cleanup()

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_search_city_saves_weather_and_history(self, mock_get):
        mock_get.return_value = mock_response(SAMPLE_CURRENT_RESPONSE)

        weather = self.app.search_city("paris ")

        self.assertEqual(weather.city, "Paris")
        self.assertEqual(self.app.last_weather().city, "Paris")
        self.assertEqual(self.app.recent_searches(), ["paris"])

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_failed_search_changes_nothing(self, mock_get):
        mock_get.return_value = mock_response({"cod": "404"}, status_code=404, reason="Not Found")

        with self.assertRaises(CityNotFoundError):
            self.app.search_city("Atlantis")

        self.assertIsNone(self.app.last_weather())
        self.assertEqual(self.app.recent_searches(), [])

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_weather_at_coordinates_skips_history(self, mock_get):
        mock_get.return_value = mock_response(SAMPLE_CURRENT_RESPONSE)

        self.app.weather_at_coordinates(48.85, 2.35)

        self.assertEqual(self.app.last_weather().city, "Paris")
        self.assertEqual(self.app.recent_searches(), [])

    def test_weather_at_invalid_coordinates(self):
        with self.assertRaises(LocationError):
            self.app.weather_at_coordinates(123.0, 0.0)

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_weather_at_current_location(self, mock_get):
        mock_get.return_value = mock_response(SAMPLE_CURRENT_RESPONSE)
        self.app.location_service = MagicMock()
        self.app.location_service.get_current_location.return_value = Location("Current location", 48.85, 2.35)
        self.app.location_service.validate_coordinates.return_value = True

        weather = self.app.weather_at_current_location()

        self.assertEqual(weather.city, "Paris")
        self.assertEqual(mock_get.call_args[1]["params"]["lat"], 48.85)

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_get_forecast_without_saved_weather(self, mock_get):
        self.assertEqual(self.app.get_forecast(), [])
        mock_get.assert_not_called()

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_get_forecast_for_last_weather(self, mock_get):
        self.app.store.save_weather(CurrentWeather.from_dict(SAMPLE_CURRENT_RESPONSE))
        mock_get.return_value = mock_response(SAMPLE_FORECAST_RESPONSE)

        forecast = self.app.get_forecast(reference=datetime(2024, 3, 15, 22, 0))

        self.assertEqual([day.date for day in forecast], [date(2024, 3, 16), date(2024, 3, 17)])
        first, second = forecast
        self.assertEqual(first.high_temp, 18)
        self.assertEqual(first.low_temp, 14)
        self.assertEqual(first.humidity, 65)
        self.assertEqual(first.wind_speed_kmh, 13)  # 3.5 m/s -> 12.6 km/h
        self.assertEqual(first.condition_text, "broken clouds")
        self.assertEqual(second.high_temp, 22)
        self.assertEqual(second.condition_icon, "weather-sunny")

        params = mock_get.call_args[1]["params"]
        self.assertEqual((params["lat"], params["lon"]), (48.8534, 2.3488))

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_get_forecast_excludes_reference_day(self, mock_get):
        current = CurrentWeather.from_dict(SAMPLE_CURRENT_RESPONSE)
        mock_get.return_value = mock_response(SAMPLE_FORECAST_RESPONSE)

        forecast = self.app.get_forecast(current, reference=datetime(2024, 3, 16, 8, 0))

        self.assertEqual([day.date for day in forecast], [date(2024, 3, 17)])

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_get_forecast_defaults_to_today_in_the_city(self, mock_get):
        current = CurrentWeather.from_dict(SAMPLE_CURRENT_RESPONSE)
        today = datetime.now(timezone(timedelta(seconds=3600))).date()
        mock_get.return_value = mock_response({
            "list": [
                forecast_entry(f"{today - timedelta(days=1)} 21:00:00", 30.0),
                forecast_entry(f"{today} 12:00:00", 25.0),
                forecast_entry(f"{today + timedelta(days=1)} 12:00:00", 15.0),
            ]
        })

        forecast = self.app.get_forecast(current)

        self.assertEqual([day.date for day in forecast], [today + timedelta(days=1)])
        self.assertEqual(forecast[0].high_temp, 15)

    @patch("weather_lookup.core.weather_service.requests.get")
    def test_get_forecast_propagates_fetch_failure(self, mock_get):
        current = CurrentWeather.from_dict(SAMPLE_CURRENT_RESPONSE)
        mock_get.side_effect = requests.exceptions.ConnectionError

        with self.assertRaises(WeatherAPIError):
            self.app.get_forecast(current)

    def test_clear_recent_searches(self):
        self.app.store.add_recent_search("Paris")
        self.app.clear_recent_searches()

        self.assertEqual(self.app.recent_searches(), [])

    def test_clear_storage(self):
        self.app.store.add_recent_search("Paris")
        self.app.store.save_weather(CurrentWeather.from_dict(SAMPLE_CURRENT_RESPONSE))

        self.assertEqual(self.app.clear_storage(), 2)
        self.assertIsNone(self.app.last_weather())

    def test_clear_logs(self):
        log_file = self.app.config.log_dir / "weather_lookup.log"
        log_file.write_text("old log line\n")

        self.app.clear_logs()

        self.assertFalse(log_file.exists())


if __name__ == "__main__":
    unittest.main()
