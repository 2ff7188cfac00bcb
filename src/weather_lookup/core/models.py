"""Data models for the Weather Lookup application."""

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Optional, Tuple


@dataclass
class Location:
    """Represents a geographic location."""

    name: str
    latitude: float
    longitude: float
    address: Optional[str] = None

    def to_coordinates(self) -> Tuple[float, float]:
        """Return location as (lat, lon) tuple."""
        return (self.latitude, self.longitude)

    def to_coord_string(self) -> str:
        """Return location as coordinate string 'lat, lon'."""
        return f"{self.latitude}, {self.longitude}"


@dataclass
class RawSample:
    """One 3-hour interval observation from the forecast endpoint."""

    timestamp: datetime
    local_time: str  # "YYYY-MM-DD HH:MM:SS", as sent by the API
    temperature: float  # Celsius
    humidity: int  # %
    wind_speed: float  # m/s
    condition_id: int
    condition_text: str

    @classmethod
    def from_dict(cls, data: Dict) -> "RawSample":
        """Create RawSample from one entry of the forecast 'list' array."""
        try:
            main = data["main"]
            condition = data["weather"][0]
            return cls(
                timestamp=datetime.fromtimestamp(data["dt"], tz=timezone.utc),
                local_time=data["dt_txt"],
                temperature=float(main["temp"]),
                humidity=int(main["humidity"]),
                wind_speed=float((data.get("wind") or {}).get("speed", 0.0)),
                condition_id=int(condition["id"]),
                condition_text=condition.get("description", ""),
            )
        except (KeyError, IndexError, TypeError, ValueError, OverflowError, OSError) as e:
            raise ValueError(f"Invalid forecast entry: {e}") from e


@dataclass
class DailySummary:
    """Aggregated forecast for one calendar day."""

    date: date
    day_label: str
    condition_text: str
    condition_icon: str
    high_temp: int  # °C
    low_temp: int  # °C
    humidity: int  # %
    wind_speed_kmh: int  # km/h

    def to_dict(self) -> Dict:
        """Convert to dictionary representation."""
        return {
            "date": self.date.isoformat(),
            "day": self.day_label,
            "condition": self.condition_text,
            "icon": self.condition_icon,
            "temp_high": self.high_temp,
            "temp_low": self.low_temp,
            "humidity": self.humidity,
            "wind_speed": self.wind_speed_kmh,
        }


@dataclass
class CurrentWeather:
    """Current conditions for a city, as returned by the weather endpoint."""

    city: str
    country: str
    latitude: float
    longitude: float
    temperature: float  # °C
    feels_like: float  # °C
    temp_min: float  # °C
    temp_max: float  # °C
    humidity: int  # %
    pressure: int  # hPa
    wind_speed: float  # m/s
    condition_id: int
    condition_text: str
    observed_at: datetime
    sunrise: Optional[datetime]
    sunset: Optional[datetime]
    utc_offset: int  # seconds east of UTC
    raw: Dict = field(default_factory=dict, repr=False)

    @property
    def location(self) -> Location:
        """Location of the city this record describes."""
        return Location(self.city, self.latitude, self.longitude)

    @property
    def city_timezone(self) -> timezone:
        """Fixed-offset timezone of the queried city."""
        return timezone(timedelta(seconds=self.utc_offset))

    def to_dict(self) -> Dict:
        """Return the raw API payload this record was built from."""
        return self.raw

    @classmethod
    def from_dict(cls, data: Dict) -> "CurrentWeather":
        """Create CurrentWeather from a current-weather API response."""
        try:
            main = data["main"]
            condition = data["weather"][0]
            sys_data = data.get("sys") or {}
            utc_offset = int(data.get("timezone", 0))

            def _to_datetime(value):
                if value is None:
                    return None
                return datetime.fromtimestamp(value, tz=timezone.utc)

            return cls(
                city=data.get("name", ""),
                country=sys_data.get("country", ""),
                latitude=float(data["coord"]["lat"]),
                longitude=float(data["coord"]["lon"]),
                temperature=float(main["temp"]),
                feels_like=float(main.get("feels_like", main["temp"])),
                temp_min=float(main.get("temp_min", main["temp"])),
                temp_max=float(main.get("temp_max", main["temp"])),
                humidity=int(main.get("humidity", 0)),
                pressure=int(main.get("pressure", 0)),
                wind_speed=float((data.get("wind") or {}).get("speed", 0.0)),
                condition_id=int(condition["id"]),
                condition_text=condition.get("description", ""),
                observed_at=_to_datetime(data["dt"]),
                sunrise=_to_datetime(sys_data.get("sunrise")),
                sunset=_to_datetime(sys_data.get("sunset")),
                utc_offset=utc_offset,
                raw=data,
            )
        except (KeyError, IndexError, TypeError, ValueError, OverflowError, OSError) as e:
            raise ValueError(f"Invalid current weather data: {e}") from e
