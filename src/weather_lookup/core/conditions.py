"""OpenWeatherMap condition codes mapped to display categories and icons."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class Condition:
    """Display attributes for a range of weather condition codes."""

    category: str
    icon: str
    emoji: str


THUNDERSTORM = Condition("Thunderstorm", "weather-lightning", "⛈️")
DRIZZLE = Condition("Drizzle", "weather-rainy", "🌦️")
RAIN = Condition("Rain", "weather-pouring", "🌧️")
SNOW = Condition("Snow", "weather-snowy", "🌨️")
ATMOSPHERE = Condition("Mist", "weather-fog", "🌫️")
CLEAR = Condition("Clear", "weather-sunny", "☀️")
PARTLY_CLOUDY = Condition("Partly Cloudy", "weather-partly-cloudy", "⛅")
CLOUDY = Condition("Cloudy", "weather-cloudy", "☁️")

# (first code, last code inclusive, condition)
CONDITION_RANGES = [
    (200, 299, THUNDERSTORM),
    (300, 399, DRIZZLE),
    (500, 599, RAIN),
    (600, 699, SNOW),
    (700, 799, ATMOSPHERE),
    (800, 800, CLEAR),
    (801, 802, PARTLY_CLOUDY),
    (803, 899, CLOUDY),
]


def describe_condition(condition_id: Optional[int]) -> Condition:
    """Return the display condition for a weather code, cloudy if unknown."""
    if condition_id is None:
        return CLOUDY

    for first, last, condition in CONDITION_RANGES:
        if first <= condition_id <= last:
            return condition

    return CLOUDY
