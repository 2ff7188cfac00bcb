"""Rendering helpers shared by the Rich and Typer interfaces."""

from datetime import date, datetime, timedelta, tzinfo
from typing import List, Optional, Tuple

from rich import box
from rich.markdown import Markdown
from rich.panel import Panel
from rich.table import Table

from ..core.conditions import CONDITION_RANGES, describe_condition
from ..core.forecast import round_half_up
from ..core.models import CurrentWeather, DailySummary

ICON_EMOJI = {condition.icon: condition.emoji for _, _, condition in CONDITION_RANGES}


def time_of_day(hour: int) -> str:
    """Name the part of the day an hour falls in."""
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 18:
        return "afternoon"
    if 18 <= hour < 22:
        return "evening"
    return "night"


def greeting(now: datetime) -> str:
    return f"Good {time_of_day(now.hour)}"


def capitalize(text: str) -> str:
    """Upper-case the first letter only ("light rain" -> "Light rain")."""
    return text[:1].upper() + text[1:]


def format_clock(moment: Optional[datetime], tz: tzinfo) -> str:
    """Format a moment as 12-hour clock time, e.g. '6:05 AM'."""
    if moment is None:
        return "-"
    local = moment.astimezone(tz)
    hour = local.hour % 12 or 12
    suffix = "PM" if local.hour >= 12 else "AM"
    return f"{hour}:{local.minute:02d} {suffix}"


def format_forecast_date(day: date, today: date) -> str:
    """Label a forecast day, 'Tomorrow' for the next day."""
    if day == today + timedelta(days=1):
        return "Tomorrow"
    return f"{day:%A}, {day:%b} {day.day}"


def current_weather_panel(weather: CurrentWeather) -> Panel:
    """Build the current conditions panel."""
    condition = describe_condition(weather.condition_id)
    place = f"{weather.city}, {weather.country}" if weather.country else weather.city
    tz = weather.city_timezone

    lines = [
        f"📍 **Location:** {place}",
        f"🌡️  **Temperature:** {round_half_up(weather.temperature)}°C (feels like {round_half_up(weather.feels_like)}°C)",
        f"⬆️  **High / Low:** {round_half_up(weather.temp_max)}°C / {round_half_up(weather.temp_min)}°C",
        f"{condition.emoji}  **Conditions:** {capitalize(weather.condition_text)}",
        f"💧 **Humidity:** {weather.humidity}%",
        f"🧭 **Pressure:** {weather.pressure} hPa",
        f"💨 **Wind Speed:** {weather.wind_speed} m/s",
        f"🌅 **Sunrise:** {format_clock(weather.sunrise, tz)}",
        f"🌇 **Sunset:** {format_clock(weather.sunset, tz)}",
    ]
    weather_info = "\n".join(f"- {line}" for line in lines)

    return Panel(
        Markdown(weather_info),
        title="Current Weather",
        title_align="center",
        border_style="green",
        padding=(1, 2),
    )


def forecast_table(city: str, forecast: List[DailySummary], today: date) -> Table:
    """Format daily summaries as a Rich table."""
    table = Table(title=f"📅 5-Day Forecast for {city}", box=box.ROUNDED)
    table.add_column("📅 Date", style="cyan")
    table.add_column("🌤️ Weather", style="green")
    table.add_column("🌡️ High", style="yellow", justify="right")
    table.add_column("🌡️ Low", style="yellow", justify="right")
    table.add_column("💧 Humidity", style="blue", justify="right")
    table.add_column("💨 Wind", style="magenta", justify="right")

    for day in forecast:
        emoji = ICON_EMOJI.get(day.condition_icon, "☁️")
        table.add_row(
            format_forecast_date(day.date, today),
            f"{emoji} {capitalize(day.condition_text)}",
            f"{day.high_temp}°C",
            f"{day.low_temp}°C",
            f"{day.humidity}%",
            f"{day.wind_speed_kmh} km/h",
        )

    return table


def forecast_header(weather: CurrentWeather) -> str:
    """One-line summary of current conditions shown above the forecast."""
    return (
        f"[bold]{weather.city}[/bold]  "
        f"{round_half_up(weather.temperature)}°C, {capitalize(weather.condition_text)}"
    )


def weekly_overview_panel(overview: Optional[Tuple[int, int, int]]) -> Panel:
    """Build the panel with the averages across the forecast days."""
    avg_high, avg_low, avg_humidity = overview or (0, 0, 0)
    return Panel(
        f"🌡️ Avg High: {avg_high}°C    🌡️ Avg Low: {avg_low}°C    💧 Avg Humidity: {avg_humidity}%",
        title="Weekly Overview",
        title_align="center",
        border_style="cyan",
        padding=(0, 2),
    )
