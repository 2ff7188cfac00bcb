"""
Typer-based command-line interface for Weather Lookup Application.

This module exposes the weather lookups as commands with options, so
they can be scripted as well as run by hand.
"""

import sys
import json
import logging
from datetime import datetime
from typing import List, Optional

import typer
from rich.console import Console

from ..core.app import WeatherApp
from ..core.exceptions import WeatherAppError
from ..core.forecast import round_half_up, weekly_overview
from ..core.models import CurrentWeather
from .formatting import current_weather_panel, forecast_header, forecast_table, weekly_overview_panel

logger = logging.getLogger(__name__)

# Create the main typer app
app = typer.Typer(
    help="Weather Lookup - Command Line Interface",
    no_args_is_help=True,
    rich_markup_mode="rich"
)

# Create subcommand groups
weather_app = typer.Typer(help="Weather and forecast commands")
history_app = typer.Typer(help="Recent search commands")
config_app = typer.Typer(help="Storage and log maintenance commands")

app.add_typer(weather_app, name="weather")
app.add_typer(history_app, name="history")
app.add_typer(config_app, name="config")

console = Console()
_weather_app: Optional[WeatherApp] = None


def get_weather_app() -> WeatherApp:
    """Create the application on first use."""
    global _weather_app
    if _weather_app is None:
        _weather_app = WeatherApp()
    return _weather_app


def get_weather_from_args(
    city: Optional[str] = None,
    latitude: Optional[float] = None,
    longitude: Optional[float] = None,
    here: bool = False
) -> CurrentWeather:
    """Fetch current weather for whatever the command line asked for."""
    weather_app = get_weather_app()
    if here:
        return weather_app.weather_at_current_location()
    elif city:
        return weather_app.search_city(city)
    elif latitude is not None and longitude is not None:
        return weather_app.weather_at_coordinates(latitude, longitude)
    else:
        raise typer.BadParameter("Must specify --city, --lat/--lon, or --here")


# Weather commands
@weather_app.command("current")
def current_weather(
    city: Optional[str] = typer.Option(None, "--city", "-c", help="City name"),
    latitude: Optional[float] = typer.Option(None, "--lat", help="Latitude coordinate"),
    longitude: Optional[float] = typer.Option(None, "--lon", help="Longitude coordinate"),
    here: bool = typer.Option(False, "--here", help="Use current location (auto-detect)"),
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format")
):
    """Get current weather for a city or location."""
    try:
        weather = get_weather_from_args(city, latitude, longitude, here)

        if json_output:
            console.print_json(json.dumps(weather.to_dict()))
        else:
            console.print(current_weather_panel(weather))

    except (WeatherAppError, typer.BadParameter) as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@weather_app.command("forecast")
def daily_forecast(
    json_output: bool = typer.Option(False, "--json", help="Output in JSON format")
):
    """Get the 5-day forecast for the last viewed city."""
    weather_app = get_weather_app()
    current = weather_app.last_weather()
    if current is None:
        console.print("[yellow]No forecast available. Look up a city with 'weather current' first.[/yellow]")
        raise typer.Exit(1)

    try:
        forecast = weather_app.get_forecast(current)
    except WeatherAppError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)

    overview = weekly_overview(forecast)
    if json_output:
        avg_high, avg_low, avg_humidity = overview or (None, None, None)
        data = {
            "city": current.city,
            "temperature": round_half_up(current.temperature),
            "description": current.condition_text,
            "forecast": [day.to_dict() for day in forecast],
            "overview": {
                "avg_high": avg_high,
                "avg_low": avg_low,
                "avg_humidity": avg_humidity
            }
        }
        console.print_json(json.dumps(data))
    else:
        today = datetime.now(current.city_timezone).date()
        console.print(forecast_header(current))
        console.print(forecast_table(current.city, forecast, today))
        console.print(weekly_overview_panel(overview))


# History commands
@history_app.command("list")
def list_recent_searches():
    """List recent city searches."""
    recent = get_weather_app().recent_searches()
    if not recent:
        console.print("[yellow]No recent searches.[/yellow]")
        return

    for i, city in enumerate(recent, 1):
        console.print(f"[cyan]{i}.[/cyan] {city.title()}")


@history_app.command("clear")
def clear_recent_searches():
    """Clear recent city searches."""
    get_weather_app().clear_recent_searches()
    console.print("[green]✅ Recent searches cleared[/green]")


# Configuration commands
@config_app.command("clear-storage")
def clear_storage():
    """Delete the saved weather and search history."""
    try:
        removed = get_weather_app().clear_storage()
        console.print(f"[green]✅ Saved data cleared ({removed} entries)[/green]")

    except WeatherAppError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@config_app.command("clear-logs")
def clear_logs():
    """Clear application logs."""
    try:
        get_weather_app().clear_logs()
        console.print("[green]✅ Logs cleared successfully[/green]")

    except OSError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)


@app.command("interactive")
def run_interactive():
    """Launch interactive Rich UI mode."""
    from .rich_ui import RichUI
    RichUI().run()


class TyperCLI:
    """Wrapper class for the Typer CLI application."""

    def __init__(self):
        self.app = app

    def run(self, args: Optional[List[str]] = None):
        """Run the Typer CLI with optional arguments."""
        if args is None:
            args = sys.argv[1:]

        try:
            self.app(args)
        except typer.Exit as e:
            sys.exit(e.exit_code)
        except Exception as e:
            console.print(f"[red]Unexpected error: {e}[/red]")
            logger.exception(f"Unexpected error in CLI: {e}")
            sys.exit(1)


# Entry point for direct CLI usage
if __name__ == "__main__":
    app()
