"""
Rich-based interactive UI for Weather Lookup Application.

This module provides an interactive menu system using the Rich library
with panels, tables and progress spinners.
"""

import sys
import logging
from datetime import datetime
from typing import List, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich.prompt import Prompt, Confirm
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.markdown import Markdown
from rich import box

from ..core.app import WeatherApp
from ..core.exceptions import WeatherAppError
from ..core.forecast import weekly_overview
from ..core.models import CurrentWeather, DailySummary
from .formatting import (
    current_weather_panel,
    forecast_header,
    forecast_table,
    greeting,
    weekly_overview_panel,
)

logger = logging.getLogger(__name__)


class RichUI:
    """Rich-based interactive UI for the weather application."""

    def __init__(self):
        """Initialize the Rich UI."""
        self.console = Console()
        self.app = WeatherApp()

    def local_now(self) -> datetime:
        """Current time in the configured device timezone."""
        try:
            return datetime.now(ZoneInfo(self.app.config.timezone))
        except (ZoneInfoNotFoundError, ValueError, TypeError):
            logger.warning(f"Unknown timezone '{self.app.config.timezone}', using system time")
            return datetime.now()

    def run(self):
        """Start the main application loop."""
        try:
            self.show_welcome()
            self.main_menu()
        except KeyboardInterrupt:
            self.console.print("\n[yellow]Goodbye![/yellow]")
            sys.exit(0)
        except Exception as e:
            self.console.print(f"[red]An unexpected error occurred: {e}[/red]")
            logger.exception(f"Unexpected error: {e}")
            sys.exit(1)

    def show_welcome(self):
        """Display welcome screen with the last viewed weather, if any."""
        welcome_text = f"""
        # 🌤️  {greeting(self.local_now())}

        Search for a city or use your current location to check the weather.
        """

        welcome_panel = Panel(
            Markdown(welcome_text),
            title="Weather Lookup",
            title_align="center",
            border_style="blue",
            padding=(1, 2),
        )

        self.console.print()
        self.console.print(welcome_panel)

        last = self.app.last_weather()
        if last:
            self.display_current_weather(last)
        self.console.print()

    def main_menu(self):
        """Display and handle main menu."""
        while True:
            try:
                self.console.print("\n[bold blue]═══ MAIN MENU ═══[/bold blue]\n")

                choices = [
                    "🔍 Search for a City",
                    "🌍 Weather at Current Location",
                    "📅 5-Day Forecast",
                    "🕘 Recent Searches",
                    "⚙️  Other Options",
                    "❌ Exit"
                ]

                choice = self.show_menu(choices, "What would you like to do?")

                if choice == 1:
                    self.search_city()
                elif choice == 2:
                    self.show_current_location_weather()
                elif choice == 3:
                    self.show_forecast()
                elif choice == 4:
                    self.recent_searches_menu()
                elif choice == 5:
                    self.other_menu()
                elif choice == 6:
                    self.console.print("\n[yellow]Goodbye![/yellow]")
                    break

            except WeatherAppError as e:
                self.console.print(f"[red]Error: {e}[/red]")
            except KeyboardInterrupt:
                self.console.print("\n[yellow]Returning to main menu...[/yellow]")

    def show_menu(self, choices: List[str], prompt: str = "Choose an option") -> int:
        """Display menu and get user choice."""
        table = Table(show_header=False, box=box.SIMPLE)
        table.add_column("Choice", style="cyan", width=4)
        table.add_column("Option", style="white")

        for i, choice in enumerate(choices, 1):
            table.add_row(str(i), choice)

        self.console.print(table)

        choice = Prompt.ask(f"\n[bold]{prompt}[/bold]", choices=[str(i) for i in range(1, len(choices) + 1)])
        return int(choice)

    def choose_city(self) -> Optional[str]:
        """Ask for a city name, offering recent searches first."""
        recent = self.app.recent_searches()
        if recent:
            choices = [f"🕘 {city.title()}" for city in recent] + ["✏️  Enter another city"]
            self.console.print("\n[bold]Recent searches:[/bold]")
            choice = self.show_menu(choices, "Choose a city")
            if choice <= len(recent):
                return recent[choice - 1]

        city = Prompt.ask("Enter city name").strip()
        if not city:
            self.console.print("[red]Please enter a city name[/red]")
            return None
        return city

    def search_city(self):
        """Search weather by city name."""
        city = self.choose_city()
        if not city:
            return

        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
            ) as progress:
                task = progress.add_task(f"Fetching weather for {city}...", total=None)
                weather = self.app.search_city(city)
                progress.update(task, completed=100)

            self.display_current_weather(weather)

        except WeatherAppError as e:
            self.console.print(f"[red]Error: {e}[/red]")

    def show_current_location_weather(self):
        """Display weather for the detected location."""
        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
            ) as progress:
                task = progress.add_task("Detecting location...", total=None)
                weather = self.app.weather_at_current_location()
                progress.update(task, completed=100)

            self.display_current_weather(weather)

        except WeatherAppError as e:
            self.console.print(f"[red]Could not fetch location weather: {e}[/red]")

    def display_current_weather(self, weather: CurrentWeather):
        """Display current weather in a formatted panel."""
        self.console.print()
        self.console.print(current_weather_panel(weather))

    def show_forecast(self):
        """Display the 5-day forecast for the last viewed city."""
        current = self.app.last_weather()
        if current is None:
            self.show_no_forecast()
            return

        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
            ) as progress:
                task = progress.add_task("Fetching 5-day forecast...", total=None)
                forecast = self.app.get_forecast(current)
                progress.update(task, completed=100)

        except WeatherAppError as e:
            self.console.print(f"[red]Error: {e}[/red]")
            self.show_no_forecast()
            return

        if not forecast:
            self.show_no_forecast()
            return

        self.display_forecast(current, forecast)

    def show_no_forecast(self):
        """Display the empty forecast state."""
        panel = Panel(
            "Search for a city to view the 5-day weather forecast.",
            title="No Forecast Available",
            border_style="yellow",
            padding=(1, 2),
        )
        self.console.print()
        self.console.print(panel)

    def display_forecast(self, current: CurrentWeather, forecast: List[DailySummary]):
        """Display daily summaries in a table followed by the weekly overview."""
        today = datetime.now(current.city_timezone).date()
        self.console.print()
        self.console.print(forecast_header(current))
        self.console.print(forecast_table(current.city, forecast, today))
        self.console.print(weekly_overview_panel(weekly_overview(forecast)))

    def recent_searches_menu(self):
        """Show recent searches and offer to clear them."""
        recent = self.app.recent_searches()
        if not recent:
            self.console.print("[yellow]No recent searches.[/yellow]")
            return

        table = Table(title="🕘 Recent Searches", box=box.ROUNDED)
        table.add_column("#", style="cyan", width=4)
        table.add_column("City", style="white")
        for i, city in enumerate(recent, 1):
            table.add_row(str(i), city.title())
        self.console.print(table)

        if Confirm.ask("Clear recent searches?", default=False):
            self.app.clear_recent_searches()
            self.console.print("[green]✅ Recent searches cleared![/green]")

    def other_menu(self):
        """Handle other options menu."""
        while True:
            self.console.print("\n[bold magenta]═══ OTHER OPTIONS ═══[/bold magenta]\n")

            choices = [
                "🗑️  Clear Saved Data",
                "📄 Clear Logs",
                "⬅️  Back"
            ]

            choice = self.show_menu(choices)

            if choice == 1:
                if Confirm.ask("Clear saved weather and search history?"):
                    self.app.clear_storage()
                    self.console.print("[green]✅ Saved data cleared successfully![/green]")
            elif choice == 2:
                if Confirm.ask("Clear all application logs?"):
                    try:
                        self.app.clear_logs()
                        self.console.print("[green]✅ Logs cleared successfully![/green]")
                    except OSError as e:
                        logger.error(f"Error clearing logs: {e}")
                        self.console.print(f"[red]Error clearing logs: {e}[/red]")
            elif choice == 3:
                break
