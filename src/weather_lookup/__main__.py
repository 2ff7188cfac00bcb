#!/usr/bin/env python
"""
Main entry point for the Weather Lookup Application.

Without arguments the Rich interactive UI is launched; any arguments are
handed to the Typer command-line interface.
"""

import sys
import logging

from .core.config_service import ConfigService
from .core.exceptions import WeatherAppError

logger = logging.getLogger(__name__)


def run_rich_ui():
    """Run the Rich-based interactive UI."""
    from .ui.rich_ui import RichUI
    RichUI().run()


def run_typer_cli(args=None):
    """Run the Typer-based command-line interface."""
    from .ui.typer_cli import TyperCLI
    TyperCLI().run(args)


def detect_ui_mode(args) -> str:
    """Pick 'typer' when arguments were given, 'rich' otherwise."""
    return "typer" if len(args) > 1 else "rich"


def main() -> None:
    """Main entry point for the Weather Lookup Application."""
    try:
        ConfigService().setup_logging()
        logger.debug("Weather Lookup application started")

        ui_mode = detect_ui_mode(sys.argv)
        logger.debug(f"Selected UI mode: {ui_mode}")

        if ui_mode == "rich":
            run_rich_ui()
        else:
            run_typer_cli(sys.argv[1:])

    except KeyboardInterrupt:
        logger.debug("Application interrupted by user")
        print("\nGoodbye!")
        sys.exit(0)
    except WeatherAppError as e:
        logger.error(f"Weather Lookup error: {e}")
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
