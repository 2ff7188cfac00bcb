"""Weather Lookup: current conditions and a 5-day forecast in the terminal."""

__version__ = "1.0.0"
