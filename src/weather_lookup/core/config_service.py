"""Configuration service for managing app settings and directories."""

import os
import logging
from pathlib import Path
from typing import Dict, Optional
from logging.handlers import RotatingFileHandler

from dotenv import dotenv_values, find_dotenv

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_HOME = Path.home() / ".weather_lookup"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ConfigService:
    """Handles configuration and application directories."""

    def __init__(self, root_dir: Optional[Path] = None, env_file: Optional[Path] = None):
        """Initialize configuration service.

        Args:
            root_dir: Optional custom application directory
            env_file: Optional path to a .env file (defaults to searching from cwd)
        """
        # .env values win over the process environment
        self._env_vars: Dict[str, Optional[str]] = {
            **os.environ,
            **dotenv_values(env_file or find_dotenv(usecwd=True)),
        }

        if root_dir is None:
            root_dir = Path(self._env_vars.get("WEATHER_LOOKUP_HOME") or DEFAULT_HOME).expanduser()
        self.root_dir = root_dir

        # Set up directories
        self.data_dir = self.root_dir / "data"
        self.log_dir = self.root_dir / "logs"

        try:
            self.data_dir.mkdir(exist_ok=True, parents=True)
            self.log_dir.mkdir(exist_ok=True, parents=True)
        except OSError as e:
            raise ConfigError(f"Could not create application directories in {self.root_dir}: {e}", e) from e

    @property
    def api_key(self) -> str:
        """Get OpenWeatherMap API key from environment."""
        return self._env_vars.get("OWM_API_KEY") or ""

    @property
    def timezone(self) -> str:
        """Get device timezone from environment."""
        return self._env_vars.get("TZ") or "UTC"

    @property
    def log_level(self) -> str:
        """Get log level from environment."""
        level = (self._env_vars.get("LOG_LEVEL") or "ERROR").upper()
        if not isinstance(logging.getLevelName(level), int):
            logger.warning(f"Unknown LOG_LEVEL '{level}', using ERROR")
            return "ERROR"
        return level

    @property
    def log_file(self) -> Path:
        return self.log_dir / "weather_lookup.log"

    def setup_logging(self) -> None:
        """Configure application logging."""
        logging.basicConfig(
            level=getattr(logging, self.log_level),
            format=LOG_FORMAT,
            handlers=[
                RotatingFileHandler(
                    self.log_file,
                    maxBytes=5 * 1024 * 1024,
                    backupCount=3
                )
            ],
        )
