"""Local key-value storage for the last viewed weather and recent searches."""

import json
import logging
import hashlib
from pathlib import Path
from typing import List, Optional
from datetime import datetime

from .exceptions import StorageError
from .models import CurrentWeather

logger = logging.getLogger(__name__)

LAST_SEARCH_KEY = "last_search"
RECENT_SEARCHES_KEY = "recent_searches"
MAX_RECENT_SEARCHES = 5


class KeyValueStore:
    """Durable text store with one JSON file per key."""

    def __init__(self, data_dir: Path):
        """Initialize the store.

        Args:
            data_dir: Directory holding the stored entries
        """
        self.data_dir = data_dir
        self.data_dir.mkdir(exist_ok=True, parents=True)

    def _path(self, key: str) -> Path:
        return self.data_dir / hashlib.md5(key.encode()).hexdigest()

    def set(self, key: str, value: str) -> None:
        """Store text under a key, replacing any previous value."""
        try:
            entry = {
                "key": key,
                "timestamp": datetime.now().isoformat(),
                "value": value,
            }
            with self._path(key).open("w", encoding="utf-8") as file:
                json.dump(entry, file)

            logger.debug(f"Stored value for key: {key}")

        except (OSError, TypeError) as e:
            logger.error(f"Failed to store value for key {key}: {e}")
            raise StorageError(f"Failed to save data: {e}", e) from e

    def get(self, key: str) -> Optional[str]:
        """Return the text stored under a key, or None if absent or unreadable."""
        entry_file = self._path(key)
        if not entry_file.exists():
            logger.debug(f"No stored value for key: {key}")
            return None

        try:
            with entry_file.open("r", encoding="utf-8") as file:
                entry = json.load(file)
            return entry["value"]

        except (json.JSONDecodeError, KeyError, TypeError) as e:
            logger.warning(f"Invalid storage file for key {key}: {e}")
            try:
                entry_file.unlink()
            except FileNotFoundError:
                pass
            return None

        except OSError as e:
            logger.error(f"Error reading stored value for key {key}: {e}")
            return None

    def remove(self, key: str) -> bool:
        """Delete a key. Returns True if something was removed."""
        try:
            self._path(key).unlink()
            logger.debug(f"Removed key: {key}")
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error(f"Failed to remove key {key}: {e}")
            raise StorageError(f"Failed to remove data: {e}", e) from e

    def clear(self) -> int:
        """Remove every stored entry.

        Returns:
            Number of entries removed
        """
        try:
            removed = 0
            for entry_file in self.data_dir.iterdir():
                if entry_file.is_file():
                    entry_file.unlink()
                    removed += 1

            logger.debug(f"Storage cleared: {removed} entries deleted")
            return removed

        except OSError as e:
            logger.error(f"Error clearing storage: {e}")
            raise StorageError(f"Failed to clear storage: {e}", e) from e


class WeatherStore:
    """Persists the last viewed weather record and the recent search list."""

    def __init__(self, store: KeyValueStore):
        self.store = store

    def save_weather(self, weather: CurrentWeather) -> bool:
        """Save the last viewed current weather. Returns False on failure."""
        try:
            self.store.set(LAST_SEARCH_KEY, json.dumps(weather.to_dict()))
            return True
        except (StorageError, TypeError, ValueError) as e:
            logger.error(f"Failed to save weather data: {e}")
            return False

    def load_weather(self) -> Optional[CurrentWeather]:
        """Load the last viewed current weather, if any."""
        saved = self.store.get(LAST_SEARCH_KEY)
        if not saved:
            return None

        try:
            return CurrentWeather.from_dict(json.loads(saved))
        except ValueError as e:
            logger.error(f"Failed to load weather data: {e}")
            return None

    def load_recent_searches(self) -> List[str]:
        """Return recent city searches, most recent first."""
        saved = self.store.get(RECENT_SEARCHES_KEY)
        if not saved:
            return []

        try:
            searches = json.loads(saved)
        except ValueError as e:
            logger.error(f"Error loading recent searches: {e}")
            return []

        if not isinstance(searches, list):
            logger.warning("Recent searches entry is not a list, ignoring it")
            return []
        return [search for search in searches if isinstance(search, str)]

    def add_recent_search(self, city: str) -> List[str]:
        """Move a city to the front of the recent searches and return the list."""
        normalized = city.strip().lower()
        searches = self.load_recent_searches()
        if not normalized:
            return searches

        updated = [normalized] + [
            search for search in searches if search.lower() != normalized
        ]
        updated = updated[:MAX_RECENT_SEARCHES]

        try:
            self.store.set(RECENT_SEARCHES_KEY, json.dumps(updated))
        except StorageError as e:
            logger.error(f"Error saving recent searches: {e}")
        return updated

    def clear_recent_searches(self) -> None:
        """Forget all recent searches."""
        try:
            self.store.remove(RECENT_SEARCHES_KEY)
        except StorageError as e:
            logger.error(f"Error clearing recent searches: {e}")
