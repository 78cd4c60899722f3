import logging
import os
import tempfile
from abc import ABC, abstractmethod
from datetime import datetime
from pathlib import Path
from typing import Optional

from ...core.exceptions import CooldownStoreError


class CooldownStore(ABC):
    """Persists the single last-notified timestamp between logons."""

    @abstractmethod
    def read(self) -> Optional[datetime]:
        """Return the last dispatch instant, or None if never notified."""

    @abstractmethod
    def write(self, timestamp: datetime) -> None:
        pass


class InMemoryCooldownStore(CooldownStore):
    def __init__(self, timestamp: Optional[datetime] = None):
        self._timestamp = timestamp

    def read(self) -> Optional[datetime]:
        return self._timestamp

    def write(self, timestamp: datetime) -> None:
        self._timestamp = timestamp


class FileCooldownStore(CooldownStore):
    """
    ISO-8601 timestamp in a small text file under the user's profile.

    Writes go through a temp file and os.replace so a reader never sees a
    half-written value.
    """

    def __init__(self, path: str):
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def read(self) -> Optional[datetime]:
        try:
            if not self._path.exists():
                return None
            raw = self._path.read_text(encoding="utf-8").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise CooldownStoreError(f"Cannot read cooldown state {self._path}: {e}")

        if not raw:
            return None

        try:
            timestamp = datetime.fromisoformat(raw)
        except ValueError:
            raise CooldownStoreError(f"Corrupt cooldown state in {self._path}: {raw[:40]!r}")

        # Compared against naive local time
        if timestamp.tzinfo is not None:
            try:
                timestamp = timestamp.astimezone().replace(tzinfo=None)
            except (OverflowError, OSError) as e:
                raise CooldownStoreError(f"Cooldown state in {self._path} out of range: {e}")
        return timestamp

    def write(self, timestamp: datetime) -> None:
        tmp_path = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                prefix=".last_notification_", suffix=".tmp", dir=str(self._path.parent)
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(timestamp.isoformat())
            os.replace(tmp_path, self._path)
            logging.debug(f"Cooldown state written: {timestamp.isoformat()} -> {self._path}")
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                try:
                    os.remove(tmp_path)
                except OSError:
                    logging.debug(f"Could not clean up temp file {tmp_path}")
            raise CooldownStoreError(f"Cannot write cooldown state {self._path}: {e}")
