import logging
from datetime import datetime, timedelta
from typing import Optional

from ...core.exceptions import CooldownStoreError
from ...models import CooldownState
from .cooldown_store import CooldownStore


class CooldownGate:
    """
    Suppresses repeat notifications within a rolling window.

    The gate fails open: a missing, unreadable, corrupt or future-dated
    timestamp means Clear, so a broken store can never block warnings.
    """

    def __init__(self, store: CooldownStore, window_hours: float, override: bool = False):
        self._store = store
        self._window = timedelta(hours=window_hours)
        self._override = override

    @property
    def window(self) -> timedelta:
        return self._window

    @property
    def override(self) -> bool:
        return self._override

    def last_dispatch(self) -> Optional[datetime]:
        try:
            return self._store.read()
        except CooldownStoreError as e:
            logging.warning(f"Cooldown state unreadable, treating as never notified: {e}")
            return None

    def state(self, now: datetime) -> CooldownState:
        if self._override:
            return CooldownState.CLEAR

        last = self.last_dispatch()
        if last is None:
            return CooldownState.CLEAR

        if last > now:
            logging.warning(
                f"Cooldown timestamp {last.isoformat()} is in the future, ignoring it"
            )
            return CooldownState.CLEAR

        if now < last + self._window:
            return CooldownState.SUPPRESSED
        return CooldownState.CLEAR

    def is_suppressed(self, now: datetime) -> bool:
        return self.state(now) == CooldownState.SUPPRESSED

    def next_allowed(self) -> Optional[datetime]:
        last = self.last_dispatch()
        return last + self._window if last else None

    def arm(self, now: datetime) -> None:
        try:
            self._store.write(now)
            logging.info(
                f"Cooldown armed at {now.isoformat()} for {self._window}",
                extra={"operation": "cooldown_arm", "armed_at": now.isoformat()},
            )
        except CooldownStoreError as e:
            # Next run simply notifies again
            logging.error(f"Could not persist cooldown state: {e}")
