# guidebot/state.py
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from .config import COOLDOWN_SECONDS

TOLD_PLACES_TTL = 60 * 60  # seconds


@dataclass
class UserSession:
    last_request_at: Optional[float] = None
    # title -> expiry timestamp on the store clock
    told_places: Dict[str, float] = field(default_factory=dict)


class SessionStore:
    """In-memory per-user state: cooldown timestamps and told places.

    Entries live for the process lifetime. Told places carry their own expiry
    and are dropped by `sweep()`; lookups ignore expired entries even if the
    sweep has not run yet.
    """

    def __init__(self, cooldown_seconds: float = COOLDOWN_SECONDS,
                 told_ttl_seconds: float = TOLD_PLACES_TTL,
                 clock: Callable[[], float] = time.monotonic):
        self.cooldown_seconds = cooldown_seconds
        self.told_ttl_seconds = told_ttl_seconds
        self._clock = clock
        self._sessions: Dict[int, UserSession] = {}
        self._lock = threading.Lock()

    def session(self, user_id: int) -> UserSession:
        with self._lock:
            return self._get(user_id)

    def _get(self, user_id: int) -> UserSession:
        sess = self._sessions.get(user_id)
        if sess is None:
            sess = self._sessions[user_id] = UserSession()
        return sess

    # ---------- Cooldown ----------
    def try_acquire(self, user_id: int) -> bool:
        """Return True and stamp the user when outside the cooldown window."""
        now = self._clock()
        with self._lock:
            sess = self._get(user_id)
            last = sess.last_request_at
            if last is not None and now - last < self.cooldown_seconds:
                return False
            sess.last_request_at = now
            return True

    # ---------- Told places ----------
    def has_told(self, user_id: int, title: str) -> bool:
        now = self._clock()
        with self._lock:
            expires_at = self._get(user_id).told_places.get(title)
            return expires_at is not None and expires_at > now

    def mark_told(self, user_id: int, title: str) -> bool:
        """Remember `title` for the retention window.

        Returns False (and leaves the expiry untouched) if it is already told.
        """
        now = self._clock()
        with self._lock:
            told = self._get(user_id).told_places
            expires_at = told.get(title)
            if expires_at is not None and expires_at > now:
                return False
            told[title] = now + self.told_ttl_seconds
            return True

    def sweep(self) -> int:
        """Drop expired told places for every user. Returns how many were removed."""
        now = self._clock()
        removed = 0
        with self._lock:
            for sess in self._sessions.values():
                expired = [t for t, exp in sess.told_places.items() if exp <= now]
                for title in expired:
                    del sess.told_places[title]
                removed += len(expired)
        return removed
