"""Client-side session bookkeeping.

A client keeps the token it was issued together with the moment it logged
in and treats the session as over once the lifetime has elapsed. This is
advisory only: the server enforces its own expiry through the token
signature, and nothing here extends or shortens it.
"""

import enum
import time
from dataclasses import dataclass, field
from typing import Any, Callable

SESSION_LIFETIME_SECONDS = 15 * 60


class SessionState(str, enum.Enum):
    ACTIVE = "active"
    EXPIRED = "expired"


def format_countdown(seconds: int) -> str:
    """Render a number of seconds as ``m:ss``."""
    seconds = max(0, int(seconds))
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


@dataclass
class ClientSession:
    """Token, user and login time of one signed-in session."""

    token: str
    user: dict[str, Any]
    issued_at: float
    lifetime: int = SESSION_LIFETIME_SECONDS

    def elapsed(self, now: float) -> int:
        """Whole seconds since login."""
        return int(now - self.issued_at)

    def remaining(self, now: float) -> int:
        return max(0, self.lifetime - self.elapsed(now))

    def state(self, now: float) -> SessionState:
        if self.elapsed(now) >= self.lifetime:
            return SessionState.EXPIRED
        return SessionState.ACTIVE


@dataclass
class SessionStore:
    """
    Holds at most one :class:`ClientSession`.

    Every read recomputes the elapsed time from the stored login time and
    clears the store once the session has expired, the same way a page
    load or a periodic tick would.
    """

    clock: Callable[[], float] = time.time
    lifetime: int = SESSION_LIFETIME_SECONDS
    _session: ClientSession | None = field(default=None, repr=False)

    def start(self, token: str, user: dict[str, Any]) -> ClientSession:
        self._session = ClientSession(
            token=token, user=user, issued_at=self.clock(), lifetime=self.lifetime
        )
        return self._session

    def clear(self) -> None:
        self._session = None

    @property
    def current(self) -> ClientSession | None:
        """The active session, or ``None`` once logged out or expired."""
        if self._session is None:
            return None
        if self._session.state(self.clock()) is SessionState.EXPIRED:
            self.clear()
            return None
        return self._session

    def tick(self) -> int:
        """
        Recompute the countdown.

        Returns:
            int: Seconds left; ``0`` when there is no session, in which case
            any expired session has been cleared.
        """
        session = self.current
        if session is None:
            return 0
        return session.remaining(self.clock())

    def countdown(self) -> str:
        return format_countdown(self.tick())
