import pytest

from contactdesk.session import (
    SESSION_LIFETIME_SECONDS,
    ClientSession,
    SessionState,
    SessionStore,
    format_countdown,
)


class FakeClock:
    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def store(clock):
    store = SessionStore(clock=clock)
    store.start("token-1", {"id": 1, "full_name": "Asha Rao", "email": "a@x.com"})
    return store


def test_lifetime_is_fifteen_minutes():
    assert SESSION_LIFETIME_SECONDS == 900


@pytest.mark.parametrize(
    "seconds, expected",
    [(900, "15:00"), (899, "14:59"), (65, "1:05"), (9, "0:09"), (0, "0:00"), (-5, "0:00")],
)
def test_format_countdown(seconds, expected):
    assert format_countdown(seconds) == expected


def test_session_state_transitions_at_lifetime():
    session = ClientSession(token="t", user={}, issued_at=100.0)
    assert session.state(100.0 + 899.9) is SessionState.ACTIVE
    assert session.state(100.0 + 900) is SessionState.EXPIRED
    assert session.remaining(100.0 + 900) == 0


def test_store_counts_down(store, clock):
    assert store.countdown() == "15:00"
    clock.advance(61)
    assert store.tick() == 839
    assert store.countdown() == "13:59"
    assert store.current.token == "token-1"


def test_store_clears_everything_on_expiry(store, clock):
    clock.advance(SESSION_LIFETIME_SECONDS)
    assert store.current is None
    assert store.tick() == 0
    # stays logged out even if the clock were to go back
    clock.advance(-600)
    assert store.current is None


def test_store_tick_expires_session(store, clock):
    clock.advance(SESSION_LIFETIME_SECONDS + 30)
    assert store.tick() == 0
    assert store.current is None


def test_new_login_restarts_countdown(store, clock):
    clock.advance(800)
    store.start("token-2", {"id": 1})
    clock.advance(200)
    assert store.current.token == "token-2"
    assert store.tick() == 700


def test_clear_logs_out(store):
    store.clear()
    assert store.current is None
    assert store.countdown() == "0:00"
