"""Fake Time implementation: a fixed clock that records sleeps instead of sleeping."""

from datetime import UTC, datetime

from ship.core.time.abc import Time

DEFAULT_FAKE_NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


class FakeTime(Time):
    """In-memory fake that tracks sleep() calls.

    This class has NO public setup methods. The clock is fixed through the
    constructor and never advances, not even on sleep().
    """

    def __init__(self, *, now: datetime = DEFAULT_FAKE_NOW) -> None:
        self._now = now
        self._sleep_calls: list[float] = []

    @property
    def sleep_calls(self) -> list[float]:
        """Seconds values passed to sleep(), for test assertions only."""
        return self._sleep_calls

    def sleep(self, seconds: float) -> None:
        self._sleep_calls.append(seconds)

    def now(self) -> datetime:
        return self._now
