"""Fake webhook subscription service for testing."""

from ship.core.errors import DaemonNotRunningError, SubscriptionError
from ship.core.subscriptions.abc import EventSubscriptions


class FakeEventSubscriptions(EventSubscriptions):
    """In-memory subscription registry.

    This class has NO public setup methods. All state is provided via constructor.
    """

    def __init__(self, *, running: bool = True, fail_with: str | None = None) -> None:
        """Create FakeEventSubscriptions.

        Args:
            running: Whether the daemon appears to be running
            fail_with: If set, subscribe() and unsubscribe() raise SubscriptionError
                with this message
        """
        self._running = running
        self._fail_with = fail_with
        self._subscriptions: list[tuple[str, list[int]]] = []
        self._unsubscriptions: list[tuple[str, list[int]]] = []

    @property
    def subscriptions(self) -> list[tuple[str, list[int]]]:
        """(session_id, pr_numbers) pairs passed to subscribe()."""
        return self._subscriptions

    @property
    def unsubscriptions(self) -> list[tuple[str, list[int]]]:
        return self._unsubscriptions

    def is_running(self) -> bool:
        return self._running

    def _check(self) -> None:
        if not self._running:
            raise DaemonNotRunningError()
        if self._fail_with is not None:
            raise SubscriptionError(self._fail_with)

    def subscribe(self, session_id: str, pr_numbers: list[int]) -> None:
        self._check()
        self._subscriptions.append((session_id, list(pr_numbers)))

    def unsubscribe(self, session_id: str, pr_numbers: list[int]) -> None:
        self._check()
        self._unsubscriptions.append((session_id, list(pr_numbers)))
