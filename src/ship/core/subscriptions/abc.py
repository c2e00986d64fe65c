"""Webhook subscription service interface.

A long-running daemon forwards GitHub PR events to agent sessions. The stack
engine only registers and unregisters interest in PR numbers.
"""

from abc import ABC, abstractmethod


class EventSubscriptions(ABC):
    """Abstract interface for the webhook subscription service."""

    @abstractmethod
    def is_running(self) -> bool:
        """Return True if the daemon is reachable."""
        ...

    @abstractmethod
    def subscribe(self, session_id: str, pr_numbers: list[int]) -> None:
        """Route events for pr_numbers to session_id.

        Raises:
            SubscriptionError: If the daemon rejects or cannot receive the request
        """
        ...

    @abstractmethod
    def unsubscribe(self, session_id: str, pr_numbers: list[int]) -> None:
        """Stop routing events for pr_numbers to session_id."""
        ...
