"""Clock and sleep behind one interface.

Retry backoff sleeps and workspace creation timestamps go through this
interface, so tests run instantly and see a fixed clock.
"""

from abc import ABC, abstractmethod
from datetime import datetime


class Time(ABC):
    @abstractmethod
    def sleep(self, seconds: float) -> None:
        """Block for seconds; used only between retries of idempotent reads."""
        ...

    @abstractmethod
    def now(self) -> datetime:
        """Current time as an aware UTC datetime."""
        ...
