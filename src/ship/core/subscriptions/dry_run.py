"""No-op wrapper for the webhook subscription service."""

from ship.cli.output import user_output
from ship.core.subscriptions.abc import EventSubscriptions


class DryRunEventSubscriptions(EventSubscriptions):
    """Delegates is_running(); prints instead of registering."""

    def __init__(self, wrapped: EventSubscriptions) -> None:
        self._wrapped = wrapped

    def is_running(self) -> bool:
        return self._wrapped.is_running()

    def subscribe(self, session_id: str, pr_numbers: list[int]) -> None:
        numbers = ", ".join(f"#{n}" for n in pr_numbers)
        user_output(f"[DRY RUN] Would subscribe session {session_id} to {numbers}")

    def unsubscribe(self, session_id: str, pr_numbers: list[int]) -> None:
        numbers = ", ".join(f"#{n}" for n in pr_numbers)
        user_output(f"[DRY RUN] Would unsubscribe session {session_id} from {numbers}")
