"""In-progress guard for batched dashboard loads."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum

from calorie_insights.errors import DashboardBusy


class GuardState(Enum):
    """Lifecycle of a guarded batch."""

    IDLE = "idle"
    IN_FLIGHT = "in_flight"
    SETTLED = "settled"


@dataclass
class RequestGuard:
    """Allows at most one batch in flight; not a lock."""

    state: GuardState = GuardState.IDLE

    def begin(self) -> bool:
        """Move to IN_FLIGHT; return False if a batch is already running."""
        if self.state is GuardState.IN_FLIGHT:
            return False
        self.state = GuardState.IN_FLIGHT
        return True

    def settle(self) -> None:
        """Mark the running batch as finished, successfully or not."""
        self.state = GuardState.SETTLED

    @contextmanager
    def hold(self) -> Iterator[None]:
        """Run a batch under the guard, raising DashboardBusy on re-entry."""
        if not self.begin():
            raise DashboardBusy("A dashboard load is already in progress")
        try:
            yield
        finally:
            self.settle()
