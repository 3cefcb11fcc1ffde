"""Domain models for streak analytics."""

from dataclasses import dataclass
from datetime import date

from daily_tracker.domain.ledger import Domain


@dataclass(frozen=True)
class ActivityDay:
    """Whether a domain had an activity scheduled on a day."""

    day: date
    completed: bool
    is_today: bool


@dataclass(frozen=True)
class StreakSummary:
    """Streak figures for one domain."""

    domain: Domain
    current_streak: int
    longest_streak: int
    month_completed: int
    month_total: int
    history: list[ActivityDay]

    @property
    def month_percentage(self) -> float:
        if self.month_total == 0:
            return 0.0
        return self.month_completed / self.month_total * 100
