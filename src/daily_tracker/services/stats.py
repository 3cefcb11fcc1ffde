"""Streak analytics computed from the task ledger."""

from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from uuid import UUID

from daily_tracker.domain.ledger import Domain, TaskLedger, owner_of
from daily_tracker.domain.stats import ActivityDay, StreakSummary
from daily_tracker.services.ledger import LedgerService

DEFAULT_WINDOW_DAYS = 100
LONGEST_STREAK_LOOKBACK_DAYS = 365
DECEMBER = 12


@dataclass
class StatsService:
    """Per-domain streaks and activity grids; only the ledger is read."""

    ledger_service: LedgerService
    window_days: int = DEFAULT_WINDOW_DAYS

    def get_streaks(
        self, user_id: UUID, domain: Domain, today: date | None = None
    ) -> StreakSummary:
        """Return streaks, month counts and the activity grid for a domain."""
        today = today or datetime.now(tz=UTC).date()
        lookback = max(self.window_days, LONGEST_STREAK_LOOKBACK_DAYS)
        start = min(today - timedelta(days=lookback - 1), today.replace(day=1))
        ledgers = self.ledger_service.list_range(user_id, start, today)
        done = {ledger.day for ledger in ledgers if _has_domain(ledger, domain)}

        month_start = today.replace(day=1)
        month_days = [ledger for ledger in ledgers if ledger.day >= month_start]
        history = [
            ActivityDay(day=day, completed=day in done, is_today=day == today)
            for day in _days_back(today, self.window_days)
        ]
        return StreakSummary(
            domain=domain,
            current_streak=_current_streak(done, today),
            longest_streak=_longest_streak(done, start, today),
            month_completed=sum(1 for ledger in month_days if ledger.day in done),
            month_total=len(month_days),
            history=history,
        )

    def get_all_streaks(
        self, user_id: UUID, today: date | None = None
    ) -> dict[Domain, StreakSummary]:
        """Return streak summaries for every domain that writes the ledger."""
        return {
            domain: self.get_streaks(user_id, domain, today)
            for domain in (Domain.MEAL, Domain.GYM, Domain.WATER)
        }

    def get_month(self, user_id: UUID, year: int, month: int) -> list[TaskLedger]:
        """Return the ledgers of a calendar month."""
        start = date(year, month, 1)
        if month == DECEMBER:
            end = date(year + 1, 1, 1) - timedelta(days=1)
        else:
            end = date(year, month + 1, 1) - timedelta(days=1)
        return self.ledger_service.list_range(user_id, start, end)


def _has_domain(ledger: TaskLedger, domain: Domain) -> bool:
    return any(owner_of(tag) == domain for tag in ledger.tasks)


def _days_back(today: date, days: int) -> list[date]:
    return [today - timedelta(days=offset) for offset in range(days - 1, -1, -1)]


def _current_streak(done: set[date], today: date) -> int:
    streak = 0
    day = today
    while day in done:
        streak += 1
        day -= timedelta(days=1)
    return streak


def _longest_streak(done: set[date], start: date, end: date) -> int:
    longest = 0
    run = 0
    day = start
    while day <= end:
        run = run + 1 if day in done else 0
        longest = max(longest, run)
        day += timedelta(days=1)
    return longest
