"""Meal planning service."""

import logging
from dataclasses import dataclass
from datetime import UTC, date, datetime, timedelta
from typing import Protocol
from uuid import UUID

from daily_tracker.domain.ledger import TaskLedger, meal_tag
from daily_tracker.domain.meals import MacroTotals, MealPlan, TimeslotPlan
from daily_tracker.services.ledger import DomainWriteAdapter

logger = logging.getLogger(__name__)


class MealPlanRepository(Protocol):
    """Persistence interface for meal plans."""

    def save_meal_plan(self, plan: MealPlan) -> None:
        """Replace the stored meal plan for the plan's user and day."""

    def get_meal_plan(self, user_id: UUID, day: date) -> MealPlan | None:
        """Return the meal plan for a user's day, if present."""


@dataclass(frozen=True)
class MealPlanSaveResult:
    """Saved plan and the ledger after the meal tags were merged."""

    plan: MealPlan
    ledger: TaskLedger | None


@dataclass
class MealPlanService:
    """Persists meal plans and keeps the meal tags in the ledger in sync."""

    repository: MealPlanRepository
    ledger_adapter: DomainWriteAdapter

    def save_plan(
        self, user_id: UUID, day: date, timeslots: dict[str, TimeslotPlan]
    ) -> MealPlanSaveResult:
        """Save the plan, then schedule ``meal-<slot>`` for each planned slot.

        The ledger is only touched after the plan write succeeds.
        """
        plan = MealPlan(
            user_id=user_id,
            day=day,
            timeslots=dict(timeslots),
            total_macros=_sum_macros(timeslots),
            updated_at=datetime.now(tz=UTC),
        )
        self.repository.save_meal_plan(plan)
        ledger = self.ledger_adapter.replace_owned_set(
            user_id, day, [meal_tag(slot) for slot in plan.planned_slots()]
        )
        logger.info(
            "Saved meal plan for %s on %s with slots %s",
            user_id,
            day.isoformat(),
            plan.planned_slots(),
        )
        return MealPlanSaveResult(plan=plan, ledger=ledger)

    def save_plan_for_days(
        self,
        user_id: UUID,
        start: date,
        number_of_days: int,
        timeslots: dict[str, TimeslotPlan],
    ) -> list[MealPlanSaveResult]:
        """Save the same plan for consecutive days, stopping at the first failure."""
        return [
            self.save_plan(user_id, start + timedelta(days=offset), timeslots)
            for offset in range(number_of_days)
        ]

    def load_plan(self, user_id: UUID, day: date) -> MealPlan | None:
        """Return the meal plan for a day."""
        return self.repository.get_meal_plan(user_id, day)

    def set_completion(
        self, user_id: UUID, day: date, timeslot: str, completed: bool
    ) -> MealPlan | None:
        """Mark a timeslot eaten or not; the plan is rewritten in full."""
        plan = self.repository.get_meal_plan(user_id, day)
        if plan is None or timeslot not in plan.timeslots:
            return None
        slot = plan.timeslots[timeslot]
        timeslots = dict(plan.timeslots)
        timeslots[timeslot] = TimeslotPlan(
            foods=slot.foods, external=slot.external, completed=completed
        )
        updated = MealPlan(
            user_id=plan.user_id,
            day=plan.day,
            timeslots=timeslots,
            total_macros=plan.total_macros,
            updated_at=datetime.now(tz=UTC),
        )
        self.repository.save_meal_plan(updated)
        return updated


def _sum_macros(timeslots: dict[str, TimeslotPlan]) -> MacroTotals:
    total = MacroTotals()
    for slot in timeslots.values():
        total = total + slot.macros()
    return total
