"""Supabase repository for meal plans."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from daily_tracker.adapters.supabase_errors import reading, writing
from daily_tracker.domain.errors import WriteFailure
from daily_tracker.domain.ledger import ledger_id
from daily_tracker.domain.meals import MacroTotals, MealPlan, PlannedFood, TimeslotPlan
from daily_tracker.services.meal_plans import MealPlanRepository

TABLE = "meal_plans"


@dataclass
class SupabaseMealPlanRepository(MealPlanRepository):
    """Supabase implementation for meal plans; one row per user and day."""

    client: Client

    def save_meal_plan(self, plan: MealPlan) -> None:
        """Upsert the whole plan document."""
        key = ledger_id(plan.user_id, plan.day)
        with writing(f"meal plan {key}"):
            response = (
                self.client.table(TABLE)
                .upsert(
                    {
                        "id": key,
                        "user_id": str(plan.user_id),
                        "date": plan.day.isoformat(),
                        "timeslots": {
                            name: _timeslot_payload(slot)
                            for name, slot in plan.timeslots.items()
                        },
                        "total_macros": _macros_payload(plan.total_macros),
                        "updated_at": plan.updated_at.isoformat()
                        if plan.updated_at
                        else None,
                    }
                )
                .execute()
            )
        if not response.data:
            raise WriteFailure("Failed to save meal plan")

    def get_meal_plan(self, user_id: UUID, day: date) -> MealPlan | None:
        """Return the meal plan for a user's day, if present."""
        key = ledger_id(user_id, day)
        with reading(f"meal plan {key}"):
            response = (
                self.client.table(TABLE).select("*").eq("id", key).limit(1).execute()
            )
        if not response.data:
            return None
        return _parse_plan(response.data[0])


def _macros_payload(macros: MacroTotals) -> dict[str, float]:
    return {
        "calories": macros.calories,
        "protein_g": macros.protein_g,
        "fat_g": macros.fat_g,
        "carbs_g": macros.carbs_g,
    }


def _timeslot_payload(slot: TimeslotPlan) -> dict[str, object]:
    return {
        "foods": [
            {
                "name": food.name,
                "grams": food.grams,
                "per_100g": _macros_payload(food.per_100g),
            }
            for food in slot.foods
        ],
        "external": _macros_payload(slot.external),
        "completed": slot.completed,
    }


def _parse_macros(raw: object) -> MacroTotals:
    data = raw if isinstance(raw, dict) else {}
    return MacroTotals(
        calories=float(data.get("calories", 0.0)),
        protein_g=float(data.get("protein_g", 0.0)),
        fat_g=float(data.get("fat_g", 0.0)),
        carbs_g=float(data.get("carbs_g", 0.0)),
    )


def _parse_timeslot(raw: dict[str, object]) -> TimeslotPlan:
    return TimeslotPlan(
        foods=tuple(
            PlannedFood(
                name=str(food.get("name", "")),
                grams=float(food.get("grams", 0.0)),
                per_100g=_parse_macros(food.get("per_100g")),
            )
            for food in raw.get("foods") or []
        ),
        external=_parse_macros(raw.get("external")),
        completed=bool(raw.get("completed", False)),
    )


def _parse_plan(row: dict[str, object]) -> MealPlan:
    """Parse a meal plan row into a domain model."""
    updated_raw = row.get("updated_at")
    timeslots = row.get("timeslots") or {}
    return MealPlan(
        user_id=UUID(str(row["user_id"])),
        day=date.fromisoformat(str(row["date"])),
        timeslots={
            str(name): _parse_timeslot(slot) for name, slot in timeslots.items()
        },
        total_macros=_parse_macros(row.get("total_macros")),
        updated_at=datetime.fromisoformat(updated_raw)
        if isinstance(updated_raw, str) and updated_raw
        else None,
    )
