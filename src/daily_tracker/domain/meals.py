"""Domain models for daily meal plans."""

from dataclasses import dataclass, field
from datetime import date, datetime
from uuid import UUID


@dataclass(frozen=True)
class MacroTotals:
    """Macronutrient totals."""

    calories: float = 0.0
    protein_g: float = 0.0
    fat_g: float = 0.0
    carbs_g: float = 0.0

    def __add__(self, other: "MacroTotals") -> "MacroTotals":
        return MacroTotals(
            calories=self.calories + other.calories,
            protein_g=self.protein_g + other.protein_g,
            fat_g=self.fat_g + other.fat_g,
            carbs_g=self.carbs_g + other.carbs_g,
        )


@dataclass(frozen=True)
class PlannedFood:
    """A food portion planned for a timeslot, with macros per 100 g."""

    name: str
    grams: float
    per_100g: MacroTotals

    def macros(self) -> MacroTotals:
        if self.grams <= 0:
            return MacroTotals()
        factor = self.grams / 100.0
        return MacroTotals(
            calories=self.per_100g.calories * factor,
            protein_g=self.per_100g.protein_g * factor,
            fat_g=self.per_100g.fat_g * factor,
            carbs_g=self.per_100g.carbs_g * factor,
        )


@dataclass(frozen=True)
class TimeslotPlan:
    """Foods planned for one timeslot plus food eaten outside the plan."""

    foods: tuple[PlannedFood, ...] = ()
    external: MacroTotals = field(default_factory=MacroTotals)
    completed: bool = False

    def macros(self) -> MacroTotals:
        total = self.external
        for food in self.foods:
            total = total + food.macros()
        return total


@dataclass(frozen=True)
class MealPlan:
    """A user's full meal plan for one day."""

    user_id: UUID
    day: date
    timeslots: dict[str, TimeslotPlan]
    total_macros: MacroTotals
    updated_at: datetime | None = None

    def planned_slots(self) -> list[str]:
        """Return timeslots that have at least one planned food."""
        return [name for name, slot in self.timeslots.items() if slot.foods]
