"""Pydantic models for API request payloads."""

from datetime import date
from typing import Literal

from pydantic import BaseModel, Field

from daily_tracker.domain.ledger import LedgerStatus
from daily_tracker.domain.meals import MacroTotals, PlannedFood, TimeslotPlan
from daily_tracker.domain.water import WaterSource
from daily_tracker.domain.workouts import TemplateInput, WorkoutExercise, WorkoutStatus


class MacrosPayload(BaseModel):
    """Macronutrient amounts."""

    calories: float = 0.0
    protein_g: float = 0.0
    fat_g: float = 0.0
    carbs_g: float = 0.0

    def to_domain(self) -> MacroTotals:
        return MacroTotals(
            calories=self.calories,
            protein_g=self.protein_g,
            fat_g=self.fat_g,
            carbs_g=self.carbs_g,
        )


class PlannedFoodPayload(BaseModel):
    """Food portion with macros per 100 g."""

    name: str
    grams: float = Field(ge=0)
    per_100g: MacrosPayload = Field(default_factory=MacrosPayload)


class TimeslotPayload(BaseModel):
    """Foods planned for one timeslot."""

    foods: list[PlannedFoodPayload] = Field(default_factory=list)
    external: MacrosPayload = Field(default_factory=MacrosPayload)
    completed: bool = False

    def to_domain(self) -> TimeslotPlan:
        return TimeslotPlan(
            foods=tuple(
                PlannedFood(
                    name=food.name,
                    grams=food.grams,
                    per_100g=food.per_100g.to_domain(),
                )
                for food in self.foods
            ),
            external=self.external.to_domain(),
            completed=self.completed,
        )


class MealPlanRequest(BaseModel):
    """Meal plan for a day, optionally repeated on following days."""

    timeslots: dict[str, TimeslotPayload]
    number_of_days: int = Field(default=1, ge=1, le=31)


class MealCompletionRequest(BaseModel):
    completed: bool


class ExercisePayload(BaseModel):
    """Exercise row in a workout or template."""

    id: str
    exercise_id: str
    name: str
    primary_muscle: str = ""
    equipment: str = ""
    kg: float = 0.0
    sets: int = 0
    reps: int = 0
    rest_seconds: int = 0
    notes: str = ""
    order: int = 0

    def to_domain(self) -> WorkoutExercise:
        return WorkoutExercise(**self.model_dump())


class WorkoutRequest(BaseModel):
    """Workout to schedule for a day."""

    name: str
    workout_type: str
    exercises: list[ExercisePayload] = Field(default_factory=list)
    estimated_duration: int = 0
    notes: str = ""
    status: WorkoutStatus = WorkoutStatus.SCHEDULED


class WorkoutStatusRequest(BaseModel):
    status: WorkoutStatus


class WaterRequest(BaseModel):
    """Drink to log; presets ignore ``amount_ml``."""

    amount_ml: int | None = None
    source: WaterSource = WaterSource.MANUAL


class LedgerStatusRequest(BaseModel):
    status: LedgerStatus


class CustomTaskRequest(BaseModel):
    task_id: str = Field(min_length=1)


class TemplateRequest(BaseModel):
    """Template content to create or overwrite."""

    name: str
    workout_type: str
    exercises: list[ExercisePayload] = Field(default_factory=list)
    description: str | None = None

    def to_domain(self) -> TemplateInput:
        return TemplateInput(
            name=self.name,
            workout_type=self.workout_type,
            exercises=tuple(ex.to_domain() for ex in self.exercises),
            description=self.description,
        )


class CloneTemplateRequest(BaseModel):
    name: str


class SelectTypeRequest(BaseModel):
    workout_type: str


class AddExerciseRequest(BaseModel):
    exercise: ExercisePayload
    index: int | None = Field(default=None, ge=0)


class MoveExerciseRequest(BaseModel):
    exercise_id: str
    direction: Literal["up", "down"]


class DeleteExerciseRequest(BaseModel):
    index: int = Field(ge=0)


class SaveDraftTemplateRequest(BaseModel):
    name: str
    description: str | None = None
    update_existing: bool = False


class ScheduleDraftRequest(BaseModel):
    day: date
    name: str
    estimated_duration: int = 0
    notes: str = ""
