"""Domain models for scheduled workouts and workout templates."""

from dataclasses import dataclass, replace
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class WorkoutStatus(StrEnum):
    """Lifecycle status of a scheduled workout."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class WorkoutExercise:
    """One exercise row in a workout."""

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


@dataclass(frozen=True)
class ScheduledWorkout:
    """Detailed workout record for a user's day."""

    user_id: UUID
    day: date
    name: str
    workout_type: str
    exercises: tuple[WorkoutExercise, ...]
    estimated_duration: int
    notes: str
    status: WorkoutStatus
    completed_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass(frozen=True)
class TemplateInput:
    """User-provided template content."""

    name: str
    workout_type: str
    exercises: tuple[WorkoutExercise, ...]
    description: str | None = None


@dataclass(frozen=True)
class WorkoutTemplate:
    """Reusable, named snapshot of a workout's exercises."""

    id: str
    user_id: UUID
    name: str
    workout_type: str
    exercises: tuple[WorkoutExercise, ...]
    created_at: datetime
    last_used: datetime
    description: str | None = None


def reorder(exercises: list[WorkoutExercise]) -> list[WorkoutExercise]:
    """Return exercises with ``order`` matching their list position."""
    return [
        exercise if exercise.order == index else replace(exercise, order=index)
        for index, exercise in enumerate(exercises)
    ]
