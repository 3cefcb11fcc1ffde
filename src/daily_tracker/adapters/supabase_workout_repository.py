"""Supabase repository for scheduled workouts."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from daily_tracker.adapters.supabase_errors import reading, writing
from daily_tracker.domain.errors import WriteFailure
from daily_tracker.domain.ledger import ledger_id
from daily_tracker.domain.workouts import (
    ScheduledWorkout,
    WorkoutExercise,
    WorkoutStatus,
)
from daily_tracker.services.workouts import WorkoutRepository

TABLE = "scheduled_workouts"


@dataclass
class SupabaseWorkoutRepository(WorkoutRepository):
    """Supabase implementation for scheduled workouts; one row per user and day."""

    client: Client

    def save_workout(self, workout: ScheduledWorkout) -> None:
        """Upsert the whole workout document."""
        key = ledger_id(workout.user_id, workout.day)
        with writing(f"workout {key}"):
            response = (
                self.client.table(TABLE)
                .upsert(
                    {
                        "id": key,
                        "user_id": str(workout.user_id),
                        "date": workout.day.isoformat(),
                        "name": workout.name,
                        "workout_type": workout.workout_type,
                        "exercises": [
                            exercise_payload(ex) for ex in workout.exercises
                        ],
                        "estimated_duration": workout.estimated_duration,
                        "notes": workout.notes,
                        "status": workout.status.value,
                        "completed_at": _isoformat(workout.completed_at),
                        "updated_at": _isoformat(workout.updated_at),
                    }
                )
                .execute()
            )
        if not response.data:
            raise WriteFailure("Failed to save workout")

    def get_workout(self, user_id: UUID, day: date) -> ScheduledWorkout | None:
        """Return the workout for a user's day, if present."""
        key = ledger_id(user_id, day)
        with reading(f"workout {key}"):
            response = (
                self.client.table(TABLE).select("*").eq("id", key).limit(1).execute()
            )
        if not response.data:
            return None
        return _parse_workout(response.data[0])

    def list_workouts(
        self, user_id: UUID, start: date, end: date
    ) -> list[ScheduledWorkout]:
        """Return workouts in an inclusive date range, oldest first."""
        with reading(f"workouts for {user_id}"):
            response = (
                self.client.table(TABLE)
                .select("*")
                .eq("user_id", str(user_id))
                .gte("date", start.isoformat())
                .lte("date", end.isoformat())
                .order("date", desc=False)
                .execute()
            )
        return [_parse_workout(row) for row in response.data or []]


def exercise_payload(exercise: WorkoutExercise) -> dict[str, object]:
    """Serialize an exercise row for a jsonb column."""
    return {
        "id": exercise.id,
        "exercise_id": exercise.exercise_id,
        "name": exercise.name,
        "primary_muscle": exercise.primary_muscle,
        "equipment": exercise.equipment,
        "kg": exercise.kg,
        "sets": exercise.sets,
        "reps": exercise.reps,
        "rest_seconds": exercise.rest_seconds,
        "notes": exercise.notes,
        "order": exercise.order,
    }


def parse_exercise(raw: dict[str, object]) -> WorkoutExercise:
    """Parse an exercise from a jsonb column."""
    return WorkoutExercise(
        id=str(raw["id"]),
        exercise_id=str(raw.get("exercise_id", "")),
        name=str(raw.get("name", "")),
        primary_muscle=str(raw.get("primary_muscle", "")),
        equipment=str(raw.get("equipment", "")),
        kg=float(raw.get("kg", 0.0)),
        sets=int(raw.get("sets", 0)),
        reps=int(raw.get("reps", 0)),
        rest_seconds=int(raw.get("rest_seconds", 0)),
        notes=str(raw.get("notes", "")),
        order=int(raw.get("order", 0)),
    )


def _isoformat(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None


def _parse_workout(row: dict[str, object]) -> ScheduledWorkout:
    """Parse a workout row into a domain model."""
    exercises = sorted(
        (parse_exercise(ex) for ex in row.get("exercises") or []),
        key=lambda ex: ex.order,
    )
    return ScheduledWorkout(
        user_id=UUID(str(row["user_id"])),
        day=date.fromisoformat(str(row["date"])),
        name=str(row.get("name", "")),
        workout_type=str(row.get("workout_type", "")),
        exercises=tuple(exercises),
        estimated_duration=int(row.get("estimated_duration") or 0),
        notes=str(row.get("notes") or ""),
        status=WorkoutStatus(row.get("status") or WorkoutStatus.SCHEDULED),
        completed_at=_parse_timestamp(row.get("completed_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )
