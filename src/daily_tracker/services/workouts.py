"""Scheduled workout service."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from daily_tracker.domain.ledger import GYM_WORKOUT_TAG, TaskLedger
from daily_tracker.domain.workouts import (
    ScheduledWorkout,
    WorkoutExercise,
    WorkoutStatus,
    reorder,
)
from daily_tracker.services.ledger import DomainWriteAdapter

logger = logging.getLogger(__name__)


class WorkoutRepository(Protocol):
    """Persistence interface for scheduled workouts."""

    def save_workout(self, workout: ScheduledWorkout) -> None:
        """Replace the stored workout for the workout's user and day."""

    def get_workout(self, user_id: UUID, day: date) -> ScheduledWorkout | None:
        """Return the workout scheduled for a user's day, if present."""

    def list_workouts(
        self, user_id: UUID, start: date, end: date
    ) -> list[ScheduledWorkout]:
        """Return workouts with start <= day <= end ordered by day."""


@dataclass(frozen=True)
class WorkoutSaveResult:
    """Saved workout and the ledger after the gym tag was merged."""

    workout: ScheduledWorkout
    ledger: TaskLedger | None


@dataclass
class WorkoutService:
    """Persists workouts and keeps the gym tag in the ledger in sync."""

    repository: WorkoutRepository
    ledger_adapter: DomainWriteAdapter

    def schedule_workout(  # noqa: PLR0913
        self,
        user_id: UUID,
        day: date,
        name: str,
        workout_type: str,
        exercises: list[WorkoutExercise],
        estimated_duration: int = 0,
        notes: str = "",
        status: WorkoutStatus = WorkoutStatus.SCHEDULED,
    ) -> WorkoutSaveResult:
        """Save the workout, then set ``gym-workout`` iff it has exercises."""
        now = datetime.now(tz=UTC)
        workout = ScheduledWorkout(
            user_id=user_id,
            day=day,
            name=name,
            workout_type=workout_type,
            exercises=tuple(reorder(list(exercises))),
            estimated_duration=estimated_duration,
            notes=notes,
            status=status,
            completed_at=now if status == WorkoutStatus.COMPLETED else None,
            updated_at=now,
        )
        self.repository.save_workout(workout)
        owned = [GYM_WORKOUT_TAG] if workout.exercises else []
        ledger = self.ledger_adapter.replace_owned_set(user_id, day, owned)
        logger.info(
            "Scheduled %s workout for %s on %s with %s exercises",
            workout_type,
            user_id,
            day.isoformat(),
            len(workout.exercises),
        )
        return WorkoutSaveResult(workout=workout, ledger=ledger)

    def load_workout(self, user_id: UUID, day: date) -> ScheduledWorkout | None:
        """Return the workout for a day."""
        return self.repository.get_workout(user_id, day)

    def update_status(
        self, user_id: UUID, day: date, status: WorkoutStatus
    ) -> ScheduledWorkout | None:
        """Move a workout to a new status; completed_at tracks completion."""
        workout = self.repository.get_workout(user_id, day)
        if workout is None:
            return None
        now = datetime.now(tz=UTC)
        updated = replace(
            workout,
            status=status,
            completed_at=now if status == WorkoutStatus.COMPLETED else None,
            updated_at=now,
        )
        self.repository.save_workout(updated)
        return updated

    def get_statistics(
        self, user_id: UUID, start: date, end: date
    ) -> dict[str, object]:
        """Return completion figures for workouts in a date range."""
        workouts = self.repository.list_workouts(user_id, start, end)
        if not workouts:
            return {
                "total_workouts": 0,
                "completed_workouts": 0,
                "skipped_workouts": 0,
                "completion_rate": 0,
                "workout_type_breakdown": {},
                "average_duration": 0,
            }
        completed = [w for w in workouts if w.status == WorkoutStatus.COMPLETED]
        skipped = [w for w in workouts if w.status == WorkoutStatus.SKIPPED]
        breakdown: dict[str, int] = {}
        for workout in workouts:
            breakdown[workout.workout_type] = breakdown.get(workout.workout_type, 0) + 1
        average_duration = (
            round(sum(w.estimated_duration for w in completed) / len(completed))
            if completed
            else 0
        )
        return {
            "total_workouts": len(workouts),
            "completed_workouts": len(completed),
            "skipped_workouts": len(skipped),
            "completion_rate": round(len(completed) / len(workouts) * 100),
            "workout_type_breakdown": breakdown,
            "average_duration": average_duration,
        }
