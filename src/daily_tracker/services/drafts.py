"""In-memory working exercise sets for the workout builder."""

import logging
from dataclasses import dataclass, field
from datetime import date
from uuid import UUID

from daily_tracker.domain.workouts import (
    TemplateInput,
    WorkoutExercise,
    WorkoutTemplate,
    reorder,
)
from daily_tracker.services.edit_buffer import (
    DEFAULT_UNDO_WINDOW_SECONDS,
    EditBuffer,
)
from daily_tracker.services.templates import TemplateService
from daily_tracker.services.workouts import WorkoutSaveResult, WorkoutService

logger = logging.getLogger(__name__)


@dataclass
class WorkoutDraft:
    """Exercises a user is editing before saving or scheduling them."""

    user_id: UUID
    edit_buffer: EditBuffer
    workout_type: str | None = None
    exercises: list[WorkoutExercise] = field(default_factory=list)
    selected_template: WorkoutTemplate | None = None


@dataclass
class DraftService:
    """Keeps one process-local draft per user; nothing here is persisted."""

    template_service: TemplateService
    workout_service: WorkoutService
    undo_window_seconds: float = DEFAULT_UNDO_WINDOW_SECONDS
    _drafts: dict[UUID, WorkoutDraft] = field(default_factory=dict)

    def get_draft(self, user_id: UUID) -> WorkoutDraft:
        """Return the user's draft, creating an empty one on first use."""
        draft = self._drafts.get(user_id)
        if draft is None:
            draft = WorkoutDraft(
                user_id=user_id,
                edit_buffer=EditBuffer(window_seconds=self.undo_window_seconds),
            )
            self._drafts[user_id] = draft
        return draft

    def select_workout_type(self, user_id: UUID, workout_type: str) -> WorkoutDraft:
        """Switch category and auto-load its most recently used template."""
        draft = self.get_draft(user_id)
        draft.selected_template = None
        draft.edit_buffer.expire()
        selection = self.template_service.select_for_type(user_id, workout_type)
        draft.workout_type = workout_type
        draft.selected_template = selection.template
        draft.exercises = selection.exercises
        return draft

    def load_template(self, user_id: UUID, template_id: str) -> WorkoutDraft | None:
        """Replace the working set with a template's exercises."""
        template = self.template_service.load(template_id)
        if template is None or template.user_id != user_id:
            return None
        draft = self.get_draft(user_id)
        draft.edit_buffer.expire()
        draft.workout_type = template.workout_type
        draft.selected_template = template
        draft.exercises = list(template.exercises)
        return draft

    def add_exercise(
        self, user_id: UUID, exercise: WorkoutExercise, index: int | None = None
    ) -> WorkoutDraft:
        """Insert an exercise at ``index`` or append it."""
        draft = self.get_draft(user_id)
        exercises = list(draft.exercises)
        if index is None:
            exercises.append(exercise)
        else:
            exercises.insert(index, exercise)
        draft.exercises = reorder(exercises)
        return draft

    def move_exercise(
        self, user_id: UUID, exercise_id: str, direction: str
    ) -> WorkoutDraft:
        """Swap an exercise with its neighbour ``up`` or ``down``."""
        draft = self.get_draft(user_id)
        positions = [ex.id for ex in draft.exercises]
        if exercise_id not in positions:
            return draft
        current = positions.index(exercise_id)
        target = current - 1 if direction == "up" else current + 1
        if target < 0 or target >= len(draft.exercises):
            return draft
        exercises = list(draft.exercises)
        exercises[current], exercises[target] = exercises[target], exercises[current]
        draft.exercises = reorder(exercises)
        return draft

    def delete_exercise(self, user_id: UUID, index: int) -> WorkoutExercise:
        """Remove a row now; it stays undoable for the undo window."""
        draft = self.get_draft(user_id)
        deleted = draft.edit_buffer.delete(draft.exercises, index)
        draft.exercises = reorder(draft.exercises)
        return deleted

    def undo_delete(self, user_id: UUID) -> WorkoutExercise | None:
        """Put the last deleted row back where it was."""
        draft = self.get_draft(user_id)
        restored = draft.edit_buffer.undo(draft.exercises)
        draft.exercises = reorder(draft.exercises)
        return restored

    def save_as_template(
        self,
        user_id: UUID,
        name: str,
        description: str | None = None,
        update_existing: bool = False,
    ) -> str:
        """Save the working set as a new template or over the selected one."""
        draft = self.get_draft(user_id)
        if draft.workout_type is None:
            raise ValueError("Select a workout type before saving a template")
        existing_id = (
            draft.selected_template.id
            if update_existing and draft.selected_template
            else None
        )
        template_id = self.template_service.save_or_update(
            user_id,
            TemplateInput(
                name=name,
                workout_type=draft.workout_type,
                exercises=tuple(draft.exercises),
                description=description,
            ),
            existing_id,
        )
        draft.selected_template = self.template_service.load(template_id)
        return template_id

    def schedule(
        self,
        user_id: UUID,
        day: date,
        name: str,
        estimated_duration: int = 0,
        notes: str = "",
    ) -> WorkoutSaveResult:
        """Schedule the working set for a day.

        The draft is left as it was so a failed save can be retried.
        """
        draft = self.get_draft(user_id)
        if draft.workout_type is None:
            raise ValueError("Select a workout type before scheduling")
        result = self.workout_service.schedule_workout(
            user_id=user_id,
            day=day,
            name=name,
            workout_type=draft.workout_type,
            exercises=list(draft.exercises),
            estimated_duration=estimated_duration,
            notes=notes,
        )
        logger.info("Scheduled draft for %s on %s", user_id, day.isoformat())
        return result

    def clear(self) -> None:
        """Drop every draft and make pending deletions permanent."""
        for draft in self._drafts.values():
            draft.edit_buffer.expire()
        self._drafts.clear()
