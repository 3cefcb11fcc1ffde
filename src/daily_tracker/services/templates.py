"""Workout template store with recency ranking."""

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID, uuid4

from daily_tracker.domain.errors import TemplateNotFound
from daily_tracker.domain.workouts import (
    TemplateInput,
    WorkoutExercise,
    WorkoutTemplate,
)

logger = logging.getLogger(__name__)


class TemplateRepository(Protocol):
    """Persistence interface for workout templates."""

    def list_templates(
        self, user_id: UUID, workout_type: str | None
    ) -> list[WorkoutTemplate]:
        """Return a user's templates, optionally for one workout type."""

    def get_template(self, template_id: str) -> WorkoutTemplate | None:
        """Return a template by id, if present."""

    def save_template(self, template: WorkoutTemplate) -> None:
        """Create or fully overwrite a template."""

    def delete_template(self, template_id: str) -> None:
        """Delete a template."""


@dataclass(frozen=True)
class TemplateSelection:
    """Template picked for a workout type and the exercises it loads."""

    workout_type: str
    template: WorkoutTemplate | None
    exercises: list[WorkoutExercise]


@dataclass
class TemplateService:
    """Application service for workout templates."""

    repository: TemplateRepository

    def list_for_type(
        self, user_id: UUID, workout_type: str | None = None
    ) -> list[WorkoutTemplate]:
        """Return templates, most recently used first."""
        return self._rank(self.repository.list_templates(user_id, workout_type))

    def load(self, template_id: str) -> WorkoutTemplate | None:
        """Return a template without changing its recency."""
        return self.repository.get_template(template_id)

    def save_or_update(
        self,
        user_id: UUID,
        template_input: TemplateInput,
        existing_id: str | None = None,
    ) -> str:
        """Create a template, or overwrite ``existing_id`` and bump last_used."""
        now = datetime.now(tz=UTC)
        if existing_id is None:
            template_id = f"template_{uuid4().hex}"
            created_at = now
        else:
            existing = self._owned(existing_id, user_id)
            template_id = existing.id
            created_at = existing.created_at
        self.repository.save_template(
            WorkoutTemplate(
                id=template_id,
                user_id=user_id,
                name=template_input.name,
                workout_type=template_input.workout_type,
                exercises=tuple(template_input.exercises),
                created_at=created_at,
                last_used=now,
                description=template_input.description,
            )
        )
        logger.info(
            "%s template %s (%s exercises)",
            "Updated" if existing_id else "Created",
            template_id,
            len(template_input.exercises),
        )
        return template_id

    def delete(self, template_id: str, user_id: UUID) -> None:
        """Delete a template after verifying the user owns it."""
        self._owned(template_id, user_id)
        self.repository.delete_template(template_id)

    def clone(self, template_id: str, user_id: UUID, new_name: str) -> str:
        """Copy one of the user's templates under a new name."""
        original = self._owned(template_id, user_id)
        return self.save_or_update(
            user_id,
            TemplateInput(
                name=new_name,
                workout_type=original.workout_type,
                exercises=tuple(replace(ex) for ex in original.exercises),
                description=f"Cloned from: {original.name}",
            ),
        )

    def select_for_type(self, user_id: UUID, workout_type: str) -> TemplateSelection:
        """Pick the most recently used template for a newly active workout type."""
        templates = self.list_for_type(user_id, workout_type)
        if not templates:
            return TemplateSelection(workout_type, None, [])
        current = templates[0]
        return TemplateSelection(workout_type, current, list(current.exercises))

    def _owned(self, template_id: str, user_id: UUID) -> WorkoutTemplate:
        template = self.repository.get_template(template_id)
        if template is None or template.user_id != user_id:
            raise TemplateNotFound(template_id)
        return template

    @staticmethod
    def _rank(items: list[WorkoutTemplate]) -> list[WorkoutTemplate]:
        """Rank by last_used descending, ties by id ascending."""
        by_id = sorted(items, key=lambda item: item.id)
        return sorted(by_id, key=lambda item: item.last_used, reverse=True)
