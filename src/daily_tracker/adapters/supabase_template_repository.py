"""Supabase implementation for workout templates."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID

from supabase import Client

from daily_tracker.adapters.supabase_errors import reading, writing
from daily_tracker.adapters.supabase_workout_repository import (
    exercise_payload,
    parse_exercise,
)
from daily_tracker.domain.errors import WriteFailure
from daily_tracker.domain.workouts import WorkoutTemplate
from daily_tracker.services.templates import TemplateRepository

TABLE = "workout_templates"


@dataclass
class SupabaseTemplateRepository(TemplateRepository):
    """Supabase-backed repository for workout templates."""

    client: Client

    def list_templates(
        self, user_id: UUID, workout_type: str | None
    ) -> list[WorkoutTemplate]:
        """Return a user's templates, most recently used first."""
        with reading(f"templates for {user_id}"):
            query = self.client.table(TABLE).select("*").eq("user_id", str(user_id))
            if workout_type is not None:
                query = query.eq("workout_type", workout_type)
            response = query.order("last_used", desc=True).execute()
        return [_parse_template(row) for row in response.data or []]

    def get_template(self, template_id: str) -> WorkoutTemplate | None:
        """Return a template by id, if present."""
        with reading(f"template {template_id}"):
            response = (
                self.client.table(TABLE)
                .select("*")
                .eq("id", template_id)
                .limit(1)
                .execute()
            )
        if not response.data:
            return None
        return _parse_template(response.data[0])

    def save_template(self, template: WorkoutTemplate) -> None:
        """Create or overwrite a template."""
        with writing(f"template {template.id}"):
            response = (
                self.client.table(TABLE)
                .upsert(
                    {
                        "id": template.id,
                        "user_id": str(template.user_id),
                        "name": template.name,
                        "description": template.description,
                        "workout_type": template.workout_type,
                        "exercises": [
                            exercise_payload(ex) for ex in template.exercises
                        ],
                        "created_at": template.created_at.isoformat(),
                        "last_used": template.last_used.isoformat(),
                    }
                )
                .execute()
            )
        if not response.data:
            raise WriteFailure("Failed to save template")

    def delete_template(self, template_id: str) -> None:
        """Delete a template."""
        with writing(f"template {template_id}"):
            self.client.table(TABLE).delete().eq("id", template_id).execute()


def _parse_template(row: dict[str, object]) -> WorkoutTemplate:
    """Parse a template row into a domain model."""
    return WorkoutTemplate(
        id=str(row["id"]),
        user_id=UUID(str(row["user_id"])),
        name=str(row.get("name", "")),
        workout_type=str(row.get("workout_type", "")),
        exercises=tuple(parse_exercise(ex) for ex in row.get("exercises") or []),
        created_at=datetime.fromisoformat(str(row["created_at"])),
        last_used=datetime.fromisoformat(str(row["last_used"])),
        description=row.get("description"),
    )
