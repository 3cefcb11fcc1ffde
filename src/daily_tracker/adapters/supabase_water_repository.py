"""Supabase repository for water intake."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from supabase import Client

from daily_tracker.adapters.supabase_errors import reading, writing
from daily_tracker.domain.errors import WriteFailure
from daily_tracker.domain.ledger import ledger_id
from daily_tracker.domain.water import WaterEntry, WaterIntake, WaterSource
from daily_tracker.services.water import DEFAULT_DAILY_TARGET_ML, WaterRepository

TABLE = "water_intake"


@dataclass
class SupabaseWaterRepository(WaterRepository):
    """Supabase implementation for water intake; one row per user and day."""

    client: Client

    def save_intake(self, intake: WaterIntake) -> None:
        """Upsert the day's intake with its derived totals."""
        key = ledger_id(intake.user_id, intake.day)
        with writing(f"water intake {key}"):
            response = (
                self.client.table(TABLE)
                .upsert(
                    {
                        "id": key,
                        "user_id": str(intake.user_id),
                        "date": intake.day.isoformat(),
                        "target_ml": intake.target_ml,
                        "total_ml": intake.total_ml,
                        "goal_achieved": intake.goal_achieved,
                        "entries": [
                            {
                                "id": entry.id,
                                "amount_ml": entry.amount_ml,
                                "logged_at": entry.logged_at.isoformat(),
                                "source": entry.source.value,
                            }
                            for entry in intake.entries
                        ],
                    }
                )
                .execute()
            )
        if not response.data:
            raise WriteFailure("Failed to save water intake")

    def get_intake(self, user_id: UUID, day: date) -> WaterIntake | None:
        """Return the intake for a user's day, if present."""
        key = ledger_id(user_id, day)
        with reading(f"water intake {key}"):
            response = (
                self.client.table(TABLE).select("*").eq("id", key).limit(1).execute()
            )
        if not response.data:
            return None
        return _parse_intake(response.data[0])


def _parse_intake(row: dict[str, object]) -> WaterIntake:
    """Parse a water intake row into a domain model."""
    return WaterIntake(
        user_id=UUID(str(row["user_id"])),
        day=date.fromisoformat(str(row["date"])),
        target_ml=int(row.get("target_ml") or DEFAULT_DAILY_TARGET_ML),
        entries=tuple(
            WaterEntry(
                id=str(entry["id"]),
                amount_ml=int(entry.get("amount_ml", 0)),
                logged_at=datetime.fromisoformat(str(entry["logged_at"])),
                source=WaterSource(entry.get("source") or WaterSource.MANUAL),
            )
            for entry in row.get("entries") or []
        ),
    )
