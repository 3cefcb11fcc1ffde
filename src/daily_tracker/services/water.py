"""Water intake service."""

from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID, uuid4

from daily_tracker.domain.ledger import WATER_TAG, TaskLedger
from daily_tracker.domain.water import (
    WATER_PRESETS_ML,
    WaterEntry,
    WaterIntake,
    WaterSource,
)
from daily_tracker.services.ledger import DomainWriteAdapter

DEFAULT_DAILY_TARGET_ML = 2500


class WaterRepository(Protocol):
    """Persistence interface for water intake."""

    def save_intake(self, intake: WaterIntake) -> None:
        """Replace the stored intake for the intake's user and day."""

    def get_intake(self, user_id: UUID, day: date) -> WaterIntake | None:
        """Return the intake for a user's day, if present."""


@dataclass(frozen=True)
class WaterLogResult:
    """Updated intake and the ledger after the water tag was merged."""

    intake: WaterIntake
    ledger: TaskLedger | None


@dataclass
class WaterService:
    """Logs drinks and marks the day in the ledger once the goal is met."""

    repository: WaterRepository
    ledger_adapter: DomainWriteAdapter
    daily_target_ml: int = DEFAULT_DAILY_TARGET_ML

    def get_intake(self, user_id: UUID, day: date) -> WaterIntake:
        """Return the day's intake, empty when nothing was logged."""
        return self.repository.get_intake(user_id, day) or WaterIntake(
            user_id=user_id, day=day, target_ml=self.daily_target_ml
        )

    def add_intake(
        self,
        user_id: UUID,
        day: date,
        amount_ml: int | None = None,
        source: WaterSource = WaterSource.MANUAL,
    ) -> WaterLogResult:
        """Append a drink, persist the day, then sync the ``water`` tag."""
        amount = WATER_PRESETS_ML.get(source, amount_ml)
        if amount is None or amount <= 0:
            raise ValueError("Water amount must be positive")
        current = self.get_intake(user_id, day)
        entry = WaterEntry(
            id=uuid4().hex,
            amount_ml=amount,
            logged_at=datetime.now(tz=UTC),
            source=source,
        )
        intake = WaterIntake(
            user_id=user_id,
            day=day,
            target_ml=current.target_ml,
            entries=(*current.entries, entry),
        )
        return self._save(intake)

    def remove_entry(self, user_id: UUID, day: date, entry_id: str) -> WaterLogResult:
        """Drop a logged drink; the tag is cleared if the goal is no longer met."""
        current = self.get_intake(user_id, day)
        intake = WaterIntake(
            user_id=user_id,
            day=day,
            target_ml=current.target_ml,
            entries=tuple(e for e in current.entries if e.id != entry_id),
        )
        return self._save(intake)

    def _save(self, intake: WaterIntake) -> WaterLogResult:
        self.repository.save_intake(intake)
        owned = [WATER_TAG] if intake.goal_achieved else []
        ledger = self.ledger_adapter.replace_owned_set(
            intake.user_id, intake.day, owned
        )
        return WaterLogResult(intake=intake, ledger=ledger)
