"""Domain models for water intake tracking."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class WaterSource(StrEnum):
    """How a water entry was logged."""

    MANUAL = "manual"
    PRESET_300ML = "preset-300ml"
    PRESET_700ML = "preset-700ml"
    PRESET_1L = "preset-1L"


WATER_PRESETS_ML = {
    WaterSource.PRESET_300ML: 300,
    WaterSource.PRESET_700ML: 700,
    WaterSource.PRESET_1L: 1000,
}


@dataclass(frozen=True)
class WaterEntry:
    """Single logged drink."""

    id: str
    amount_ml: int
    logged_at: datetime
    source: WaterSource


@dataclass(frozen=True)
class WaterIntake:
    """Water consumed by a user on one day."""

    user_id: UUID
    day: date
    target_ml: int
    entries: tuple[WaterEntry, ...] = ()

    @property
    def total_ml(self) -> int:
        return sum(entry.amount_ml for entry in self.entries)

    @property
    def goal_achieved(self) -> bool:
        return self.total_ml >= self.target_ml
