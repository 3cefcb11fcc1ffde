"""Domain models for the per-day task ledger and tag ownership."""

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date, datetime
from enum import StrEnum
from uuid import UUID


class Domain(StrEnum):
    """Feature modules that contribute tags to the ledger."""

    MEAL = "meal"
    GYM = "gym"
    WATER = "water"
    CUSTOM = "custom"


class LedgerStatus(StrEnum):
    """Overall status of a scheduled day."""

    ACTIVE = "active"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


MEAL_TAG_PREFIX = "meal-"
GYM_WORKOUT_TAG = "gym-workout"
WATER_TAG = "water"


def meal_tag(timeslot: str) -> str:
    """Return the ledger tag for a meal timeslot."""
    return f"{MEAL_TAG_PREFIX}{timeslot}"


def owner_of(tag: str) -> Domain:
    """Return the single domain allowed to set or clear a tag."""
    if tag.startswith(MEAL_TAG_PREFIX):
        return Domain.MEAL
    if tag == GYM_WORKOUT_TAG:
        return Domain.GYM
    if tag == WATER_TAG:
        return Domain.WATER
    return Domain.CUSTOM


def partition(
    tags: Iterable[str], domain: Domain
) -> tuple[tuple[str, ...], tuple[str, ...]]:
    """Split tags into (owned by domain, owned by others), keeping order."""
    owned: list[str] = []
    others: list[str] = []
    for tag in tags:
        if owner_of(tag) == domain:
            owned.append(tag)
        else:
            others.append(tag)
    return tuple(owned), tuple(others)


def ledger_id(user_id: UUID, day: date) -> str:
    """Return the document key for a user's ledger on a day."""
    return f"{user_id}_{day.isoformat()}"


@dataclass(frozen=True)
class TaskLedger:
    """Ordered set of task tags scheduled for a user on one day."""

    user_id: UUID
    day: date
    tasks: tuple[str, ...]
    status: LedgerStatus
    version: int
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def id(self) -> str:
        return ledger_id(self.user_id, self.day)

    @property
    def is_blank(self) -> bool:
        """True for an active ledger with no tags, which reads as no ledger."""
        return not self.tasks and self.status == LedgerStatus.ACTIVE
