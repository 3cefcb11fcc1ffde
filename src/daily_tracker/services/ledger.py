"""Task ledger merge protocol shared by every domain."""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import UTC, date, datetime
from typing import Protocol
from uuid import UUID

from daily_tracker.domain.errors import (
    ConflictRetry,
    LedgerConflict,
    OwnershipViolation,
)
from daily_tracker.domain.ledger import (
    Domain,
    LedgerStatus,
    TaskLedger,
    ledger_id,
    owner_of,
    partition,
)

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 5


class LedgerRepository(Protocol):
    """Persistence interface for task ledgers."""

    def get_ledger(self, user_id: UUID, day: date) -> TaskLedger | None:
        """Return the ledger for a user's day, if present."""

    def create_ledger(self, ledger: TaskLedger) -> TaskLedger:
        """Insert a new ledger; raise LedgerConflict if one already exists."""

    def replace_ledger(self, ledger: TaskLedger, expected_version: int) -> TaskLedger:
        """Overwrite a ledger; raise LedgerConflict if its version moved."""

    def list_ledgers(self, user_id: UUID, start: date, end: date) -> list[TaskLedger]:
        """Return ledgers with start <= day <= end ordered by day."""


@dataclass
class LedgerService:
    """Reads ledgers and applies version-checked read-modify-write cycles."""

    repository: LedgerRepository
    max_attempts: int = DEFAULT_MAX_ATTEMPTS

    def get_ledger(self, user_id: UUID, day: date) -> TaskLedger | None:
        """Return the ledger for a day; None means nothing is scheduled."""
        return _visible(self.repository.get_ledger(user_id, day))

    def get_tasks(self, user_id: UUID, day: date) -> tuple[str, ...]:
        """Return the tags scheduled for a day."""
        ledger = self.get_ledger(user_id, day)
        return ledger.tasks if ledger else ()

    def list_range(self, user_id: UUID, start: date, end: date) -> list[TaskLedger]:
        """Return ledgers for an inclusive date range."""
        return [
            ledger
            for ledger in self.repository.list_ledgers(user_id, start, end)
            if not ledger.is_blank
        ]

    def merge_owned(
        self,
        user_id: UUID,
        day: date,
        domain: Domain,
        desired: Callable[[tuple[str, ...]], Iterable[str]],
    ) -> TaskLedger | None:
        """Replace the tags owned by ``domain`` with ``desired(owned)``.

        Tags owned by other domains keep their values and positions. The
        cycle is retried when another writer updates the ledger between the
        read and the write.
        """
        for attempt in range(1, self.max_attempts + 1):
            current = self.repository.get_ledger(user_id, day)
            current_tasks = current.tasks if current else ()
            owned, _ = partition(current_tasks, domain)
            wanted = _dedupe(desired(owned))
            _check_ownership(domain, wanted)
            merged = _merge(current_tasks, domain, wanted)
            if current is not None and merged == current.tasks:
                return current
            if current is None and not merged:
                return None
            try:
                return self._write(user_id, day, current, merged, status=None)
            except LedgerConflict:
                logger.warning(
                    "Ledger %s changed during %s merge (attempt %s/%s)",
                    ledger_id(user_id, day),
                    domain,
                    attempt,
                    self.max_attempts,
                )
        raise ConflictRetry(ledger_id(user_id, day), self.max_attempts)

    def set_status(
        self, user_id: UUID, day: date, status: LedgerStatus
    ) -> TaskLedger | None:
        """Update the day status; days without a ledger are left untouched."""
        for attempt in range(1, self.max_attempts + 1):
            current = self.repository.get_ledger(user_id, day)
            if current is None or current.is_blank:
                return None
            if current.status == status:
                return current
            try:
                return self._write(user_id, day, current, current.tasks, status)
            except LedgerConflict:
                logger.warning(
                    "Ledger %s changed during status update (attempt %s/%s)",
                    ledger_id(user_id, day),
                    attempt,
                    self.max_attempts,
                )
        raise ConflictRetry(ledger_id(user_id, day), self.max_attempts)

    def _write(
        self,
        user_id: UUID,
        day: date,
        current: TaskLedger | None,
        tasks: tuple[str, ...],
        status: LedgerStatus | None,
    ) -> TaskLedger:
        now = datetime.now(tz=UTC)
        if current is None:
            created = self.repository.create_ledger(
                TaskLedger(
                    user_id=user_id,
                    day=day,
                    tasks=tasks,
                    status=status or LedgerStatus.ACTIVE,
                    version=1,
                    created_at=now,
                    updated_at=now,
                )
            )
            logger.info("Created ledger %s with %s", created.id, list(tasks))
            return created
        updated = self.repository.replace_ledger(
            TaskLedger(
                user_id=user_id,
                day=day,
                tasks=tasks,
                status=status or current.status,
                version=current.version + 1,
                created_at=current.created_at,
                updated_at=now,
            ),
            expected_version=current.version,
        )
        logger.info(
            "Updated ledger %s to version %s with %s",
            updated.id,
            updated.version,
            list(tasks),
        )
        return updated


@dataclass
class DomainWriteAdapter:
    """Writes one domain's share of the ledger without touching the rest."""

    domain: Domain
    ledger_service: LedgerService

    def add_task(self, user_id: UUID, task_id: str, day: date) -> TaskLedger | None:
        """Schedule a single tag owned by this domain."""
        _check_ownership(self.domain, [task_id])
        return self.ledger_service.merge_owned(
            user_id, day, self.domain, lambda owned: [*owned, task_id]
        )

    def remove_task(
        self, user_id: UUID, task_id: str, day: date
    ) -> TaskLedger | None:
        """Unschedule a single tag owned by this domain."""
        _check_ownership(self.domain, [task_id])
        return self.ledger_service.merge_owned(
            user_id,
            day,
            self.domain,
            lambda owned: [tag for tag in owned if tag != task_id],
        )

    def replace_owned_set(
        self, user_id: UUID, day: date, full_owned_set: Iterable[str]
    ) -> TaskLedger | None:
        """Make this domain's tags for the day exactly ``full_owned_set``."""
        wanted = _dedupe(full_owned_set)
        _check_ownership(self.domain, wanted)
        return self.ledger_service.merge_owned(
            user_id, day, self.domain, lambda _owned: wanted
        )


def _visible(ledger: TaskLedger | None) -> TaskLedger | None:
    return None if ledger is None or ledger.is_blank else ledger


def _dedupe(tags: Iterable[str]) -> list[str]:
    return list(dict.fromkeys(tags))


def _check_ownership(domain: Domain, tags: Iterable[str]) -> None:
    foreign = {tag for tag in tags if owner_of(tag) != domain}
    if foreign:
        raise OwnershipViolation(domain, foreign)


def _merge(
    current: tuple[str, ...], domain: Domain, wanted: list[str]
) -> tuple[str, ...]:
    """Keep foreign tags and surviving own tags in place, append new own tags."""
    keep = set(wanted)
    merged = [
        tag for tag in current if owner_of(tag) != domain or tag in keep
    ]
    present = set(merged)
    merged.extend(tag for tag in wanted if tag not in present)
    return tuple(merged)
