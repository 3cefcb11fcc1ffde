"""Supabase repository for task ledgers."""

from dataclasses import dataclass
from datetime import date, datetime
from uuid import UUID

from postgrest.exceptions import APIError
from supabase import Client

from daily_tracker.adapters.supabase_errors import (
    is_unique_violation,
    reading,
    writing,
)
from daily_tracker.domain.errors import LedgerConflict
from daily_tracker.domain.ledger import LedgerStatus, TaskLedger, ledger_id
from daily_tracker.services.ledger import LedgerRepository

TABLE = "task_ledgers"


@dataclass
class SupabaseLedgerRepository(LedgerRepository):
    """Supabase-backed ledger storage with version-checked writes."""

    client: Client

    def get_ledger(self, user_id: UUID, day: date) -> TaskLedger | None:
        """Return the ledger for a user's day, if present."""
        key = ledger_id(user_id, day)
        with reading(f"ledger {key}"):
            response = (
                self.client.table(TABLE).select("*").eq("id", key).limit(1).execute()
            )
        if not response.data:
            return None
        return _parse_ledger(response.data[0])

    def create_ledger(self, ledger: TaskLedger) -> TaskLedger:
        """Insert a new ledger row; an existing row means another writer won."""
        with writing(f"ledger {ledger.id}"):
            try:
                response = (
                    self.client.table(TABLE).insert(_ledger_row(ledger)).execute()
                )
            except APIError as exc:
                if is_unique_violation(exc):
                    raise LedgerConflict(ledger.id) from exc
                raise
        if not response.data:
            raise LedgerConflict(ledger.id)
        return _parse_ledger(response.data[0])

    def replace_ledger(self, ledger: TaskLedger, expected_version: int) -> TaskLedger:
        """Overwrite a ledger only if its stored version is ``expected_version``."""
        with writing(f"ledger {ledger.id}"):
            response = (
                self.client.table(TABLE)
                .update(_ledger_row(ledger))
                .eq("id", ledger.id)
                .eq("version", expected_version)
                .execute()
            )
        if not response.data:
            raise LedgerConflict(ledger.id)
        return _parse_ledger(response.data[0])

    def list_ledgers(self, user_id: UUID, start: date, end: date) -> list[TaskLedger]:
        """Return ledgers in an inclusive date range, oldest first."""
        with reading(f"ledgers for {user_id}"):
            response = (
                self.client.table(TABLE)
                .select("*")
                .eq("user_id", str(user_id))
                .gte("date", start.isoformat())
                .lte("date", end.isoformat())
                .order("date", desc=False)
                .execute()
            )
        return [_parse_ledger(row) for row in response.data or []]


def _ledger_row(ledger: TaskLedger) -> dict[str, object]:
    return {
        "id": ledger.id,
        "user_id": str(ledger.user_id),
        "date": ledger.day.isoformat(),
        "tasks": list(ledger.tasks),
        "status": ledger.status.value,
        "version": ledger.version,
        "created_at": ledger.created_at.isoformat() if ledger.created_at else None,
        "updated_at": ledger.updated_at.isoformat() if ledger.updated_at else None,
    }


def _parse_ledger(row: dict[str, object]) -> TaskLedger:
    """Parse a ledger row into a domain model."""
    return TaskLedger(
        user_id=UUID(str(row["user_id"])),
        day=date.fromisoformat(str(row["date"])),
        tasks=tuple(str(tag) for tag in row.get("tasks") or []),
        status=LedgerStatus(row.get("status") or LedgerStatus.ACTIVE),
        version=int(row.get("version", 1)),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _parse_timestamp(raw: object) -> datetime | None:
    if isinstance(raw, str) and raw:
        return datetime.fromisoformat(raw)
    return None
