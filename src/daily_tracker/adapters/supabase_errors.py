"""Translate Supabase client failures into domain errors."""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import httpx
from postgrest.exceptions import APIError

from daily_tracker.domain.errors import DatastoreUnavailable, WriteFailure

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


@contextmanager
def reading(what: str) -> Iterator[None]:
    """Raise DatastoreUnavailable when a read fails."""
    try:
        yield
    except (APIError, httpx.HTTPError) as exc:
        logger.warning("Failed to read %s: %s", what, exc)
        raise DatastoreUnavailable(f"Failed to read {what}") from exc


@contextmanager
def writing(what: str) -> Iterator[None]:
    """Raise WriteFailure when a write fails."""
    try:
        yield
    except (APIError, httpx.HTTPError) as exc:
        logger.warning("Failed to write %s: %s", what, exc)
        raise WriteFailure(f"Failed to write {what}") from exc


def is_unique_violation(exc: APIError) -> bool:
    return exc.code == UNIQUE_VIOLATION
