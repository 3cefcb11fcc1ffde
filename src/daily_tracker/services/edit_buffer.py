"""Single-slot undo for deleting rows from an edited list."""

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass

DEFAULT_UNDO_WINDOW_SECONDS = 5.0


@dataclass(frozen=True)
class Idle:
    """No deletion can be undone."""


@dataclass(frozen=True)
class PendingUndo:
    """The most recent deletion, undoable until ``deadline``."""

    item: object
    index: int
    deadline: float


IDLE = Idle()


class EditBuffer:
    """Holds at most one deleted row so it can be put back where it was.

    A deletion stays undoable for ``window_seconds``. When an event loop is
    running a timer clears the buffer at the deadline; the deadline is also
    checked on every access so expiry holds without a loop.
    """

    def __init__(
        self,
        window_seconds: float = DEFAULT_UNDO_WINDOW_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.window_seconds = window_seconds
        self._clock = clock
        self._state: Idle | PendingUndo = IDLE
        self._timer: asyncio.TimerHandle | None = None

    @property
    def state(self) -> Idle | PendingUndo:
        self._expire_if_due()
        return self._state

    @property
    def pending(self) -> PendingUndo | None:
        state = self.state
        return state if isinstance(state, PendingUndo) else None

    def delete(self, items: list, index: int) -> object:
        """Remove ``items[index]`` now and keep it for undo.

        Any deletion still pending becomes permanent. Negative indexes count
        from the end and are stored as the position they removed.
        """
        index = range(len(items))[index]
        item = items.pop(index)
        self._cancel_timer()
        self._state = PendingUndo(
            item=item, index=index, deadline=self._clock() + self.window_seconds
        )
        self._start_timer()
        return item

    def undo(self, items: list) -> object | None:
        """Re-insert the pending item at its original index."""
        state = self.state
        if not isinstance(state, PendingUndo):
            return None
        self._clear()
        items.insert(min(state.index, len(items)), state.item)
        return state.item

    def expire(self) -> None:
        """Make the pending deletion permanent."""
        self._clear()

    def _expire_if_due(self) -> None:
        state = self._state
        if isinstance(state, PendingUndo) and self._clock() >= state.deadline:
            self._clear()

    def _clear(self) -> None:
        self._cancel_timer()
        self._state = IDLE

    def _start_timer(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return
        pending = self._state
        self._timer = loop.call_later(
            self.window_seconds, self._on_timeout, pending
        )

    def _on_timeout(self, pending: PendingUndo) -> None:
        if self._state is pending:
            self._timer = None
            self._state = IDLE

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
