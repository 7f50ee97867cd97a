"""
Cancellable scheduled callbacks, grouped by session.

Nothing here runs in the background. The owner calls `run_due()` from its
event loop (a Streamlit rerun or fragment poll) and every timer whose deadline
has passed fires, earliest first. The clock is injectable so tests can move
time by hand.
"""

from __future__ import annotations

import itertools
import time
from dataclasses import dataclass, field
from typing import Callable

from medquote.utils.logger import get_logger

logger = get_logger()


@dataclass(order=True)
class TimerHandle:
    deadline: float
    seq: int
    session_id: str = field(compare=False)
    name: str = field(compare=False, default="")
    callback: Callable[[], None] = field(compare=False, repr=False, default=lambda: None)
    cancelled: bool = field(compare=False, default=False)
    fired: bool = field(compare=False, default=False)

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class TimerArena:
    """
    Registry of pending timers keyed by session id.

    Delays are in milliseconds; the clock returns seconds (time.monotonic by default).
    """

    def __init__(self, clock: Callable[[], float] | None = None) -> None:
        self._clock = clock or time.monotonic
        self._sessions: dict[str, dict[int, TimerHandle]] = {}
        self._seq = itertools.count()

    def now(self) -> float:
        return self._clock()

    def schedule(
        self,
        session_id: str,
        delay_ms: int,
        callback: Callable[[], None],
        name: str = "",
        after: TimerHandle | None = None,
    ) -> TimerHandle:
        """
        Schedule callback delay_ms from now, or delay_ms after the deadline of
        `after` when given, so chained timers do not drift with poll lag.
        """
        base = after.deadline if after is not None else self._clock()
        handle = TimerHandle(
            deadline=base + max(0, delay_ms) / 1000.0,
            seq=next(self._seq),
            session_id=session_id,
            name=name,
            callback=callback,
        )
        self._sessions.setdefault(session_id, {})[handle.seq] = handle
        logger.debug("Timer scheduled: %s/%s in %d ms", session_id, name or handle.seq, delay_ms)
        return handle

    def cancel(self, handle: TimerHandle) -> bool:
        """Cancel one timer. Returns False when it already fired or was cancelled."""
        if not handle.active:
            return False
        handle.cancelled = True
        timers = self._sessions.get(handle.session_id)
        if timers is not None:
            timers.pop(handle.seq, None)
            if not timers:
                del self._sessions[handle.session_id]
        logger.debug("Timer cancelled: %s/%s", handle.session_id, handle.name or handle.seq)
        return True

    def cancel_session(self, session_id: str) -> int:
        """Cancel every pending timer of a session. Returns how many were cancelled."""
        timers = self._sessions.pop(session_id, {})
        for handle in timers.values():
            handle.cancelled = True
        if timers:
            logger.info("Cancelled %d pending timer(s) for session %s", len(timers), session_id)
        return len(timers)

    def pending(self, session_id: str | None = None) -> list[TimerHandle]:
        if session_id is not None:
            return sorted(self._sessions.get(session_id, {}).values())
        return sorted(h for timers in self._sessions.values() for h in timers.values())

    def next_deadline(self, session_id: str | None = None) -> float | None:
        handles = self.pending(session_id)
        return handles[0].deadline if handles else None

    def run_due(self, session_id: str | None = None) -> int:
        """
        Fire due timers in deadline order. Timers scheduled by a callback fire in
        the same pass if they are already due. Returns the number fired.
        """
        fired = 0
        while True:
            now = self._clock()
            due = [h for h in self.pending(session_id) if h.deadline <= now]
            if not due:
                return fired
            handle = due[0]
            timers = self._sessions.get(handle.session_id, {})
            timers.pop(handle.seq, None)
            if not timers:
                self._sessions.pop(handle.session_id, None)
            handle.fired = True
            fired += 1
            try:
                handle.callback()
            except Exception as e:
                logger.exception("Timer %s/%s failed: %s", handle.session_id, handle.name, e)
