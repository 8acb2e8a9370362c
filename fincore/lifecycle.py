"""Request lifecycle tracking.

Each lane is a small state machine::

    IDLE -> PENDING -> SUCCEEDED | FAILED -> (finish) -> IDLE

The terminal states stay until the consumer acknowledges them with
``finish``; that is how a one-shot success/error indicator gets cleared.
A request started before a failure is acknowledged keeps that failure: the
lane ends FAILED and ``last_error`` still reports it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Hashable, Iterable, Optional, Tuple

from fincore.errors import LifecycleError
from fincore.events import REQUEST_STATUS_CHANGED, EventBus

logger = logging.getLogger(__name__)


class RequestStatus(Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL = (RequestStatus.SUCCEEDED, RequestStatus.FAILED)


@dataclass
class _Lane:
    status: RequestStatus = RequestStatus.IDLE
    in_flight: int = 0
    failed: bool = False
    error: Optional[BaseException] = None


class RequestTracker:
    def __init__(self, lanes: Iterable[Hashable], bus: Optional[EventBus] = None):
        self._lanes: Dict[Hashable, _Lane] = {lane: _Lane() for lane in lanes}
        if not self._lanes:
            raise ValueError("RequestTracker needs at least one lane")
        self._bus = bus

    def _lane(self, lane: Hashable) -> _Lane:
        try:
            return self._lanes[lane]
        except KeyError:
            raise LifecycleError(f"Unknown lane {lane!r}") from None

    def _move(self, lane: Hashable, state: _Lane, new: RequestStatus) -> None:
        old = state.status
        state.status = new
        logger.debug("lane %s: %s -> %s", lane, old.value, new.value)
        if self._bus is not None:
            self._bus.publish(REQUEST_STATUS_CHANGED, {"lane": lane, "from": old, "to": new})

    def begin(self, lane: Hashable) -> None:
        state = self._lane(lane)
        # an unacknowledged failure stays on the lane until finish()
        if state.status is not RequestStatus.PENDING:
            self._move(lane, state, RequestStatus.PENDING)
        state.in_flight += 1

    def _complete(self, lane: Hashable, error: Optional[BaseException]) -> None:
        state = self._lane(lane)
        if state.status is not RequestStatus.PENDING:
            raise LifecycleError(f"Lane {lane!r} has no pending request (status {state.status.value})")
        state.in_flight -= 1
        if error is not None:
            state.failed = True
            state.error = error
        if state.in_flight == 0:
            self._move(lane, state, RequestStatus.FAILED if state.failed else RequestStatus.SUCCEEDED)

    def succeed(self, lane: Hashable) -> None:
        self._complete(lane, None)

    def fail(self, lane: Hashable, error: BaseException) -> None:
        self._complete(lane, error)

    def finish(self, lane: Hashable) -> None:
        """Acknowledge a terminal status and return the lane to IDLE."""
        state = self._lane(lane)
        if state.status is RequestStatus.PENDING:
            raise LifecycleError(f"Lane {lane!r} is still pending")
        if state.status in TERMINAL:
            state.failed = False
            state.error = None
            self._move(lane, state, RequestStatus.IDLE)

    def status(self, lane: Hashable) -> RequestStatus:
        return self._lane(lane).status

    def last_error(self, lane: Hashable) -> Optional[BaseException]:
        return self._lane(lane).error

    @property
    def lanes(self) -> Tuple[Hashable, ...]:
        return tuple(self._lanes)

    @property
    def is_loading(self) -> bool:
        return any(s.status is RequestStatus.PENDING for s in self._lanes.values())

    def observe(self) -> bool:
        """Acknowledge every terminal lane and report whether anything is still loading."""
        for lane, state in self._lanes.items():
            if state.status in TERMINAL:
                self.finish(lane)
        return self.is_loading
