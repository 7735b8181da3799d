# -*- coding: utf-8 -*-
"""Guard allowing a single plan request in flight."""
from enum import Enum


class LatchState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"


class PlanRequestLatch:
    """
    Two-state latch: IDLE -> REQUESTING on try_acquire(), back to IDLE on
    release(). A trigger arriving while REQUESTING is rejected, never queued.
    """

    def __init__(self):
        self._state = LatchState.IDLE

    @property
    def state(self) -> LatchState:
        return self._state

    @property
    def is_requesting(self) -> bool:
        return self._state is LatchState.REQUESTING

    def try_acquire(self) -> bool:
        if self._state is LatchState.REQUESTING:
            return False
        self._state = LatchState.REQUESTING
        return True

    def release(self) -> None:
        self._state = LatchState.IDLE
