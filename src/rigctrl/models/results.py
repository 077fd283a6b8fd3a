"""Outcome and state enums shared by the controllers."""

from enum import Enum


class SetResult(Enum):
    """Outcome of a validated setter."""

    INVALID = 0
    NOTHING_TO_CHANGE = 1
    CHANGED = 2


class MiningState(Enum):
    """Lifecycle of the mining session."""

    STOPPED = "stopped"
    RUNNING = "running"
