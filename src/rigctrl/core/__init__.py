"""Core business logic layer.

This module contains the controllers that own the mining client's state
and publish its changes as Qt signals.

Classes:
    ApplicationStateManager: Single owner of all controller state.
    ConfigManager: QSettings wrapper for configuration.
    NotificationBus: Qt signals carrying state-change events.
    MiningSessionController: Stopped/Running session with pollers.
"""

from rigctrl.core.config import ConfigManager
from rigctrl.core.notifications import NotificationBus
from rigctrl.core.session import MiningSessionController
from rigctrl.core.state import ApplicationStateManager

__all__ = [
    "ApplicationStateManager",
    "ConfigManager",
    "MiningSessionController",
    "NotificationBus",
]
