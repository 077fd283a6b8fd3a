"""Mining session state machine with periodic pollers.

While a session is running three QTimers tick:
- miner stats check (emits ``miner_stats_check``),
- compute device check (emits ``devices_check``),
- sleep prevention (calls ``SleepGuard.prevent_sleep``).

Transitions are edge-triggered: starting a running session or stopping a
stopped one does nothing and returns False.

Callers must only start a session when the credentials are valid or demo
mining is in effect; this is not re-checked here.
"""

import logging
from typing import Protocol

from PySide6.QtCore import QObject, QTimer, Signal

from rigctrl.core.notifications import NotificationBus
from rigctrl.models.results import MiningState

logger = logging.getLogger(__name__)

DEFAULT_MINER_STATS_INTERVAL_MS = 5_000
DEFAULT_DEVICES_CHECK_INTERVAL_MS = 60_000
PREVENT_SLEEP_INTERVAL_MS = 20_000


class PowerGuard(Protocol):
    """OS power management hooks."""

    def prevent_sleep(self) -> None: ...

    def allow_sleep(self) -> None: ...


class MiningSessionController(QObject):
    """Owns the Stopped/Running session state and its side effects.

    Signals:
        miner_stats_check: Periodic request to query miner statistics.
        devices_check: Periodic request to check compute device health.

    Example:
        session = MiningSessionController(bus, SleepGuard())
        session.miner_stats_check.connect(miners.query_stats)
        session.start_mining()
    """

    miner_stats_check = Signal()
    devices_check = Signal()

    def __init__(
        self,
        bus: NotificationBus,
        sleep_guard: PowerGuard,
        miner_stats_interval_ms: int = DEFAULT_MINER_STATS_INTERVAL_MS,
        devices_check_interval_ms: int = DEFAULT_DEVICES_CHECK_INTERVAL_MS,
        prevent_sleep_interval_ms: int = PREVENT_SLEEP_INTERVAL_MS,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the session controller.

        Args:
            bus: Bus the started/stopped notifications are published on.
            sleep_guard: Keeps the OS awake while mining.
            miner_stats_interval_ms: Miner stats poll interval.
            devices_check_interval_ms: Compute device poll interval.
            prevent_sleep_interval_ms: Sleep prevention refresh interval.
            parent: Optional parent QObject.

        Raises:
            ValueError: If an interval is not positive.
        """
        super().__init__(parent)
        self._bus = bus
        self._sleep_guard = sleep_guard
        self._state = MiningState.STOPPED

        # Chain signals directly; emit() used as a slot mishandles its bool result
        self._miner_stats_timer = self._make_timer(miner_stats_interval_ms)
        self._miner_stats_timer.timeout.connect(self.miner_stats_check)
        self._devices_check_timer = self._make_timer(devices_check_interval_ms)
        self._devices_check_timer.timeout.connect(self.devices_check)
        self._prevent_sleep_timer = self._make_timer(prevent_sleep_interval_ms)
        self._prevent_sleep_timer.timeout.connect(self._sleep_guard.prevent_sleep)

    def _make_timer(self, interval_ms: int) -> QTimer:
        if interval_ms <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval_ms}")
        timer = QTimer(self)
        timer.setInterval(interval_ms)
        return timer

    @property
    def state(self) -> MiningState:
        """Return the current session state."""
        return self._state

    @property
    def is_currently_mining(self) -> bool:
        """Return True while the session is running."""
        return self._state is MiningState.RUNNING

    @property
    def miner_stats_timer(self) -> QTimer:
        """Return the miner stats poll timer."""
        return self._miner_stats_timer

    @property
    def devices_check_timer(self) -> QTimer:
        """Return the compute device poll timer."""
        return self._devices_check_timer

    @property
    def prevent_sleep_timer(self) -> QTimer:
        """Return the sleep prevention timer."""
        return self._prevent_sleep_timer

    def set_miner_stats_interval(self, interval_ms: int) -> None:
        """Change the miner stats poll interval (applies immediately if running)."""
        if interval_ms <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval_ms}")
        self._miner_stats_timer.setInterval(interval_ms)

    def set_devices_check_interval(self, interval_ms: int) -> None:
        """Change the compute device poll interval (applies immediately if running)."""
        if interval_ms <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval_ms}")
        self._devices_check_timer.setInterval(interval_ms)

    def start_mining(self) -> bool:
        """Start the session.

        Returns:
            True if the session was started, False if already running.
        """
        if self._state is MiningState.RUNNING:
            return False
        self._state = MiningState.RUNNING
        self._miner_stats_timer.start()
        self._devices_check_timer.start()
        self._start_prevent_sleep()
        logger.info("Mining started")
        self._bus.mining_started.emit()
        return True

    def stop_mining(self) -> bool:
        """Stop the session.

        Returns:
            True if the session was stopped, False if already stopped.
        """
        if self._state is MiningState.STOPPED:
            return False
        self._sleep_guard.allow_sleep()
        self._state = MiningState.STOPPED
        self._miner_stats_timer.stop()
        self._devices_check_timer.stop()
        self._prevent_sleep_timer.stop()
        logger.info("Mining stopped")
        self._bus.mining_stopped.emit()
        return True

    def _start_prevent_sleep(self) -> None:
        self._sleep_guard.prevent_sleep()
        self._prevent_sleep_timer.start()
