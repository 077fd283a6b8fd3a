"""Tests for MiningSessionController."""

import sys

import pytest
from conftest import FakeSleepGuard
from pytestqt.qtbot import QtBot

from rigctrl.core.notifications import NotificationBus
from rigctrl.core.session import MiningSessionController
from rigctrl.models.results import MiningState


@pytest.fixture
def bus() -> NotificationBus:
    """Return a fresh notification bus."""
    return NotificationBus()


@pytest.fixture
def session(
    qtbot: QtBot, bus: NotificationBus, sleep_guard: FakeSleepGuard
) -> MiningSessionController:
    """Return a stopped session with fast timers."""
    return MiningSessionController(
        bus,
        sleep_guard,
        miner_stats_interval_ms=20,
        devices_check_interval_ms=30,
        prevent_sleep_interval_ms=40,
    )


class TestSessionInit:
    """Test initial state."""

    def test_initially_stopped(self, session: MiningSessionController) -> None:
        """Session starts stopped with idle timers."""
        assert session.state is MiningState.STOPPED
        assert session.is_currently_mining is False
        assert not session.miner_stats_timer.isActive()
        assert not session.devices_check_timer.isActive()
        assert not session.prevent_sleep_timer.isActive()

    def test_rejects_non_positive_interval(
        self, bus: NotificationBus, sleep_guard: FakeSleepGuard
    ) -> None:
        """Intervals must be positive."""
        with pytest.raises(ValueError, match="positive"):
            MiningSessionController(bus, sleep_guard, miner_stats_interval_ms=0)


class TestStartMining:
    """Test start_mining."""

    def test_start(
        self,
        session: MiningSessionController,
        bus: NotificationBus,
        sleep_guard: FakeSleepGuard,
        qtbot: QtBot,
    ) -> None:
        """Starting runs the timers, prevents sleep and notifies."""
        with qtbot.wait_signal(bus.mining_started, timeout=100):
            assert session.start_mining() is True

        assert session.state is MiningState.RUNNING
        assert session.miner_stats_timer.isActive()
        assert session.devices_check_timer.isActive()
        assert session.prevent_sleep_timer.isActive()
        assert sleep_guard.calls == ["prevent"]

    def test_start_twice_is_noop(
        self,
        session: MiningSessionController,
        bus: NotificationBus,
        sleep_guard: FakeSleepGuard,
        qtbot: QtBot,
    ) -> None:
        """A second start does nothing."""
        session.start_mining()

        with qtbot.assert_not_emitted(bus.mining_started):
            assert session.start_mining() is False

        assert sleep_guard.calls == ["prevent"]
        assert session.state is MiningState.RUNNING

    def test_pollers_tick(self, session: MiningSessionController, qtbot: QtBot) -> None:
        """Running timers emit the poll signals."""
        session.start_mining()

        with qtbot.wait_signals(
            [session.miner_stats_check, session.devices_check], timeout=1000
        ):
            pass

    def test_prevent_sleep_refreshed(
        self, session: MiningSessionController, sleep_guard: FakeSleepGuard, qtbot: QtBot
    ) -> None:
        """Sleep prevention is refreshed while running."""
        session.start_mining()
        qtbot.wait_until(lambda: sleep_guard.calls.count("prevent") >= 2, timeout=1000)

    def test_notification_after_state_change(
        self, session: MiningSessionController, bus: NotificationBus
    ) -> None:
        """Subscribers see the new state when notified."""
        seen: list[bool] = []
        bus.mining_started.connect(lambda: seen.append(session.is_currently_mining))
        session.start_mining()
        assert seen == [True]


class TestStopMining:
    """Test stop_mining."""

    def test_stop(
        self,
        session: MiningSessionController,
        bus: NotificationBus,
        sleep_guard: FakeSleepGuard,
        qtbot: QtBot,
    ) -> None:
        """Stopping allows sleep, halts the timers and notifies."""
        session.start_mining()

        with qtbot.wait_signal(bus.mining_stopped, timeout=100):
            assert session.stop_mining() is True

        assert session.state is MiningState.STOPPED
        assert not session.miner_stats_timer.isActive()
        assert not session.devices_check_timer.isActive()
        assert not session.prevent_sleep_timer.isActive()
        assert sleep_guard.calls == ["prevent", "allow"]

    def test_stop_when_stopped_is_noop(
        self,
        session: MiningSessionController,
        bus: NotificationBus,
        sleep_guard: FakeSleepGuard,
        qtbot: QtBot,
    ) -> None:
        """Stopping a stopped session does nothing."""
        with qtbot.assert_not_emitted(bus.mining_stopped):
            assert session.stop_mining() is False
        assert sleep_guard.calls == []

    def test_stop_twice_allows_sleep_once(
        self, session: MiningSessionController, sleep_guard: FakeSleepGuard
    ) -> None:
        """The sleep guard is released only once."""
        session.start_mining()
        session.stop_mining()
        assert session.stop_mining() is False
        assert sleep_guard.calls.count("allow") == 1

    def test_restart_cycle(self, session: MiningSessionController) -> None:
        """A stopped session can be started again."""
        assert session.start_mining() is True
        assert session.stop_mining() is True
        assert session.start_mining() is True
        assert session.is_currently_mining


class TestIntervals:
    """Test interval changes."""

    def test_set_intervals(self, session: MiningSessionController) -> None:
        """Intervals can be changed."""
        session.set_miner_stats_interval(1500)
        session.set_devices_check_interval(2500)
        assert session.miner_stats_timer.interval() == 1500
        assert session.devices_check_timer.interval() == 2500

    def test_set_invalid_interval(self, session: MiningSessionController) -> None:
        """Non-positive intervals are rejected."""
        with pytest.raises(ValueError, match="positive"):
            session.set_devices_check_interval(-5)


class TestPollerLongRun:
    """Test sustained ticking of the poll timers."""

    def test_fast_pollers_keep_bool_refcount(
        self, bus: NotificationBus, sleep_guard: FakeSleepGuard, qtbot: QtBot
    ) -> None:
        """Hundreds of ticks do not drain references to True."""
        session = MiningSessionController(
            bus,
            sleep_guard,
            miner_stats_interval_ms=1,
            devices_check_interval_ms=1,
            prevent_sleep_interval_ms=1,
        )
        ticks: list[int] = []
        session.miner_stats_check.connect(lambda: ticks.append(1))
        before = sys.getrefcount(True)

        session.start_mining()
        qtbot.wait_until(lambda: len(ticks) >= 200, timeout=5000)
        session.stop_mining()

        assert sys.getrefcount(True) - before > -50
