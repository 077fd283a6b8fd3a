"""Test fixtures for rigctrl tests."""

import os
from collections.abc import Generator
from pathlib import Path

import pytest

# Run Qt without a display (CI)
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from rigctrl.core.config import ConfigManager  # noqa: E402
from rigctrl.core.exchange import ExchangeRateTable  # noqa: E402
from rigctrl.core.state import ApplicationStateManager  # noqa: E402


class FakeStats:
    """Records credentials pushed to the stats service."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, str, str]] = []

    def set_credentials(self, btc_address: str, worker_name: str, rig_group: str) -> None:
        self.calls.append((btc_address, worker_name, rig_group))


class FakeMiners:
    """Counts miner restart requests."""

    def __init__(self) -> None:
        self.restarts = 0

    def restart_miners(self) -> None:
        self.restarts += 1


class FakeSleepGuard:
    """Records sleep guard calls in order."""

    def __init__(self) -> None:
        self.calls: list[str] = []

    def prevent_sleep(self) -> None:
        self.calls.append("prevent")

    def allow_sleep(self) -> None:
        self.calls.append("allow")


@pytest.fixture
def config(tmp_path: Path) -> Generator[ConfigManager, None, None]:
    """Return a ConfigManager backed by a throwaway INI file."""
    manager = ConfigManager.from_file(tmp_path / "rigctrl.ini")
    yield manager
    manager.clear()


@pytest.fixture
def stats() -> FakeStats:
    """Return a fake stats service."""
    return FakeStats()


@pytest.fixture
def miners() -> FakeMiners:
    """Return a fake mining supervisor."""
    return FakeMiners()


@pytest.fixture
def sleep_guard() -> FakeSleepGuard:
    """Return a fake sleep guard."""
    return FakeSleepGuard()


@pytest.fixture
def opened_urls() -> list[str]:
    """Collect URLs handed to the navigation callback."""
    return []


@pytest.fixture
def rates() -> ExchangeRateTable:
    """Return an exchange table with fixed rates."""
    table = ExchangeRateTable()
    table.set_usd_btc_rate(50_000.0)
    table.update_rates({"EUR": 0.9, "GBP": 0.8})
    return table


@pytest.fixture
def state(
    qapp: object,
    config: ConfigManager,
    stats: FakeStats,
    miners: FakeMiners,
    sleep_guard: FakeSleepGuard,
    rates: ExchangeRateTable,
    opened_urls: list[str],
) -> ApplicationStateManager:
    """Return an ApplicationStateManager wired to fakes."""
    return ApplicationStateManager(
        config,
        stats=stats,
        miners=miners,
        sleep_guard=sleep_guard,
        rates=rates,
        local_version="1.2.0",
        open_url=opened_urls.append,
    )
