"""Tests for VersionController."""

import pytest
from pytestqt.qtbot import QtBot

from rigctrl import __version__
from rigctrl.core.notifications import NotificationBus
from rigctrl.core.version import (
    NEW_VERSION_RELEASE_URL,
    RELEASES_URL,
    VersionController,
    parse_version,
)


@pytest.fixture
def bus() -> NotificationBus:
    """Return a fresh notification bus."""
    return NotificationBus()


def make_controller(
    bus: NotificationBus, local: str = "1.2.0", postfix: str = " - Alpha"
) -> tuple[VersionController, list[str]]:
    """Build a controller that records opened URLs."""
    opened: list[str] = []
    controller = VersionController(
        bus, local_version=local, build_postfix=postfix, open_url=opened.append
    )
    return controller, opened


class TestParseVersion:
    """Tests for parse_version."""

    def test_pads_missing_parts(self) -> None:
        """Short versions are zero-padded."""
        assert parse_version("1.2") == (1, 2, 0, 0)
        assert parse_version("1.2") == parse_version("1.2.0")

    def test_accepts_v_prefix(self) -> None:
        """A leading v is ignored."""
        assert parse_version("v1.9.1.5") == (1, 9, 1, 5)

    def test_numeric_ordering(self) -> None:
        """Components compare numerically, not lexically."""
        assert parse_version("1.10.0") > parse_version("1.9.0")

    @pytest.mark.parametrize("bad", ["", "abc", "1.2.x", "1.2.3.4.5"])
    def test_rejects_invalid(self, bad: str) -> None:
        """Non-numeric versions raise ValueError."""
        with pytest.raises(ValueError, match="Invalid version"):
            parse_version(bad)


class TestOnVersionUpdate:
    """Tests for on_version_update."""

    def test_newer_online_version_notifies(self, bus: NotificationBus, qtbot: QtBot) -> None:
        """A newer online version publishes a message with the version."""
        controller, _ = make_controller(bus)
        with qtbot.wait_signal(bus.version_available, timeout=100) as blocker:
            controller.on_version_update("1.3.0")

        assert "v1.3.0" in blocker.args[0]
        assert blocker.args[0].startswith("IMPORTANT! New version")
        assert controller.online_version == "1.3.0"

    def test_equal_version_with_postfix_notifies_once(self, bus: NotificationBus) -> None:
        """A pre-release build is superseded by an equal online release."""
        controller, _ = make_controller(bus)
        messages: list[str] = []
        bus.version_available.connect(messages.append)

        controller.on_version_update("1.2.0")

        assert len(messages) == 1
        assert "v1.2.0" in messages[0]

    def test_equal_version_without_postfix_is_silent(
        self, bus: NotificationBus, qtbot: QtBot
    ) -> None:
        """A stable build equal to online is up to date."""
        controller, _ = make_controller(bus, postfix="")
        with qtbot.assert_not_emitted(bus.version_available):
            controller.on_version_update("1.2.0")

    def test_older_online_version_is_silent(self, bus: NotificationBus, qtbot: QtBot) -> None:
        """A local build newer than online does not notify."""
        controller, _ = make_controller(bus, local="1.3.0")
        with qtbot.assert_not_emitted(bus.version_available):
            controller.on_version_update("1.2.0")

    def test_none_is_silent(self, bus: NotificationBus, qtbot: QtBot) -> None:
        """No online version means no comparison."""
        controller, _ = make_controller(bus)
        with qtbot.assert_not_emitted(bus.version_available):
            controller.on_version_update(None)
        assert controller.online_version is None

    def test_unparseable_version_is_ignored(
        self, bus: NotificationBus, qtbot: QtBot, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Garbage from the poller is logged, not raised."""
        controller, _ = make_controller(bus)
        with qtbot.assert_not_emitted(bus.version_available):
            controller.on_version_update("latest")
        assert controller.online_version == "latest"
        assert "online version 'latest'" in caplog.text


class TestNewVersionUrl:
    """Tests for visit_new_version_url."""

    def test_generic_url_without_online_version(self, bus: NotificationBus) -> None:
        """Without an online version the release list is opened."""
        controller, opened = make_controller(bus)
        assert controller.visit_new_version_url() == RELEASES_URL
        assert opened == [RELEASES_URL]

    def test_versioned_url(self, bus: NotificationBus) -> None:
        """With an online version its release page is opened."""
        controller, opened = make_controller(bus)
        controller.on_version_update("1.3.0")
        assert controller.visit_new_version_url() == NEW_VERSION_RELEASE_URL + "1.3.0"
        assert opened == [NEW_VERSION_RELEASE_URL + "1.3.0"]


class TestTitle:
    """Tests for the title string."""

    def test_title(self, bus: NotificationBus) -> None:
        """Title combines version and postfix."""
        controller, _ = make_controller(bus)
        assert controller.title == " v1.2.0 - Alpha"

    def test_defaults_to_package_version(self, bus: NotificationBus) -> None:
        """Without an explicit version the package version is used."""
        assert VersionController(bus).local_version == __version__

    def test_rejects_unparseable_local_version(self, bus: NotificationBus) -> None:
        """A malformed build version fails at construction."""
        with pytest.raises(ValueError, match="Invalid version string"):
            VersionController(bus, local_version="dev-build")
