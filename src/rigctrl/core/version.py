"""Version tracking and upgrade notices.

The online version is reported by an external poller. When it is newer
than the running build (or equal, for pre-release builds) a translated
notice is published on the notification bus.
"""

import logging
import re
import threading
from collections.abc import Callable

from PySide6.QtCore import QCoreApplication, QUrl
from PySide6.QtGui import QDesktopServices

from rigctrl import __version__
from rigctrl.core.notifications import NotificationBus

logger = logging.getLogger(__name__)

# Pre-release qualifier appended to the title; non-empty marks this build
# as superseded by an equal-numbered release
BUILD_POSTFIX = " - Alpha"

RELEASES_URL = "https://github.com/NiceHash/NiceHashMinerLegacy/releases/"
NEW_VERSION_RELEASE_URL = "https://github.com/NiceHash/NiceHashMinerLegacy/releases/tag/"

_VERSION_RE = re.compile(r"v?(\d+(?:\.\d+){0,3})")
_VERSION_PARTS = 4


def parse_version(version: str) -> tuple[int, ...]:
    """Parse a dotted version string into a comparable tuple.

    Missing components are zero, so "1.2" == "1.2.0".

    Args:
        version: Version such as "1.9.1" or "v1.9.1.5".

    Returns:
        Tuple of four integers.

    Raises:
        ValueError: If the string is not a dotted numeric version.
    """
    match = _VERSION_RE.fullmatch(version.strip())
    if not match:
        raise ValueError(f"Invalid version string: {version!r}")
    parts = [int(p) for p in match.group(1).split(".")]
    return tuple(parts + [0] * (_VERSION_PARTS - len(parts)))


def _open_url(url: str) -> None:
    if not QDesktopServices.openUrl(QUrl(url)):
        logger.warning("Could not open %s", url)


class VersionController:
    """Compares the local version to the online one.

    Example:
        controller = VersionController(bus)
        bus.version_available.connect(show_banner)
        controller.on_version_update("1.9.2")
    """

    def __init__(
        self,
        bus: NotificationBus,
        local_version: str | None = None,
        build_postfix: str = BUILD_POSTFIX,
        open_url: Callable[[str], None] | None = None,
    ) -> None:
        """Initialize the controller.

        Args:
            bus: Bus the upgrade notice is published on.
            local_version: Version of the running build (defaults to the
                package version).
            build_postfix: Pre-release qualifier of the running build.
            open_url: Opens the upgrade page (defaults to the desktop browser).

        Raises:
            ValueError: If the local version is not a dotted numeric version.
        """
        self._bus = bus
        self._local_version = local_version or __version__
        self._local_key = parse_version(self._local_version)
        self._build_postfix = build_postfix
        self._open_url = open_url or _open_url
        self._online_version: str | None = None
        self._lock = threading.RLock()

    @property
    def local_version(self) -> str:
        """Return the running build's version."""
        return self._local_version

    @property
    def online_version(self) -> str | None:
        """Return the last reported online version, or None if never reported."""
        return self._online_version

    @property
    def title(self) -> str:
        """Return the window title suffix, e.g. ``" v1.9.1 - Alpha"``."""
        return f" v{self._local_version}{self._build_postfix}"

    def is_upgrade_available(self) -> bool:
        """Return True if the online version supersedes the running build."""
        if self._online_version is None:
            return False
        online = parse_version(self._online_version)
        local = self._local_key
        return local < online or (local == online and self._build_postfix != "")

    def on_version_update(self, version: str | None) -> None:
        """Ingest a reported online version.

        Publishes ``version_available`` if an upgrade is available.

        Args:
            version: Reported version string, or None if unknown.
        """
        with self._lock:
            if self._online_version != version:
                self._online_version = version
            if self._online_version is None:
                return

            try:
                upgrade = self.is_upgrade_available()
            except ValueError:
                logger.warning("Ignoring unparseable online version %r", version)
                return
            if not upgrade:
                logger.debug("Running %s, online %s: up to date", self._local_version, version)
                return

            message = QCoreApplication.translate(
                "VersionController",
                "IMPORTANT! New version v{0} has\nbeen released. Click here to download it.",
            ).format(version)
            logger.info("New version %s available", version)
            self._bus.version_available.emit(message)

    def get_new_version_url(self) -> str:
        """Return the release page for the online version, or all releases."""
        if self._online_version is not None:
            return NEW_VERSION_RELEASE_URL + self._online_version
        return RELEASES_URL

    def visit_new_version_url(self) -> str:
        """Open the release page and return the URL that was opened."""
        url = self.get_new_version_url()
        self._open_url(url)
        return url
