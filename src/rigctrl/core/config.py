"""Configuration manager using QSettings for persistent storage."""

import logging
from pathlib import Path

from PySide6.QtCore import QSettings

from rigctrl.models.credentials import Credentials

logger = logging.getLogger(__name__)

# General settings keys
_KEY_BTC_ADDRESS = "general/btc_address"
_KEY_WORKER_NAME = "general/worker_name"
_KEY_RIG_GROUP = "general/rig_group"
_KEY_SERVICE_LOCATION = "general/service_location"
_KEY_DISPLAY_CURRENCY = "general/display_currency"

# Monitoring
_KEY_MINER_STATS_INTERVAL = "monitoring/miner_stats_interval"
_KEY_DEVICES_CHECK_INTERVAL = "monitoring/devices_check_interval"

DEFAULT_WORKER_NAME = "worker1"
DEFAULT_DISPLAY_CURRENCY = "USD"


class ConfigManager:
    """Wrapper around QSettings for type-safe config access.

    QSettings stores config in platform-specific locations:
    - Windows: HKEY_CURRENT_USER\\Software\\RigCTRL\\RigCTRL
    - macOS: ~/Library/Preferences/com.RigCTRL.RigCTRL.plist
    - Linux: ~/.config/RigCTRL/RigCTRL.conf

    Setters only change the in-memory settings; call ``commit()`` to
    flush them to persistent storage.

    Example:
        config = ConfigManager()
        config.set_worker_name("rig2")
        config.commit()
    """

    def __init__(
        self,
        organization: str = "RigCTRL",
        application: str = "RigCTRL",
        settings: QSettings | None = None,
    ) -> None:
        """Initialize the config manager.

        Args:
            organization: Organization name for QSettings.
            application: Application name for QSettings.
            settings: Pre-built QSettings to use instead (e.g. INI file).
        """
        self._settings = settings if settings is not None else QSettings(organization, application)

    @classmethod
    def from_file(cls, path: str | Path) -> "ConfigManager":
        """Create a config manager backed by an INI file.

        Args:
            path: Path of the INI file (created on first commit).
        """
        return cls(settings=QSettings(str(path), QSettings.Format.IniFormat))

    @property
    def settings(self) -> QSettings:
        """Return the underlying QSettings instance."""
        return self._settings

    # -- Credentials ----------------------------------------------------------

    def get_btc_address(self) -> str:
        """Return the stored payout address (empty if unset)."""
        value = self._settings.value(_KEY_BTC_ADDRESS, "", str)
        return str(value) if value else ""

    def set_btc_address(self, address: str) -> None:
        """Set the payout address."""
        self._settings.setValue(_KEY_BTC_ADDRESS, address)

    def get_worker_name(self) -> str:
        """Return the stored worker name (default "worker1")."""
        value = self._settings.value(_KEY_WORKER_NAME, DEFAULT_WORKER_NAME, str)
        return str(value) if value is not None else DEFAULT_WORKER_NAME

    def set_worker_name(self, name: str) -> None:
        """Set the worker name."""
        self._settings.setValue(_KEY_WORKER_NAME, name)

    def get_rig_group(self) -> str:
        """Return the stored rig group (empty if unset)."""
        value = self._settings.value(_KEY_RIG_GROUP, "", str)
        return str(value) if value else ""

    def set_rig_group(self, group: str) -> None:
        """Set the rig group."""
        self._settings.setValue(_KEY_RIG_GROUP, group)

    def get_credentials(self) -> Credentials:
        """Return the stored credentials as one snapshot."""
        return Credentials(
            btc_address=self.get_btc_address(),
            worker_name=self.get_worker_name(),
            rig_group=self.get_rig_group(),
        )

    # -- Service location -----------------------------------------------------

    def get_service_location(self) -> int:
        """Return the selected service location index (default 0).

        The index is not range-checked here; the directory owns the range.
        """
        value = self._settings.value(_KEY_SERVICE_LOCATION, 0, int)
        return int(value)  # type: ignore[arg-type]

    def set_service_location(self, index: int) -> None:
        """Set the selected service location index."""
        self._settings.setValue(_KEY_SERVICE_LOCATION, index)

    # -- Display settings -----------------------------------------------------

    def get_display_currency(self) -> str:
        """Return the display currency code (default "USD")."""
        value = self._settings.value(_KEY_DISPLAY_CURRENCY, DEFAULT_DISPLAY_CURRENCY, str)
        return str(value).upper() if value else DEFAULT_DISPLAY_CURRENCY

    def set_display_currency(self, currency: str) -> None:
        """Set the display currency code."""
        self._settings.setValue(_KEY_DISPLAY_CURRENCY, currency.upper())

    # -- Monitoring settings --------------------------------------------------

    def get_miner_stats_interval(self) -> int:
        """Return the miner stats polling interval in seconds.

        Returns:
            Interval in seconds (default 5).
        """
        value = self._settings.value(_KEY_MINER_STATS_INTERVAL, 5, int)
        return max(1, min(60, int(value)))  # type: ignore[arg-type]

    def set_miner_stats_interval(self, seconds: int) -> None:
        """Set the miner stats polling interval.

        Args:
            seconds: Interval in seconds (1-60).
        """
        self._settings.setValue(_KEY_MINER_STATS_INTERVAL, max(1, min(60, seconds)))

    def get_devices_check_interval(self) -> int:
        """Return the compute device health check interval in seconds.

        Returns:
            Interval in seconds (default 60).
        """
        value = self._settings.value(_KEY_DEVICES_CHECK_INTERVAL, 60, int)
        return max(10, min(600, int(value)))  # type: ignore[arg-type]

    def set_devices_check_interval(self, seconds: int) -> None:
        """Set the compute device health check interval.

        Args:
            seconds: Interval in seconds (10-600).
        """
        self._settings.setValue(_KEY_DEVICES_CHECK_INTERVAL, max(10, min(600, seconds)))

    # -- General --------------------------------------------------------------

    def commit(self) -> None:
        """Flush settings to persistent storage."""
        self._settings.sync()
        if self._settings.status() != QSettings.Status.NoError:
            logger.warning("Failed to write settings to %s", self._settings.fileName())

    def clear(self) -> None:
        """Clear all settings (useful for testing or reset)."""
        self._settings.clear()
