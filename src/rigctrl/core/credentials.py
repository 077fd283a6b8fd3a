"""Credential controller: validated, persisted, broadcast credential changes.

Every setter follows the same sequence: compare with the stored value,
validate, store and commit, restart miners if needed, notify, then push
the credentials to the stats service. Callers pass values already trimmed.
"""

import logging
import threading
from collections.abc import Callable
from typing import Protocol

from PySide6.QtCore import SignalInstance

from rigctrl.core.config import ConfigManager
from rigctrl.core.notifications import NotificationBus
from rigctrl.core.validators import (
    validate_bitcoin_address,
    validate_rig_group,
    validate_worker_name,
)
from rigctrl.models.credentials import Credentials, CredentialsValidState
from rigctrl.models.results import SetResult

logger = logging.getLogger(__name__)


class StatsReporter(Protocol):
    """Stats service entry point for the active credentials."""

    def set_credentials(self, btc_address: str, worker_name: str, rig_group: str) -> None: ...


class MinersSupervisor(Protocol):
    """Mining-process supervisor."""

    def restart_miners(self) -> None: ...


class CredentialController:
    """Validates and applies payout address, worker name and rig group.

    Example:
        controller = CredentialController(config, bus, stats, miners, lambda: False)
        if controller.set_worker_name("rig2") is SetResult.INVALID:
            show_error()
    """

    def __init__(
        self,
        config: ConfigManager,
        bus: NotificationBus,
        stats: StatsReporter,
        miners: MinersSupervisor,
        is_mining: Callable[[], bool],
    ) -> None:
        """Initialize the controller.

        Args:
            config: Durable store for the credential fields.
            bus: Bus the change notifications are published on.
            stats: Receives valid credentials after a change.
            miners: Restarted when address or worker changes while mining.
            is_mining: Returns True while a mining session is running.
        """
        self._config = config
        self._bus = bus
        self._stats = stats
        self._miners = miners
        self._is_mining = is_mining
        self._lock = threading.RLock()

    @property
    def btc_address(self) -> str:
        """Return the stored payout address."""
        return self._config.get_btc_address()

    @property
    def worker_name(self) -> str:
        """Return the stored worker name."""
        return self._config.get_worker_name()

    @property
    def rig_group(self) -> str:
        """Return the stored rig group."""
        return self._config.get_rig_group()

    @property
    def credentials(self) -> Credentials:
        """Return a snapshot of the stored credentials."""
        return self._config.get_credentials()

    def get_credentials_valid_state(self) -> CredentialsValidState:
        """Return which of the stored credentials fail validation."""
        state = CredentialsValidState.VALID
        if not validate_bitcoin_address(self.btc_address):
            state |= CredentialsValidState.INVALID_BTC
        if not validate_worker_name(self.worker_name):
            state |= CredentialsValidState.INVALID_WORKER
        return state

    def reset_stats_credentials(self) -> None:
        """Push the stored credentials to the stats service if they are valid."""
        state = self.get_credentials_valid_state()
        if state != CredentialsValidState.VALID:
            logger.debug("Not pushing stats credentials, state is %s", state)
            return
        creds = self.credentials.trimmed()
        self._stats.set_credentials(creds.btc_address, creds.worker_name, creds.rig_group)

    def set_btc_address(self, btc_address: str, skip_credentials_set: bool = False) -> SetResult:
        """Set the payout address if it is valid and different.

        Args:
            btc_address: Trimmed candidate address.
            skip_credentials_set: Don't push credentials to the stats
                service (used by remote-control requests).

        Returns:
            The outcome of the change.
        """
        return self._set_field(
            "btc_address",
            btc_address,
            load=self._config.get_btc_address,
            validate=validate_bitcoin_address,
            store=self._config.set_btc_address,
            signal=self._bus.btc_address_changed,
            restart_miners=True,
            skip_credentials_set=skip_credentials_set,
        )

    def set_worker_name(self, worker_name: str, skip_credentials_set: bool = False) -> SetResult:
        """Set the worker name if it is valid and different.

        Args:
            worker_name: Trimmed candidate worker name.
            skip_credentials_set: Don't push credentials to the stats service.

        Returns:
            The outcome of the change.
        """
        return self._set_field(
            "worker_name",
            worker_name,
            load=self._config.get_worker_name,
            validate=validate_worker_name,
            store=self._config.set_worker_name,
            signal=self._bus.worker_name_changed,
            restart_miners=True,
            skip_credentials_set=skip_credentials_set,
        )

    def set_rig_group(self, rig_group: str, skip_credentials_set: bool = False) -> SetResult:
        """Set the rig group if it is different.

        Changing the group never restarts miners.
        """
        return self._set_field(
            "rig_group",
            rig_group,
            load=self._config.get_rig_group,
            validate=validate_rig_group,
            store=self._config.set_rig_group,
            signal=self._bus.rig_group_changed,
            restart_miners=False,
            skip_credentials_set=skip_credentials_set,
        )

    def _set_field(
        self,
        field: str,
        value: str,
        *,
        load: Callable[[], str],
        validate: Callable[[str], bool],
        store: Callable[[str], None],
        signal: SignalInstance,
        restart_miners: bool,
        skip_credentials_set: bool,
    ) -> SetResult:
        with self._lock:
            if value == load():
                return SetResult.NOTHING_TO_CHANGE
            if not validate(value):
                logger.debug("Rejected invalid %s: %r", field, value)
                return SetResult.INVALID

            store(value)
            self._config.commit()
            logger.info("%s changed", field)

            if restart_miners and self._is_mining():
                self._miners.restart_miners()

            signal.emit(value)

            if not skip_credentials_set:
                self.reset_stats_credentials()
            return SetResult.CHANGED
