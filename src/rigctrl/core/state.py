"""Application state manager: the single owner of the mining client's state.

The ApplicationStateManager composes the controllers around one config
store and one notification bus. It is the only object callers (UI
actions, remote-control requests, startup bootstrap) talk to; views
subscribe to ``notifications``.

Example:
    state = ApplicationStateManager(ConfigManager())
    state.notifications.worker_name_changed.connect(on_worker_changed)

    if state.set_worker_name(text.strip()) is SetResult.INVALID:
        show_error()
    if state.can_start_mining():
        state.start_mining()
"""

import logging
from collections.abc import Callable

from PySide6.QtCore import QObject

from rigctrl.core.balance import BalanceController
from rigctrl.core.config import ConfigManager
from rigctrl.core.credentials import CredentialController, MinersSupervisor, StatsReporter
from rigctrl.core.exchange import ExchangeRateTable
from rigctrl.core.notifications import NotificationBus
from rigctrl.core.power import SleepGuard
from rigctrl.core.relays import MinersRelay, StatsRelay
from rigctrl.core.service_location import ServiceLocationController
from rigctrl.core.session import MiningSessionController, PowerGuard
from rigctrl.core.stratum import StratumService
from rigctrl.core.version import VersionController
from rigctrl.models.balance import FiatBalance
from rigctrl.models.credentials import Credentials, CredentialsValidState
from rigctrl.models.location import AlgorithmType, ConnectionType, ServiceLocation
from rigctrl.models.results import MiningState, SetResult

logger = logging.getLogger(__name__)

_MS_PER_SECOND = 1000


class ApplicationStateManager:
    """Owns credentials, service location, version, balance and session state.

    Collaborators default to the in-process relays; pass your own to
    connect a real mining supervisor or stats service.
    """

    def __init__(
        self,
        config: ConfigManager,
        *,
        stats: StatsReporter | None = None,
        miners: MinersSupervisor | None = None,
        sleep_guard: PowerGuard | None = None,
        directory: StratumService | None = None,
        rates: ExchangeRateTable | None = None,
        local_version: str | None = None,
        open_url: Callable[[str], None] | None = None,
        parent: QObject | None = None,
    ) -> None:
        """Initialize the state manager.

        Args:
            config: Durable settings store.
            stats: Stats service receiving valid credentials.
            miners: Mining supervisor restarted on credential changes.
            sleep_guard: OS power hooks used while mining.
            directory: Known service locations.
            rates: Exchange rates for the fiat balance.
            local_version: Version of the running build.
            open_url: Opens the upgrade page.
            parent: Parent for the Qt objects created here.
        """
        self._config = config
        self._notifications = NotificationBus(parent)
        self._stats = stats if stats is not None else StatsRelay(parent)
        self._miners = miners if miners is not None else MinersRelay(parent)
        self._directory = directory if directory is not None else StratumService()
        self._rates = (
            rates if rates is not None else ExchangeRateTable(config.get_display_currency())
        )

        self._session = MiningSessionController(
            self._notifications,
            sleep_guard if sleep_guard is not None else SleepGuard(),
            miner_stats_interval_ms=config.get_miner_stats_interval() * _MS_PER_SECOND,
            devices_check_interval_ms=config.get_devices_check_interval() * _MS_PER_SECOND,
            parent=parent,
        )
        self._credentials = CredentialController(
            config,
            self._notifications,
            self._stats,
            self._miners,
            is_mining=lambda: self._session.is_currently_mining,
        )
        self._service_location = ServiceLocationController(
            config, self._notifications, self._directory
        )

        self._version = VersionController(
            self._notifications, local_version=local_version, open_url=open_url
        )
        self._balance = BalanceController(self._notifications, self._rates)

    # -- Components ------------------------------------------------------------

    @property
    def notifications(self) -> NotificationBus:
        """Return the bus state changes are published on."""
        return self._notifications

    @property
    def config(self) -> ConfigManager:
        """Return the settings store."""
        return self._config

    @property
    def session(self) -> MiningSessionController:
        """Return the mining session controller (for its poll signals)."""
        return self._session

    @property
    def stats(self) -> StatsReporter:
        """Return the stats service collaborator."""
        return self._stats

    @property
    def miners(self) -> MinersSupervisor:
        """Return the mining supervisor collaborator."""
        return self._miners

    @property
    def directory(self) -> StratumService:
        """Return the service location directory."""
        return self._directory

    @property
    def rates(self) -> ExchangeRateTable:
        """Return the exchange rate table."""
        return self._rates

    # -- Version ---------------------------------------------------------------

    @property
    def title(self) -> str:
        """Return the window title suffix."""
        return self._version.title

    @property
    def local_version(self) -> str:
        """Return the running build's version."""
        return self._version.local_version

    @property
    def online_version(self) -> str | None:
        """Return the last reported online version."""
        return self._version.online_version

    def on_version_update(self, version: str | None) -> None:
        """Ingest a reported online version."""
        self._version.on_version_update(version)

    def visit_new_version_url(self) -> str:
        """Open the upgrade page and return its URL."""
        return self._version.visit_new_version_url()

    # -- Balance ---------------------------------------------------------------

    @property
    def btc_balance(self) -> float:
        """Return the last reported BTC balance."""
        return self._balance.btc_balance

    @property
    def fiat_balance(self) -> FiatBalance:
        """Return the last reported balance in the display currency."""
        return self._balance.get_fiat_balance()

    def on_balance_update(self, btc_balance: float) -> None:
        """Ingest a reported BTC balance."""
        self._balance.on_balance_update(btc_balance)

    # -- Credentials -----------------------------------------------------------

    @property
    def btc_address(self) -> str:
        """Return the stored payout address."""
        return self._credentials.btc_address

    @property
    def worker_name(self) -> str:
        """Return the stored worker name."""
        return self._credentials.worker_name

    @property
    def rig_group(self) -> str:
        """Return the stored rig group."""
        return self._credentials.rig_group

    @property
    def credentials(self) -> Credentials:
        """Return a snapshot of the stored credentials."""
        return self._credentials.credentials

    def get_credentials_valid_state(self) -> CredentialsValidState:
        """Return which stored credentials fail validation."""
        return self._credentials.get_credentials_valid_state()

    def reset_stats_credentials(self) -> None:
        """Push valid credentials to the stats service."""
        self._credentials.reset_stats_credentials()

    def set_btc_address(self, btc_address: str, skip_credentials_set: bool = False) -> SetResult:
        """Set the payout address (pass it trimmed)."""
        return self._credentials.set_btc_address(btc_address, skip_credentials_set)

    def set_worker_name(self, worker_name: str, skip_credentials_set: bool = False) -> SetResult:
        """Set the worker name (pass it trimmed)."""
        return self._credentials.set_worker_name(worker_name, skip_credentials_set)

    def set_rig_group(self, rig_group: str, skip_credentials_set: bool = False) -> SetResult:
        """Set the rig group (pass it trimmed)."""
        return self._credentials.set_rig_group(rig_group, skip_credentials_set)

    # -- Service location ------------------------------------------------------

    @property
    def service_location(self) -> int:
        """Return the selected service location index."""
        return self._service_location.service_location

    @property
    def selected_location(self) -> ServiceLocation:
        """Return the selected location.

        Raises:
            IndexError: If the stored index is out of range.
        """
        return self._service_location.selected_location

    def get_selected_location_url(
        self, algorithm: AlgorithmType, connection_type: ConnectionType
    ) -> str:
        """Return the stratum URL for the selected location."""
        return self._service_location.get_selected_location_url(algorithm, connection_type)

    def set_service_location_if_valid_or_different(self, service_location: int) -> SetResult:
        """Select a service location; out-of-range resets to 0."""
        return self._service_location.set_service_location_if_valid_or_different(
            service_location
        )

    # -- Mining session --------------------------------------------------------

    @property
    def mining_state(self) -> MiningState:
        """Return the session state."""
        return self._session.state

    @property
    def is_currently_mining(self) -> bool:
        """Return True while mining."""
        return self._session.is_currently_mining

    def can_start_mining(self, demo: bool = False) -> bool:
        """Return True if the caller may start a session.

        Args:
            demo: Demo mining runs without valid credentials.
        """
        return demo or self.get_credentials_valid_state() == CredentialsValidState.VALID

    def start_mining(self) -> bool:
        """Start mining; see ``can_start_mining`` for the caller contract."""
        return self._session.start_mining()

    def stop_mining(self) -> bool:
        """Stop mining."""
        return self._session.stop_mining()
