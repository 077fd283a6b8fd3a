"""Signal relays for collaborators that live outside this process.

The mining supervisor and the stats service run elsewhere; these relays
turn the controllers' calls into Qt signals that the transport layer
(worker thread, RPC bridge) connects to.
"""

import logging

from PySide6.QtCore import QObject, Signal

from rigctrl.models.credentials import Credentials

logger = logging.getLogger(__name__)


class MinersRelay(QObject):
    """Forwards miner restart requests to the mining supervisor.

    Example:
        miners = MinersRelay()
        miners.restart_requested.connect(supervisor.restart_all)
    """

    restart_requested = Signal()

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._restart_count = 0

    @property
    def restart_count(self) -> int:
        """Return how many restarts were requested."""
        return self._restart_count

    def restart_miners(self) -> None:
        """Ask the supervisor to restart all running miners."""
        self._restart_count += 1
        logger.info("Requesting miner restart (#%d)", self._restart_count)
        self.restart_requested.emit()


class StatsRelay(QObject):
    """Forwards active credentials to the stats/reporting service.

    Signals:
        credentials_set: Emitted with (btc_address, worker_name, rig_group).
    """

    credentials_set = Signal(str, str, str)

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._credentials: Credentials | None = None

    @property
    def credentials(self) -> Credentials | None:
        """Return the last credentials pushed, or None if never set."""
        return self._credentials

    def set_credentials(self, btc_address: str, worker_name: str, rig_group: str) -> None:
        """Set the credentials the stats service reports under.

        Args:
            btc_address: Payout address.
            worker_name: Worker name.
            rig_group: Rig group label.
        """
        self._credentials = Credentials(btc_address, worker_name, rig_group)
        logger.debug("Stats credentials set for worker '%s'", worker_name)
        self.credentials_set.emit(btc_address, worker_name, rig_group)
