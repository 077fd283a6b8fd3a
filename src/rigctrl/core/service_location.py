"""Service location controller."""

import logging
import threading

from rigctrl.core.config import ConfigManager
from rigctrl.core.notifications import NotificationBus
from rigctrl.core.stratum import StratumService
from rigctrl.models.location import AlgorithmType, ConnectionType, ServiceLocation
from rigctrl.models.results import SetResult

logger = logging.getLogger(__name__)


class ServiceLocationController:
    """Validates and applies the selected service location index.

    An out-of-range request is not simply rejected: the selection is reset
    to the first location and the caller gets ``SetResult.INVALID``.
    """

    def __init__(
        self,
        config: ConfigManager,
        bus: NotificationBus,
        directory: StratumService,
    ) -> None:
        self._config = config
        self._bus = bus
        self._directory = directory
        self._lock = threading.RLock()

    @property
    def service_location(self) -> int:
        """Return the selected location index."""
        return self._config.get_service_location()

    @property
    def selected_location(self) -> ServiceLocation:
        """Return the selected location.

        Raises:
            IndexError: If the stored index is out of range.
        """
        index = self.service_location
        if not self._directory.is_valid_index(index):
            raise IndexError(f"Stored service location {index} is out of range")
        return self._directory[index]

    def get_selected_location_url(
        self, algorithm: AlgorithmType, connection_type: ConnectionType
    ) -> str:
        """Return the stratum URL for the selected location.

        Args:
            algorithm: Algorithm to mine.
            connection_type: Connection scheme.

        Raises:
            IndexError: If the stored index is out of range.
        """
        return self._directory.get_location_url(
            algorithm, self.selected_location, connection_type
        )

    def set_service_location_if_valid_or_different(self, service_location: int) -> SetResult:
        """Select a service location.

        Args:
            service_location: Requested index into the directory.

        Returns:
            NOTHING_TO_CHANGE if already selected, CHANGED if applied,
            INVALID if out of range (the selection is then reset to 0).
        """
        with self._lock:
            if service_location == self.service_location:
                return SetResult.NOTHING_TO_CHANGE
            if self._directory.is_valid_index(service_location):
                self._set_service_location(service_location)
                return SetResult.CHANGED
            logger.warning(
                "Service location %d out of range (0-%d), using 0",
                service_location,
                len(self._directory) - 1,
            )
            self._set_service_location(0)
            return SetResult.INVALID

    def _set_service_location(self, service_location: int) -> None:
        self._config.set_service_location(service_location)
        self._config.commit()
        logger.info("Service location changed to %d", service_location)
        self._bus.service_location_changed.emit(service_location)
