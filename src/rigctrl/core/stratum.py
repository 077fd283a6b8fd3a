"""Directory of mining service locations and stratum URL derivation."""

import logging
from collections.abc import Iterator, Sequence

from rigctrl.models.location import AlgorithmType, ConnectionType, ServiceLocation

logger = logging.getLogger(__name__)

SERVICE_HOST = "nicehash.com"

# Stratum port is the base plus the algorithm id; SSL adds a fixed offset
STRATUM_PORT_BASE = 3333
SSL_PORT_OFFSET = 30000

DEFAULT_LOCATIONS: tuple[ServiceLocation, ...] = (
    ServiceLocation("eu", "Europe"),
    ServiceLocation("usa", "USA"),
    ServiceLocation("hk", "Hong Kong"),
    ServiceLocation("jp", "Japan"),
    ServiceLocation("in", "India"),
    ServiceLocation("br", "Brazil"),
)


class StratumService:
    """Ordered, integer-indexable list of known service locations.

    Example:
        service = StratumService()
        url = service.get_location_url(
            AlgorithmType.DaggerHashimoto, service[0], ConnectionType.STRATUM_TCP
        )
        # "stratum+tcp://daggerhashimoto.eu.nicehash.com:3353"
    """

    def __init__(
        self,
        locations: Sequence[ServiceLocation] = DEFAULT_LOCATIONS,
        host: str = SERVICE_HOST,
    ) -> None:
        """Initialize the directory.

        Args:
            locations: Known locations in display order.
            host: Service domain appended to each location.
        """
        self._locations = tuple(locations)
        self._host = host

    @property
    def locations(self) -> tuple[ServiceLocation, ...]:
        """Return all locations in order."""
        return self._locations

    def __len__(self) -> int:
        return len(self._locations)

    def __getitem__(self, index: int) -> ServiceLocation:
        return self._locations[index]

    def __iter__(self) -> Iterator[ServiceLocation]:
        return iter(self._locations)

    def is_valid_index(self, index: int) -> bool:
        """Return True if ``index`` selects an existing location."""
        return 0 <= index < len(self._locations)

    @staticmethod
    def get_port(algorithm: AlgorithmType, connection_type: ConnectionType) -> int:
        """Return the stratum port for an algorithm and connection type."""
        port = STRATUM_PORT_BASE + int(algorithm)
        if connection_type is ConnectionType.STRATUM_SSL:
            port += SSL_PORT_OFFSET
        return port

    def get_location_url(
        self,
        algorithm: AlgorithmType,
        location: ServiceLocation,
        connection_type: ConnectionType,
    ) -> str:
        """Build the stratum URL for an algorithm at a location.

        Args:
            algorithm: Algorithm to mine.
            location: Service location to connect to.
            connection_type: Connection scheme.

        Returns:
            URL such as ``stratum+ssl://equihash.usa.nicehash.com:33357``.
        """
        port = self.get_port(algorithm, connection_type)
        return (
            f"{connection_type.prefix}{algorithm.stratum_name}."
            f"{location.code}.{self._host}:{port}"
        )
