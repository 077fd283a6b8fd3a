"""Service location, algorithm and connection type models."""

from dataclasses import dataclass
from enum import Enum, IntEnum


class AlgorithmType(IntEnum):
    """Algorithms offered by the mining service, keyed by service id.

    The id also determines the stratum port (see ``StratumService``).
    """

    DaggerHashimoto = 20
    CryptoNight = 22
    Lbry = 23
    Equihash = 24
    Pascal = 25
    Sia = 27
    Blake2s = 28
    Skunk = 29
    CryptoNightV7 = 30
    Lyra2z = 32
    X16R = 33
    CryptoNightV8 = 34

    @property
    def stratum_name(self) -> str:
        """Return the lowercase name used in stratum host names."""
        return self.name.lower()


class ConnectionType(Enum):
    """How a miner connects to the stratum endpoint."""

    NONE = ""
    STRATUM_TCP = "stratum+tcp://"
    STRATUM_SSL = "stratum+ssl://"

    @property
    def prefix(self) -> str:
        """Return the URL scheme prefix (empty for NONE)."""
        return self.value


@dataclass(frozen=True, slots=True)
class ServiceLocation:
    """A selectable network region for mining connections.

    Attributes:
        code: Short region code used in host names (e.g. "eu").
        name: Human-readable region name.
    """

    code: str
    name: str = ""

    @property
    def display_name(self) -> str:
        """Return a display-friendly name."""
        return self.name or self.code.upper()
