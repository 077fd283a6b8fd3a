"""Data models for credentials, service locations, balances and results."""

from rigctrl.models.balance import FiatBalance
from rigctrl.models.credentials import Credentials, CredentialsValidState
from rigctrl.models.location import AlgorithmType, ConnectionType, ServiceLocation
from rigctrl.models.results import MiningState, SetResult

__all__ = [
    "AlgorithmType",
    "ConnectionType",
    "Credentials",
    "CredentialsValidState",
    "FiatBalance",
    "MiningState",
    "ServiceLocation",
    "SetResult",
]
