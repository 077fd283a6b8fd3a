"""Mining credentials and their derived validity state."""

from dataclasses import dataclass
from enum import Flag


class CredentialsValidState(Flag):
    """Validity of the stored credentials.

    Bits combine with ``|``; ``VALID`` is the empty set.
    """

    VALID = 0
    INVALID_BTC = 1
    INVALID_WORKER = 2
    INVALID_BTC_AND_WORKER = INVALID_BTC | INVALID_WORKER


@dataclass(frozen=True, slots=True)
class Credentials:
    """Credentials sent to the pool and the stats service.

    Attributes:
        btc_address: Payout address credited for mining rewards.
        worker_name: Identifier of this rig among rigs sharing an address.
        rig_group: Free-form grouping label (not validated).
    """

    btc_address: str = ""
    worker_name: str = ""
    rig_group: str = ""

    def trimmed(self) -> "Credentials":
        """Return a copy with surrounding whitespace removed from every field."""
        return Credentials(
            btc_address=self.btc_address.strip(),
            worker_name=self.worker_name.strip(),
            rig_group=self.rig_group.strip(),
        )
