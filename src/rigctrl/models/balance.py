"""Balance display model."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FiatBalance:
    """A BTC balance converted into the active display currency.

    Attributes:
        amount: Converted amount.
        symbol: Currency code the amount is expressed in (e.g. "EUR").
    """

    amount: float
    symbol: str

    def format(self, precision: int = 2) -> str:
        """Format for display, e.g. ``"12.34 EUR"``."""
        return f"{self.amount:.{precision}f} {self.symbol}"
