"""In-memory exchange rate table for balance display.

Rates are pushed in by the rate poller; this module performs no I/O.
"""

import logging
import threading

logger = logging.getLogger(__name__)

USD = "USD"


class ExchangeRateTable:
    """BTC→USD rate plus USD→currency rates and the active display currency.

    Example:
        rates = ExchangeRateTable()
        rates.set_usd_btc_rate(60_000.0)
        rates.update_rates({"EUR": 0.9})
        rates.active_display_currency = "EUR"
        rates.convert_to_active_currency(100.0)  # 90.0
    """

    def __init__(self, active_display_currency: str = USD) -> None:
        self._usd_btc_rate = -1.0
        self._rates: dict[str, float] = {}
        self._active_display_currency = active_display_currency.upper()
        self._lock = threading.Lock()

    @property
    def active_display_currency(self) -> str:
        """Return the currency balances are displayed in."""
        with self._lock:
            return self._active_display_currency

    @active_display_currency.setter
    def active_display_currency(self, currency: str) -> None:
        with self._lock:
            self._active_display_currency = currency.upper()

    @property
    def rates(self) -> dict[str, float]:
        """Return a copy of the USD→currency rates."""
        with self._lock:
            return self._rates.copy()

    def set_usd_btc_rate(self, rate: float) -> None:
        """Set how many USD one BTC is worth."""
        with self._lock:
            self._usd_btc_rate = rate

    def update_rates(self, rates: dict[str, float]) -> None:
        """Merge USD→currency rates.

        Args:
            rates: Mapping of currency code to units per USD.
        """
        with self._lock:
            self._rates.update({code.upper(): rate for code, rate in rates.items()})

    def get_usd_exchange_rate(self) -> float:
        """Return the BTC→USD rate, or 0.0 if none is known yet."""
        with self._lock:
            rate = self._usd_btc_rate
        return rate if rate > 0 else 0.0

    def convert_to_active_currency(self, usd_amount: float) -> float:
        """Convert a USD amount into the active display currency.

        An unknown active currency reverts the display currency to USD.

        Args:
            usd_amount: Amount in USD.

        Returns:
            Amount in the active display currency.
        """
        with self._lock:
            currency = self._active_display_currency
            if currency == USD:
                return usd_amount
            rate = self._rates.get(currency)
            if rate is None:
                self._active_display_currency = USD
        if rate is None:
            logger.warning("Unknown currency %s, falling back to %s", currency, USD)
            return usd_amount
        return usd_amount * rate
