"""Balance controller: publishes BTC and display-currency balances."""

import logging

from rigctrl.core.exchange import ExchangeRateTable
from rigctrl.core.notifications import NotificationBus
from rigctrl.models.balance import FiatBalance

logger = logging.getLogger(__name__)


class BalanceController:
    """Stores the last reported balance and publishes it on every report.

    There is no change detection: an unchanged balance is published again.
    """

    def __init__(self, bus: NotificationBus, rates: ExchangeRateTable) -> None:
        self._bus = bus
        self._rates = rates
        self._btc_balance = 0.0

    @property
    def btc_balance(self) -> float:
        """Return the last reported balance in BTC."""
        return self._btc_balance

    def get_fiat_balance(self) -> FiatBalance:
        """Convert the stored balance into the active display currency."""
        usd_amount = self._btc_balance * self._rates.get_usd_exchange_rate()
        amount = self._rates.convert_to_active_currency(usd_amount)
        # Read after converting, an unknown currency falls back to USD
        return FiatBalance(amount=amount, symbol=self._rates.active_display_currency)

    def on_balance_update(self, btc_balance: float) -> None:
        """Ingest a reported balance and publish BTC and fiat values.

        Args:
            btc_balance: New balance in BTC.
        """
        self._btc_balance = btc_balance
        self._bus.btc_balance_updated.emit(btc_balance)

        fiat = self.get_fiat_balance()
        logger.debug("Balance %.8f BTC = %s", btc_balance, fiat.format())
        self._bus.fiat_balance_updated.emit(fiat.amount, fiat.symbol)
