"""Notification bus carrying state-change events as Qt signals.

Subscribers connect to the signals they care about. Signals emitted on
the thread that owns the bus are delivered synchronously, in connection
order, before ``emit`` returns.

Example:
    bus = NotificationBus()
    bus.worker_name_changed.connect(lambda name: print(f"Worker: {name}"))
"""

from PySide6.QtCore import QObject, Signal


class NotificationBus(QObject):
    """Named state-change signals published by the controllers."""

    # Version: formatted "new version available" message
    version_available = Signal(str)

    # Balance
    btc_balance_updated = Signal(float)
    fiat_balance_updated = Signal(float, str)  # amount, currency symbol

    # Settings
    service_location_changed = Signal(int)
    btc_address_changed = Signal(str)
    worker_name_changed = Signal(str)
    rig_group_changed = Signal(str)

    # Mining session
    mining_started = Signal()
    mining_stopped = Signal()
