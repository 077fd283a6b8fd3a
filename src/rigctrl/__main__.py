"""Main entry point for the RigCTRL command line.

Applies credential and location changes through the state manager and,
with ``--mine``, runs a mining session on the Qt event loop.

Usage:
    python -m rigctrl --btc <address> --worker rig1 --location 1
    python -m rigctrl --mine --duration 60
"""

import argparse
import logging
import signal
import sys
from collections.abc import Sequence

from PySide6.QtCore import QCoreApplication, QTimer

from rigctrl.core.config import ConfigManager
from rigctrl.core.state import ApplicationStateManager
from rigctrl.models.results import SetResult

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        prog="rigctrl",
        description="RigCTRL mining client state controller",
    )
    parser.add_argument("--btc", default=None, help="payout bitcoin address")
    parser.add_argument("--worker", default=None, help="worker name (max 15 alphanumerics)")
    parser.add_argument("--group", default=None, help="rig group label")
    parser.add_argument("--location", type=int, default=None, help="service location index")
    parser.add_argument("--currency", default=None, help="display currency code (e.g. EUR)")
    parser.add_argument("--config", default=None, help="INI file to use instead of QSettings")
    parser.add_argument("--mine", action="store_true", help="start a mining session")
    parser.add_argument(
        "--demo", action="store_true", help="allow mining without valid credentials"
    )
    parser.add_argument(
        "--duration", type=float, default=0.0, help="stop mining after N seconds (0 = Ctrl+C)"
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    return parser


def apply_settings(state: ApplicationStateManager, args: argparse.Namespace) -> bool:
    """Apply the requested settings changes.

    Credentials are applied with the stats push deferred, then pushed once.

    Returns:
        False if any requested value was rejected.
    """
    ok = True
    changes = [
        ("btc", args.btc, state.set_btc_address),
        ("worker", args.worker, state.set_worker_name),
        ("group", args.group, state.set_rig_group),
    ]
    credentials_changed = False
    for name, value, setter in changes:
        if value is None:
            continue
        result = setter(value.strip(), skip_credentials_set=True)
        print(f"{name}: {result.name}")
        ok = ok and result is not SetResult.INVALID
        credentials_changed = credentials_changed or result is SetResult.CHANGED
    if credentials_changed:
        state.reset_stats_credentials()

    if args.location is not None:
        result = state.set_service_location_if_valid_or_different(args.location)
        try:
            name = state.selected_location.display_name
        except IndexError as e:
            logger.error("%s", e)
            return False
        print(f"location: {result.name} ({name})")
        ok = ok and result is not SetResult.INVALID

    if args.currency:
        state.config.set_display_currency(args.currency)
        state.config.commit()
        state.rates.active_display_currency = args.currency
    return ok


def _stop_session(state: ApplicationStateManager) -> None:
    state.stop_mining()


def run_session(app: QCoreApplication, state: ApplicationStateManager, duration: float) -> int:
    """Run a mining session until ``duration`` elapses or the app quits."""
    state.session.miner_stats_check.connect(lambda: logger.debug("Miner stats check"))
    state.session.devices_check.connect(lambda: logger.debug("Compute devices check"))
    app.aboutToQuit.connect(lambda: _stop_session(state))

    if duration > 0:
        QTimer.singleShot(int(duration * 1000), app.quit)
    # Let Ctrl+C quit the event loop
    signal.signal(signal.SIGINT, lambda *_: app.quit())

    state.start_mining()
    return app.exec()


def main(argv: Sequence[str] | None = None) -> int:
    """Run the RigCTRL command line.

    Returns:
        Exit code (0 for success).
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO, format=_LOG_FORMAT
    )

    QCoreApplication.setApplicationName("RigCTRL")
    QCoreApplication.setOrganizationName("RigCTRL")
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])

    config = ConfigManager.from_file(args.config) if args.config else ConfigManager()
    state = ApplicationStateManager(config)
    logger.info("RigCTRL%s", state.title)

    if not apply_settings(state, args):
        return 2

    valid_state = state.get_credentials_valid_state()
    print(f"credentials: {valid_state.name}")
    if not args.mine:
        return 0
    if not state.can_start_mining(demo=args.demo):
        logger.error("Cannot start mining with invalid credentials (use --demo)")
        return 1
    return run_session(app, state, args.duration)  # type: ignore[arg-type]


if __name__ == "__main__":
    sys.exit(main())
