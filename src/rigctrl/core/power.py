"""OS sleep prevention while mining.

On Windows the thread execution state is set through ``kernel32``. Other
platforms have no equivalent without spawning an inhibitor process, so
the guard only tracks state and logs there.
"""

import ctypes
import logging
import platform

logger = logging.getLogger(__name__)

# SetThreadExecutionState flags
ES_CONTINUOUS = 0x80000000
ES_SYSTEM_REQUIRED = 0x00000001
ES_DISPLAY_REQUIRED = 0x00000002


def _set_thread_execution_state(flags: int) -> bool:
    """Call SetThreadExecutionState; return False if it failed or is unavailable."""
    try:
        kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
        return bool(kernel32.SetThreadExecutionState(ctypes.c_uint(flags)))
    except (AttributeError, OSError) as e:
        logger.warning("SetThreadExecutionState failed: %s", e)
        return False


class SleepGuard:
    """Keeps the system and monitor awake while mining.

    ``prevent_sleep`` is meant to be called periodically; each call resets
    the OS idle timers. ``allow_sleep`` restores normal power management.
    """

    def __init__(self, system: str | None = None) -> None:
        """Initialize the guard.

        Args:
            system: Platform name override (defaults to ``platform.system()``).
        """
        self._system = (system or platform.system()).lower()
        self._preventing = False

    @property
    def is_preventing(self) -> bool:
        """Return True between ``prevent_sleep`` and ``allow_sleep``."""
        return self._preventing

    def prevent_sleep(self) -> None:
        """Reset the idle timers so the system and display stay on."""
        if self._system == "windows":
            _set_thread_execution_state(ES_SYSTEM_REQUIRED | ES_DISPLAY_REQUIRED)
        elif not self._preventing:
            logger.debug("Sleep prevention not supported on %s", self._system)
        self._preventing = True

    def allow_sleep(self) -> None:
        """Allow the monitor to power down and the system to sleep."""
        if self._system == "windows":
            _set_thread_execution_state(ES_CONTINUOUS)
        self._preventing = False
        logger.debug("Sleep allowed")
