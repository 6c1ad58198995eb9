"""Cooperative cancellation for product fetches.

SIGINT/SIGTERM set a flag instead of killing the process mid-request; the
fetch code checks the flag before every request and stops cleanly.
"""

import signal
import sys
import threading
from typing import Optional

from tnf_scrape.logging_config import get_logger

__all__ = [
    "ShutdownHandler",
    "get_shutdown_handler",
    "shutdown_requested",
]

logger = get_logger("shutdown")


class ShutdownHandler:
    """Process-wide cancellation flag driven by signals or by callers.

    Usage:
        with get_shutdown_handler().installed() as handler:
            handler.check_shutdown()  # raises KeyboardInterrupt once cancelled
    """

    _instance: Optional["ShutdownHandler"] = None
    _lock = threading.Lock()

    def __init__(self) -> None:
        self._event = threading.Event()
        self._original_sigint = None
        self._original_sigterm = None
        self._installed = False

    @classmethod
    def get_instance(cls) -> "ShutdownHandler":
        """Get or create the singleton instance."""
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls()
        return cls._instance

    def install(self) -> "ShutdownHandler":
        """Install SIGINT/SIGTERM handlers. Returns self for chaining."""
        if self._installed:
            return self

        self._original_sigint = signal.getsignal(signal.SIGINT)
        self._original_sigterm = signal.getsignal(signal.SIGTERM)
        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

        self._installed = True
        return self

    def uninstall(self) -> None:
        """Restore the original signal handlers."""
        if not self._installed:
            return

        if self._original_sigint is not None:
            signal.signal(signal.SIGINT, self._original_sigint)
        if self._original_sigterm is not None:
            signal.signal(signal.SIGTERM, self._original_sigterm)

        self._installed = False

    def installed(self) -> "_InstalledContext":
        return _InstalledContext(self)

    def _handle_signal(self, signum: int, frame) -> None:
        signal_name = "SIGINT" if signum == signal.SIGINT else "SIGTERM"
        logger.warning(f"Received {signal_name}, stopping after the current request "
                       f"(press Ctrl+C again to force quit)")
        self.request_shutdown()
        # Second signal exits immediately
        signal.signal(signum, self._force_exit)

    def _force_exit(self, signum: int, frame) -> None:
        logger.error("Force quitting")
        sys.exit(1)

    def request_shutdown(self) -> None:
        """Cancel pending work; the next check_shutdown() raises."""
        self._event.set()

    @property
    def shutdown_requested(self) -> bool:
        return self._event.is_set()

    def check_shutdown(self) -> None:
        """Raise if shutdown has been requested.

        Raises:
            KeyboardInterrupt: If shutdown was requested
        """
        if self._event.is_set():
            raise KeyboardInterrupt("Graceful shutdown requested")

    def reset(self) -> None:
        """Clear the shutdown flag (for testing or reuse)."""
        self._event.clear()


class _InstalledContext:
    def __init__(self, handler: ShutdownHandler) -> None:
        self.handler = handler

    def __enter__(self) -> ShutdownHandler:
        return self.handler.install()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.handler.uninstall()


def get_shutdown_handler() -> ShutdownHandler:
    """Get the global shutdown handler instance."""
    return ShutdownHandler.get_instance()


def shutdown_requested() -> bool:
    """Check if shutdown has been requested."""
    return get_shutdown_handler().shutdown_requested
