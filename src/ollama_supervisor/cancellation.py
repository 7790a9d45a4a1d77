import logging
import signal
import threading

logger = logging.getLogger(__name__)


class CancellationToken:
    """Set once by a signal handler, checked by the supervisor between steps."""

    def __init__(self):
        self._event = threading.Event()

    def cancel(self):
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def wait(self, timeout: float = None) -> bool:
        """Block until cancelled or `timeout` elapses; return True if cancelled."""
        return self._event.wait(timeout)


def install_signal_handlers(token: CancellationToken, signals=None):
    """Cancel `token` on SIGINT/SIGTERM instead of exiting from the handler."""
    signals = signals or (signal.SIGINT, signal.SIGTERM)

    def handler(signum, frame):
        logger.info(f"Received {signal.Signals(signum).name}, shutting down")
        token.cancel()

    for sig in signals:
        signal.signal(sig, handler)
