import logging
import os
import subprocess
from typing import Callable, Dict, Optional

from ollama_supervisor.installer import OLLAMA_EXECUTABLE
from ollama_supervisor.settings import settings

logger = logging.getLogger(__name__)

SERVE_PATTERN = "ollama serve"


def serve_environment(bind_host: str = None, base: Dict[str, str] = None) -> Dict[str, str]:
    """Inherited environment with OLLAMA_HOST overridden for the daemon only."""
    env = dict(os.environ if base is None else base)
    env["OLLAMA_HOST"] = bind_host or settings.ollama_bind_host
    return env


class DaemonProcess:
    """Handle on a spawned `ollama serve`.

    The process runs in its own session with stdio discarded and is never
    waited on; the supervisor learns about its health over HTTP only.
    """

    def __init__(
        self,
        executable: str = OLLAMA_EXECUTABLE,
        bind_host: str = None,
        popen: Callable[..., subprocess.Popen] = subprocess.Popen,
    ):
        self.executable = executable
        self.bind_host = bind_host or settings.ollama_bind_host
        self._popen = popen
        self.process: Optional[subprocess.Popen] = None

    @property
    def pid(self) -> Optional[int]:
        return self.process.pid if self.process is not None else None

    def spawn(self) -> "DaemonProcess":
        logger.debug(f"Spawning '{self.executable} serve' with OLLAMA_HOST={self.bind_host}")
        self.process = self._popen(
            [self.executable, "serve"],
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            env=serve_environment(self.bind_host),
            start_new_session=True,
        )
        return self

    def terminate(self, timeout: float = 10.0) -> None:
        """Stop the owned process if it is still alive, escalating to kill."""
        if self.process is None:
            return
        if self.process.poll() is None:
            self.process.terminate()
            try:
                self.process.wait(timeout=timeout)
            except subprocess.TimeoutExpired:
                logger.warning(f"Daemon {self.process.pid} ignored SIGTERM, killing it")
                self.process.kill()
                self.process.wait()
        self.process = None


def kill_by_pattern(
    pattern: str = SERVE_PATTERN,
    run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
) -> bool:
    """pkill every process whose command line matches `pattern`.

    Returns True if pkill reported at least one match.
    """
    try:
        result = run(["pkill", "-f", pattern], capture_output=True, text=True)
    except OSError as e:
        logger.info(f"pkill unavailable: {e}")
        return False
    return result.returncode == 0
