"""
Supervisor that makes sure Ollama is installed, running and has the required
model, then keeps it supervised until cancelled.
"""

import enum
import logging
import subprocess
import time
from typing import Callable, Optional

from ollama_supervisor.cancellation import CancellationToken
from ollama_supervisor.client import OllamaClient
from ollama_supervisor.daemon import DaemonProcess, kill_by_pattern
from ollama_supervisor.installer import (
    OLLAMA_EXECUTABLE,
    MANUAL_INSTALL_URL,
    InstallationError,
    PlatformInstaller,
    installer_for_platform,
    is_cli_installed,
)
from ollama_supervisor.params import RetryPolicy, Status
from ollama_supervisor.settings import settings

logger = logging.getLogger(__name__)


class SupervisorState(enum.Enum):
    NOT_STARTED = "not_started"
    CLI_CHECKED = "cli_checked"
    SERVICE_STARTED = "service_started"
    MODEL_READY = "model_ready"
    INITIALIZED = "initialized"
    FAILED = "failed"


class ServiceStartTimeout(TimeoutError):
    """The daemon did not answer within the retry policy's budget."""


class OllamaSupervisor:
    """Installs, starts and health-checks a local Ollama daemon."""

    def __init__(
        self,
        model: str = None,
        api_url: str = None,
        client: OllamaClient = None,
        installer: PlatformInstaller = None,
        retry_policy: RetryPolicy = None,
        token: CancellationToken = None,
        daemon_factory: Callable[[], DaemonProcess] = DaemonProcess,
        run: Callable[..., subprocess.CompletedProcess] = subprocess.run,
        sleep: Callable[[float], None] = time.sleep,
        auto_pull: bool = True,
    ):
        self.model = model or settings.model
        self.api_url = (api_url or settings.ollama_url).rstrip("/")
        self.client = client or OllamaClient(self.api_url)
        self.installer = installer or installer_for_platform()
        self.retry_policy = retry_policy or RetryPolicy(
            interval=settings.poll_interval, max_attempts=settings.poll_attempts
        )
        self.token = token or CancellationToken()
        self.auto_pull = auto_pull
        self.state = SupervisorState.NOT_STARTED
        # Only set when this supervisor spawned the daemon itself
        self.process: Optional[DaemonProcess] = None

        self._daemon_factory = daemon_factory
        self._run = run
        self._sleep = sleep

    def is_installed(self) -> bool:
        return is_cli_installed(OLLAMA_EXECUTABLE)

    def install(self) -> bool:
        """Install the CLI with the platform installer and verify it landed on PATH."""
        logger.info("Installing Ollama CLI...")

        try:
            self.installer.install()
            if not self.is_installed():
                raise InstallationError(
                    "Installation completed but ollama command not found"
                )
        except (InstallationError, subprocess.CalledProcessError, OSError) as e:
            logger.error(f"Failed to install Ollama: {e}")
            logger.info(f"Please install Ollama manually from {MANUAL_INSTALL_URL}")
            return False

        logger.info("Ollama CLI installed successfully")
        return True

    def ensure_installed(self) -> bool:
        if self.is_installed():
            logger.info("Ollama CLI already installed")
            return True

        logger.info("Ollama CLI not found, attempting to install...")
        return self.install()

    def is_running(self) -> bool:
        return self.client.is_running()

    def is_model_available(self) -> bool:
        return self.client.has_model(self.model)

    def _wait_until_running(self) -> None:
        policy = self.retry_policy
        for attempt in range(1, policy.max_attempts + 1):
            self._sleep(policy.interval)
            if self.is_running():
                return
            logger.info(
                f"Waiting for Ollama to start... ({attempt}/{policy.max_attempts})"
            )
        raise ServiceStartTimeout(
            f"Ollama service failed to start within {policy.budget:g}s"
        )

    def start(self) -> bool:
        """Start `ollama serve` unless the API already answers."""
        logger.info("Starting Ollama service...")

        if self.is_running():
            logger.info(f"Ollama already running at {self.api_url}")
            return True

        try:
            self.process = self._daemon_factory().spawn()
            self._wait_until_running()
        except (ServiceStartTimeout, OSError) as e:
            logger.error(f"Failed to start Ollama: {e}")
            return False

        logger.info("Ollama service started successfully")
        return True

    def pull_model(self) -> bool:
        """Run `ollama pull` synchronously; failures are reported, not retried."""
        logger.info(f"Pulling model '{self.model}' (this may take several minutes)...")
        try:
            self._run(
                [OLLAMA_EXECUTABLE, "pull", self.model],
                check=True,
                timeout=settings.pull_timeout,
            )
        except subprocess.TimeoutExpired:
            logger.error(
                f"Failed to pull model '{self.model}': timed out after "
                f"{settings.pull_timeout:g}s"
            )
            return False
        except subprocess.CalledProcessError as e:
            logger.error(
                f"Failed to pull model '{self.model}': exited with status {e.returncode}"
            )
            return False
        except OSError as e:
            logger.error(f"Failed to pull model '{self.model}': {e}")
            return False

        logger.info(f"Successfully pulled model '{self.model}'")
        return True

    def ensure_model(self) -> bool:
        logger.info(f"Ensuring model '{self.model}' is available...")

        if self.is_model_available():
            logger.info(f"Model '{self.model}' already available")
            return True

        if not self.auto_pull:
            logger.warning(
                f"Model '{self.model}' not available. "
                f"You can pull it with: ollama pull {self.model}"
            )
            return False

        return self.pull_model()

    def get_status(self) -> Status:
        running = self.is_running()
        available = self.is_model_available() if running else False
        return Status(
            ollama_running=running,
            gemma_available=available,
            api_url=self.api_url,
            model=self.model,
        )

    def _fail(self, message: str) -> bool:
        self.state = SupervisorState.FAILED
        logger.error(f"Initialization failed: {message}")
        return False

    def initialize(self) -> bool:
        """Run install -> start -> model in order, stopping at the first failure."""
        logger.info(f"Initializing Ollama with {self.model}...")

        steps = [
            (self.ensure_installed, SupervisorState.CLI_CHECKED,
             "Ollama CLI not available and installation failed"),
            (self.start, SupervisorState.SERVICE_STARTED,
             "Failed to start Ollama service"),
            (self.ensure_model, SupervisorState.MODEL_READY,
             f"Failed to ensure model '{self.model}' is available"),
        ]
        for step, reached, failure in steps:
            if self.token.cancelled:
                return self._fail("cancelled")
            if not step():
                return self._fail(failure)
            self.state = reached

        self.state = SupervisorState.INITIALIZED
        logger.info(f"Ollama with {self.model} initialized successfully")
        logger.info(f"API available at: {self.api_url}")
        logger.info(f"Model ready: {self.model}")
        return True

    def supervise(self, interval: float = None) -> None:
        """Idle until the cancellation token is set."""
        interval = interval if interval is not None else settings.supervise_interval
        while not self.token.wait(interval):
            if not self.is_running():
                logger.warning(f"Ollama is not answering at {self.api_url}")

    def shutdown(self) -> None:
        """Stop the daemon; cleanup problems are logged, never raised."""
        logger.info("Shutting down Ollama service...")
        if self.process is not None:
            try:
                self.process.terminate()
            except OSError as e:
                logger.info(f"Could not terminate daemon process: {e}")
            self.process = None

        if kill_by_pattern(run=self._run):
            logger.info("Ollama service stopped")
        else:
            logger.info("Ollama service cleanup completed")
