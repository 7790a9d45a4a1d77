"""
Test fixtures for Ollama Supervisor tests.
"""

import json
import subprocess
from typing import Any, Dict, List

import pytest
import requests

from ollama_supervisor.cancellation import CancellationToken
from ollama_supervisor.client import OllamaClient
from ollama_supervisor.installer import PlatformInstaller
from ollama_supervisor.params import RetryPolicy
from ollama_supervisor.settings import settings
from ollama_supervisor.supervisor import OllamaSupervisor

API_URL = "http://127.0.0.1:11434"


class FakeResponse:
    def __init__(self, status_code: int = 200, body: Any = None, text: str = None):
        self.status_code = status_code
        self.text = text if text is not None else json.dumps(body if body is not None else {})

    def json(self):
        return json.loads(self.text)

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Answers GETs from a script; the last entry repeats once the script runs out."""

    def __init__(self, *script):
        self.script = list(script) or [FakeResponse()]
        self.calls: List[str] = []

    def get(self, url, timeout=None):
        self.calls.append(url)
        item = self.script.pop(0) if len(self.script) > 1 else self.script[0]
        if isinstance(item, Exception):
            raise item
        return item


def tags(*names: str) -> FakeResponse:
    return FakeResponse(body={"models": [{"name": n} for n in names]})


def refused() -> requests.exceptions.ConnectionError:
    return requests.exceptions.ConnectionError("Connection refused")


class FakeCli:
    """Stands in for `shutil.which("ollama")`."""

    def __init__(self, installed: bool = True):
        self.installed = installed
        self.lookups = 0

    def __call__(self, executable="ollama"):
        self.lookups += 1
        return self.installed


class FakeInstaller(PlatformInstaller):
    def __init__(self, cli: FakeCli, succeeds: bool = True, platform: str = "linux"):
        self.cli = cli
        self.succeeds = succeeds
        self.platform = platform
        self.calls = 0

    def install(self):
        self.calls += 1
        if not self.succeeds:
            raise subprocess.CalledProcessError(1, "curl -fsSL https://ollama.com/install.sh | sh")
        self.cli.installed = True


class FakeDaemon:
    def __init__(self):
        self.spawned = 0
        self.terminated = 0

    def spawn(self):
        self.spawned += 1
        return self

    def terminate(self, timeout=10.0):
        self.terminated += 1


class FakeRunner:
    """Records subprocess.run calls; `results` maps argv[0]/argv[1] to an outcome."""

    def __init__(self, results: Dict[str, Any] = None):
        self.results = results or {}
        self.calls: List[Any] = []

    def __call__(self, args, **kwargs):
        self.calls.append((args, kwargs))
        key = args[1] if args[0] == "ollama" else args[0]
        outcome = self.results.get(key, 0)
        if isinstance(outcome, Exception):
            raise outcome
        if kwargs.get("check") and outcome != 0:
            raise subprocess.CalledProcessError(outcome, args)
        return subprocess.CompletedProcess(args, outcome)

    def commands(self, name: str) -> List[Any]:
        return [args for args, _ in self.calls if name in args]


@pytest.fixture
def cli(monkeypatch):
    fake = FakeCli()
    monkeypatch.setattr("ollama_supervisor.supervisor.is_cli_installed", fake)
    return fake


@pytest.fixture
def daemon():
    return FakeDaemon()


@pytest.fixture
def runner():
    return FakeRunner()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_supervisor(cli, daemon, runner, sleeps):
    """Build a supervisor wired to fakes; `session` scripts the HTTP answers."""

    def factory(session: FakeSession, **kwargs) -> OllamaSupervisor:
        kwargs.setdefault("installer", FakeInstaller(cli))
        kwargs.setdefault("retry_policy", RetryPolicy(interval=2.0, max_attempts=15))
        kwargs.setdefault("token", CancellationToken())
        return OllamaSupervisor(
            model="gemma3:4b",
            api_url=API_URL,
            client=OllamaClient(API_URL, timeout=1, session=session),
            daemon_factory=lambda: daemon,
            run=runner,
            sleep=sleeps.append,
            **kwargs,
        )

    return factory


@pytest.fixture(scope="session")
def check_ollama():
    """Skip integration tests when no real Ollama answers."""
    if not OllamaClient(settings.ollama_url).is_running():
        pytest.skip(f"Ollama is not running at {settings.ollama_url}")
