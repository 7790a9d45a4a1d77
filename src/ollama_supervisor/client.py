"""
HTTP client for the Ollama daemon.

This module only probes an existing API; it never serves anything itself.
"""

import logging
from typing import List, Optional

import requests

from ollama_supervisor.settings import MatchPolicy, settings

logger = logging.getLogger(__name__)


def model_matches(name: str, model: str, policy: MatchPolicy = "family") -> bool:
    """Check whether a listed model name satisfies the configured model.

    Args:
        name: A name from the `models` array of /api/tags
        model: The configured identifier, e.g. "gemma3:4b"
        policy: "family" accepts any name containing the identifier or its
            family token ("gemma3"); "exact" requires the identifier itself
            (or "<identifier>:latest" for an untagged identifier)

    Returns:
        bool: True if the name counts as the configured model
    """
    if policy == "exact":
        if ":" not in model:
            return name in (model, f"{model}:latest")
        return name == model

    family = model.split(":", 1)[0]
    return model in name or family in name


class OllamaClient:
    """Client for probing the Ollama API."""

    def __init__(
        self,
        base_url: str = None,
        timeout: float = None,
        session: Optional[requests.Session] = None,
    ):
        """Initialize the client.

        Args:
            base_url: The base URL of the Ollama API (default: from settings)
            timeout: Per-request timeout in seconds (default: from settings)
            session: Session used for requests; tests pass a fake one
        """
        self.base_url = (base_url or settings.ollama_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.probe_timeout
        self.session = session or requests.Session()
        self.tags_endpoint = f"{self.base_url}/api/tags"

    def is_running(self) -> bool:
        """Return True if GET /api/tags answers with 200."""
        try:
            response = self.session.get(self.tags_endpoint, timeout=self.timeout)
            return response.status_code == 200
        except requests.exceptions.RequestException as e:
            logger.debug(f"Ollama not reachable at {self.base_url}: {e}")
            return False

    def list_models(self) -> List[str]:
        """Return the names listed by /api/tags.

        Raises:
            requests.exceptions.RequestException: on connection or HTTP errors
            ValueError: if the body is not the expected JSON shape
        """
        response = self.session.get(self.tags_endpoint, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()
        if not isinstance(data, dict):
            raise ValueError(f"Unexpected /api/tags payload: {data!r}")
        models = data.get("models") or []
        return [
            m["name"] for m in models if isinstance(m, dict) and isinstance(m.get("name"), str)
        ]

    def has_model(self, model: str, policy: MatchPolicy = None) -> bool:
        """Return True if the model is listed; any error counts as unavailable."""
        policy = policy or settings.match_policy
        try:
            available_models = self.list_models()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.debug(f"Could not list models: {e}")
            return False

        if any(model_matches(name, model, policy) for name in available_models):
            return True

        logger.debug(
            f"Model '{model}' not found in Ollama. "
            f"Available models: {', '.join(available_models) or 'none'}"
        )
        return False
