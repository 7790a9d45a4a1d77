from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_MODEL = "gemma3:4b"

# Model-name matching policies
MatchPolicy = Literal["family", "exact"]


class Settings(BaseSettings):
    """Application settings from environment variables with defaults.

    Environment variables mapping:
    - OLLAMA_URL: URL of the Ollama API (default: http://127.0.0.1:11434)
    - MODEL: Model that must be present once initialization completes
    - OLLAMA_BIND_HOST: Value of OLLAMA_HOST for the spawned daemon
    - INSTALL_SCRIPT_URL: Vendor install script piped to sh
    - STATUS_FILE: Where the status snapshot is written
    - POLL_INTERVAL: Seconds between startup probes
    - POLL_ATTEMPTS: Number of startup probes before giving up
    - PULL_TIMEOUT: Seconds allowed for `ollama pull`
    - PROBE_TIMEOUT: Seconds allowed for each HTTP probe
    - SUPERVISE_INTERVAL: Seconds between wake-ups while idling
    - MATCH_POLICY: "family" (name contains family token) or "exact"
    - LOG_LEVEL: Logging level name
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    # Server settings
    ollama_url: str = "http://127.0.0.1:11434"
    ollama_bind_host: str = "0.0.0.0:11434"
    install_script_url: str = "https://ollama.com/install.sh"

    # Model settings
    model: str = DEFAULT_MODEL
    match_policy: MatchPolicy = "family"

    # Timing
    poll_interval: float = 2.0
    poll_attempts: int = 15
    pull_timeout: float = 600.0
    probe_timeout: float = 5.0
    supervise_interval: float = 60.0

    # Output
    status_file: str = "ollama-status.json"
    log_level: str = "INFO"


settings = Settings()
