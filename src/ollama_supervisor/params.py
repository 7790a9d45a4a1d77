from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator


def derive_ready(data: Any) -> Any:
    # ready is never taken from the caller
    if isinstance(data, dict):
        running = data.get("ollama_running", data.get("ollamaRunning", False))
        available = data.get("gemma_available", data.get("gemmaAvailable", False))
        data = {k: v for k, v in data.items() if k != "ready"}
        data["ready"] = bool(running) and bool(available)
    return data


class Status(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    install_time: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        alias="installTime",
        description="When this snapshot was taken",
    )
    ollama_running: bool = Field(
        False, alias="ollamaRunning", description="Daemon answered GET /api/tags"
    )
    gemma_available: bool = Field(
        False, alias="gemmaAvailable", description="Configured model is listed"
    )
    api_url: str = Field(..., alias="apiUrl")
    model: str = Field(..., description="Configured model identifier")
    ready: bool = Field(False, description="Running and model available")

    @model_validator(mode="before")
    @classmethod
    def validate_ready(cls, data: Any) -> Any:
        return derive_ready(data)

    def to_json_dict(self) -> dict:
        """Camel-case, JSON-safe mapping as written to the status file."""
        return self.model_dump(mode="json", by_alias=True)


class RetryPolicy(BaseModel):
    interval: float = Field(2.0, gt=0, description="Seconds to sleep before each probe")
    max_attempts: int = Field(15, ge=1, description="Probes before giving up")

    @property
    def budget(self) -> float:
        return self.interval * self.max_attempts
