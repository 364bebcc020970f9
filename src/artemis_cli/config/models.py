"""Configuration data models."""

from dataclasses import dataclass, field
from typing import Any

DEFAULT_BASE_URL = "https://artemis-app.inf.tu-dresden.de"
DEFAULT_TIMEOUT = 30.0


@dataclass
class PollSettings:
    """How long to wait for the build pipeline after a push."""

    initial_delay: float = 5.0
    backoff: float = 2.0
    max_delay: float = 30.0
    max_attempts: int = 6

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PollSettings":
        return cls(
            initial_delay=float(data.get("initial_delay", 5.0)),
            backoff=float(data.get("backoff", 2.0)),
            max_delay=float(data.get("max_delay", 30.0)),
            max_attempts=int(data.get("max_attempts", 6)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "initial_delay": self.initial_delay,
            "backoff": self.backoff,
            "max_delay": self.max_delay,
            "max_attempts": self.max_attempts,
        }

    def delays(self) -> list[float]:
        """Sleep durations before each poll, growing by ``backoff``."""
        delays = []
        delay = self.initial_delay
        for _ in range(max(self.max_attempts, 0)):
            delays.append(min(delay, self.max_delay))
            delay *= self.backoff
        return delays


@dataclass
class ArtemisConfig:
    """Settings stored in the local configuration file."""

    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    poll: PollSettings = field(default_factory=PollSettings)

    def __post_init__(self) -> None:
        self.base_url = self.base_url.rstrip("/")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArtemisConfig":
        return cls(
            base_url=data.get("base_url", DEFAULT_BASE_URL),
            timeout=float(data.get("timeout", DEFAULT_TIMEOUT)),
            poll=PollSettings.from_dict(data.get("poll", {})),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "base_url": self.base_url,
            "timeout": self.timeout,
            "poll": self.poll.to_dict(),
        }
