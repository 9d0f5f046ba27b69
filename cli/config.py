"""Configuration management for the CLI tool."""

import secrets
import string
import time

from pydantic import BaseModel, Field

_ALPHABET = string.ascii_lowercase + string.digits
_SESSION_SUFFIX_LENGTH = 9


def generate_session_id() -> str:
    """``session_<epoch-ms>_<random>``, the same shape the browser client uses."""
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(_SESSION_SUFFIX_LENGTH))
    return f"session_{int(time.time() * 1000)}_{suffix}"


class CLIConfig(BaseModel):
    """CLI configuration settings."""

    host: str = Field(
        default="localhost",
        description="Server host",
    )
    port: int = Field(
        default=3000,
        description="Server port",
    )
    session_id: str = Field(
        default_factory=generate_session_id,
        description="Session key sent with every message",
    )
    history_limit: int = Field(
        default=10,
        description="Turns loaded when the CLI starts",
    )
    timeout: float = Field(
        default=35.0,
        description="HTTP timeout; a little above the server's webhook timeout",
    )

    @property
    def base_url(self) -> str:
        """Get the base URL for the API."""
        return f"http://{self.host}:{self.port}"

    @property
    def chat_url(self) -> str:
        return f"{self.base_url}/api/chat"

    @property
    def history_url(self) -> str:
        return f"{self.base_url}/api/history"

    @property
    def health_url(self) -> str:
        return f"{self.base_url}/api/health"
