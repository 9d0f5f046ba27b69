"""Error taxonomy for the relay: validation, webhook, store, config."""

from __future__ import annotations

from enum import Enum

from chatrelay.configs.config import ConfigError

__all__ = [
    "ChatValidationError",
    "ConfigError",
    "RelayError",
    "RelayErrorKind",
    "StoreError",
]


class ChatValidationError(Exception):
    """Raised when the caller's chat input is malformed (empty message)."""


class RelayErrorKind(str, Enum):
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    UPSTREAM = "upstream"
    NOT_CONFIGURED = "not_configured"


class RelayError(Exception):
    """Raised when the webhook call fails.

    ``status`` and ``body`` are only set for ``UPSTREAM`` failures.
    """

    def __init__(
        self,
        message: str,
        *,
        kind: RelayErrorKind,
        status: int | None = None,
        body: str | None = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.status = status
        self.body = body

    @property
    def details(self) -> str:
        """Human-readable detail string safe to hand back to the caller."""
        if self.status is None:
            return str(self)
        if self.body:
            return f"{self} (status {self.status}): {self.body}"
        return f"{self} (status {self.status})"


class StoreError(Exception):
    """Raised when a document-store read or write fails."""

    def __init__(self, message: str, *, operation: str) -> None:
        super().__init__(message)
        self.operation = operation
