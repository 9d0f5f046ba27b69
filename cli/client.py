"""API client for the chat relay.

Every call returns a plain ``dict`` instead of raising, so the CLI loop
can print whatever happened and keep going.  Transport failures come
back as ``{"success": False, "error": ..., "code": ...}``.
"""

import logging

import httpx

from .config import CLIConfig

logger = logging.getLogger(__name__)


class ChatAPIClient:
    """Client for the relay's ``/api/*`` endpoints."""

    def __init__(self, config: CLIConfig, transport: httpx.AsyncBaseTransport | None = None):
        """Initialize the API client."""
        self.config = config
        self.client = httpx.AsyncClient(timeout=config.timeout, transport=transport)

    async def chat(self, message: str) -> dict:
        """Send *message* for this CLI's session."""
        payload = {"message": message, "sessionId": self.config.session_id}
        logger.debug("POST %s %s", self.config.chat_url, payload)
        return await self._request("POST", self.config.chat_url, json=payload)

    async def history(self, limit: int | None = None) -> dict:
        """Fetch the most recent turns for this CLI's session."""
        params = {
            "sessionId": self.config.session_id,
            "limit": limit if limit is not None else self.config.history_limit,
        }
        return await self._request("GET", self.config.history_url, params=params)

    async def health(self) -> dict:
        return await self._request("GET", self.config.health_url)

    async def _request(self, method: str, url: str, **kwargs) -> dict:
        try:
            response = await self.client.request(method, url, **kwargs)
        except httpx.TimeoutException:
            return {"success": False, "error": "Request timed out.", "code": "TIMEOUT"}
        except httpx.TransportError as e:
            return {
                "success": False,
                "error": f"Connection error: {e}",
                "code": "CONNECTION_ERROR",
            }

        logger.debug("Response status: %s", response.status_code)
        try:
            data = response.json()
        except ValueError:
            return {
                "success": False,
                "error": f"HTTP {response.status_code}: {response.text}",
                "code": "HTTP_ERROR",
            }
        if not isinstance(data, dict):
            return {"success": False, "error": "Unexpected response", "code": "HTTP_ERROR"}
        if response.status_code >= 400:
            data.setdefault("success", False)
            data.setdefault("code", f"HTTP_{response.status_code}")
        return data

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()
