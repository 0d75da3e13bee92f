"""HTTP transport from chat clients to the relay API."""
from typing import Any, Optional
import logging

import requests

from config import RELAY_URL, REQUEST_TIMEOUT
from models.api import ChatRequest

logger = logging.getLogger(__name__)


class TransportError(Exception):
    """The relay round trip failed (network, status, or response body)."""


class RelayClient:
    """Posts chat requests to POST /api/chat and returns the reply text."""

    def __init__(
        self,
        api_url: str = RELAY_URL,
        session: Optional[Any] = None,
        timeout: float = REQUEST_TIMEOUT
    ):
        """
        Args:
            api_url: Base URL of the relay API
            session: HTTP session with a requests-style post() (defaults to requests.Session)
            timeout: Request timeout in seconds
        """
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.timeout = timeout

    def send(self, chat_request: ChatRequest) -> str:
        """
        Send one request and return the reply.

        Raises:
            TransportError: On network failure, non-2xx status, error body,
                malformed JSON, or a missing reply field
        """
        try:
            response = self.session.post(
                f"{self.api_url}/api/chat",
                json=chat_request.to_wire(),
                timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            raise TransportError(f"Request to relay failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise TransportError(f"HTTP error! status: {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise TransportError("Relay returned malformed JSON") from e

        if not isinstance(data, dict):
            raise TransportError("Invalid response format")
        if "error" in data:
            raise TransportError(str(data["error"]))
        reply = data.get("reply")
        if not reply or not isinstance(reply, str):
            raise TransportError("Invalid response format")

        logger.debug(f"Received reply ({len(reply)} chars)")
        return reply
