"""Outbound email transport - Resend HTTP API."""

import logging
from dataclasses import dataclass
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailMessage:
    """Plain-text email to send."""

    sender: str
    to: str
    subject: str
    body: str


@dataclass(frozen=True)
class SendResult:
    """Transport outcome. ``error`` is set when ``ok`` is False."""

    ok: bool
    message_id: str | None = None
    error: str | None = None

    @classmethod
    def failure(cls, error: str) -> "SendResult":
        return cls(ok=False, error=error)


class EmailTransport(Protocol):
    """External email delivery provider."""

    async def send(self, message: EmailMessage) -> SendResult:
        """Send a message; failures are reported, not raised."""
        ...


class ResendEmailTransport:
    """Email transport backed by the Resend REST API."""

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.resend.com/emails",
        timeout_ms: int = 10000,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize transport.

        Args:
            api_key: Resend API key; an empty key fails every send
            base_url: Resend emails endpoint
            timeout_ms: HTTP timeout
            client: Optional httpx client (for testing with mocks)
        """
        self._api_key = api_key
        self._base_url = base_url
        self._timeout = timeout_ms / 1000
        self._client = client

    async def send(self, message: EmailMessage) -> SendResult:
        if not self._api_key:
            return SendResult.failure("email transport not configured")

        payload = {
            "from": message.sender,
            "to": [message.to],
            "subject": message.subject,
            "text": message.body,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}

        close_client = False
        client = self._client
        if client is None:
            client = httpx.AsyncClient(timeout=self._timeout)
            close_client = True

        try:
            response = await client.post(self._base_url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.warning("Resend request failed: %s", type(e).__name__)
            return SendResult.failure(f"{type(e).__name__}: {e}")
        finally:
            if close_client:
                await client.aclose()

        if response.status_code >= 400:
            detail = _json_field(response, "message") or response.text
            return SendResult.failure(f"HTTP {response.status_code}: {detail}")

        return SendResult(ok=True, message_id=_json_field(response, "id"))


def _json_field(response: httpx.Response, key: str) -> str | None:
    try:
        data = response.json()
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    value = data.get(key)
    return str(value) if value is not None else None
