"""HTTP transport for the Pesapal API."""

import json
from dataclasses import dataclass
from typing import Any

import httpx

from pesapal_client.exceptions import TransportError
from pesapal_client.logging_config import get_null_logger

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
}


@dataclass
class GatewayReply:
    """
    A decoded HTTP response.

    ``body`` is the decoded JSON value, or None when the body was empty or
    not JSON (``is_json`` tells the two apart).
    """

    status_code: int
    body: Any
    text: str
    is_json: bool

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


class GatewayTransport:
    """
    Thin wrapper over httpx.AsyncClient for JSON calls to one base URL.

    Connection and timeout failures are raised as TransportError; any HTTP
    response, whatever its status, is returned for the caller to interpret.
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 30.0,
        http_client: httpx.AsyncClient | None = None,
        logger: Any = None,
    ):
        """
        Initialize the transport.

        Args:
            base_url: Environment base URL (e.g., "https://cybqa.pesapal.com/pesapalv3")
            timeout_seconds: Request timeout in seconds (ignored if http_client is given)
            http_client: Pre-built client, e.g. one with a mock transport or event hooks
            logger: structlog logger; events are dropped when omitted
        """
        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._owns_client = http_client is None
        self.http_client = http_client or httpx.AsyncClient(timeout=timeout_seconds)
        self.logger = logger or get_null_logger()

    async def close(self) -> None:
        """Close the HTTP client connection pool if this transport created it."""
        if self._owns_client:
            await self.http_client.aclose()

    async def request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
        bearer_token: str | None = None,
    ) -> GatewayReply:
        """
        Send one request and decode the response body.

        Args:
            method: HTTP method
            path: Path relative to the base URL (e.g., "/api/URLSetup/GetIpnList")
            json_body: JSON-serializable request body
            params: Query parameters
            bearer_token: Token for the Authorization header, if any

        Returns:
            GatewayReply with the status code and decoded body

        Raises:
            TransportError: Timeout, connection or other request-level failure
        """
        url = f"{self.base_url}{path}"
        headers = dict(DEFAULT_HEADERS)
        if bearer_token:
            headers["Authorization"] = f"Bearer {bearer_token.strip()}"

        try:
            response = await self.http_client.request(
                method,
                url,
                headers=headers,
                json=json_body,
                params=params,
            )
        except httpx.TimeoutException as e:
            self.logger.error("pesapal_request_timeout", method=method, path=path, error=str(e))
            raise TransportError("Pesapal request timed out", cause=e) from e
        except httpx.RequestError as e:
            self.logger.error("pesapal_request_error", method=method, path=path, error=str(e))
            raise TransportError(f"Pesapal request error: {e}", cause=e) from e

        self.logger.debug(
            "pesapal_response_received",
            method=method,
            path=path,
            status_code=response.status_code,
        )
        return self._decode(response)

    @staticmethod
    def _decode(response: httpx.Response) -> GatewayReply:
        text = response.text
        if not text.strip():
            return GatewayReply(response.status_code, None, text, is_json=True)
        try:
            body = json.loads(text)
        except ValueError:
            return GatewayReply(response.status_code, None, text, is_json=False)
        return GatewayReply(response.status_code, body, text, is_json=True)
