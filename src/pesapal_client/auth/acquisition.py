"""Exchange of consumer credentials for a bearer token."""

from typing import Any

import pydantic

from pesapal_client.auth.credentials import CredentialStore, parse_expiry
from pesapal_client.exceptions import (
    AuthenticationError,
    TransportError,
    UnknownAuthenticationError,
)
from pesapal_client.logging_config import get_null_logger
from pesapal_client.models import TokenResponse, to_exception
from pesapal_client.transport import GatewayTransport

TOKEN_PATH = "/api/Auth/RequestToken"


class TokenAcquirer:
    """
    Requests bearer tokens from /api/Auth/RequestToken.

    The only side effect is on the CredentialStore: a successful call
    replaces the stored token, every failed call clears it.
    """

    def __init__(
        self,
        transport: GatewayTransport,
        store: CredentialStore,
        consumer_key: str,
        consumer_secret: str,
        logger: Any = None,
    ) -> None:
        self.transport = transport
        self.store = store
        self._consumer_key = consumer_key
        self._consumer_secret = consumer_secret
        self.logger = logger or get_null_logger()

    async def acquire(self) -> TokenResponse:
        """
        Request a new token and store it.

        Returns:
            The parsed token response

        Raises:
            AuthenticationError: Gateway returned an error (structured or string)
            UnknownAuthenticationError: Response had neither token nor error
            TransportError: Request never got a response
        """
        self.logger.info("pesapal_token_requested")

        try:
            reply = await self.transport.request(
                "POST",
                TOKEN_PATH,
                json_body={
                    "consumer_key": self._consumer_key,
                    "consumer_secret": self._consumer_secret,
                },
            )
        except TransportError:
            self.store.clear()
            raise

        try:
            response = TokenResponse.model_validate(
                reply.body if isinstance(reply.body, dict) else {}
            )
        except pydantic.ValidationError as e:
            self.store.clear()
            raise UnknownAuthenticationError(f"Malformed token response: {reply.text}") from e

        if response.error is not None:
            self.store.clear()
            error = to_exception(response.error, AuthenticationError, AuthenticationError)
            self.logger.error(
                "pesapal_token_rejected",
                status_code=reply.status_code,
                error_code=getattr(error, "code", None),
                error_message=str(error),
            )
            raise error

        if response.token:
            expiry = parse_expiry(response.expiry_date)
            self.store.replace(response.token, expiry)
            self.logger.info(
                "pesapal_token_acquired",
                expires_at=expiry.isoformat() if expiry else None,
            )
            return response

        self.store.clear()
        self.logger.error("pesapal_token_malformed_response", status_code=reply.status_code)
        raise UnknownAuthenticationError("Get token failed with unknown error")
