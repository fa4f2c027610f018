"""Custom exceptions for the Pesapal client."""


class PesapalError(Exception):
    """
    Base exception for all Pesapal client errors.

    Raised directly for unstructured remote errors (the gateway returned a
    plain string in its ``error`` field) and for responses that cannot be
    interpreted at all.
    """

    pass


class ConfigurationError(PesapalError):
    """
    Raised when the client configuration is malformed.

    Always raised before any network activity takes place.
    """

    pass


class ValidationError(PesapalError):
    """
    Raised when a request is missing required fields.

    Detected locally; no request is sent.
    """

    pass


class IpnResolutionError(PesapalError):
    """
    Raised when an order's notification endpoint cannot be resolved.

    Examples:
    - No IPN endpoints are registered on the client
    - The order names an IPN URL that was never registered
    """

    pass


class StructuredRemoteError(PesapalError):
    """Error carrying the gateway's structured code/type/message triple."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        error_type: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.error_type = error_type


class AuthenticationError(StructuredRemoteError):
    """
    Raised when the token endpoint rejects the application credentials.

    ``code`` and ``error_type`` are None when the gateway reported the error
    as a plain string.
    """

    pass


class UnknownAuthenticationError(PesapalError):
    """
    Raised when the token endpoint returns neither a token nor an error.
    """

    pass


class GatewayError(StructuredRemoteError):
    """
    Raised when a non-auth call returns a structured business-logic error.
    """

    pass


class TransportError(PesapalError):
    """
    Raised when the request never produced a usable HTTP response.

    Wraps the underlying httpx error, available as ``cause`` and as
    ``__cause__``. The caller decides whether to retry.
    """

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.cause = cause


class TransactionStatusError(PesapalError):
    """
    Raised when a transaction status is anything other than "completed".

    Pending and failed transactions are not distinguished by the client;
    ``status_description`` and ``response`` expose the raw remote state.
    """

    def __init__(self, status_description: str, response=None) -> None:
        super().__init__(f"Getting Transaction Status Failed With {status_description}")
        self.status_description = status_description
        self.response = response


class InitializationError(PesapalError):
    """
    Raised when IPN registration or listing fails during initialization.

    The original error is chained as ``__cause__``.
    """

    pass
