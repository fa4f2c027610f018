"""Remote error shapes.

The gateway reports failures in an ``error`` field that is either a plain
string or an object with code/type/message. The raw value is resolved once,
at the response boundary, into one of the two variants below.
"""

import json
from dataclasses import dataclass
from typing import Any

from pesapal_client.exceptions import GatewayError, PesapalError, StructuredRemoteError


@dataclass(frozen=True)
class ErrorMessage:
    """Unstructured error: the gateway sent a bare string."""

    message: str


@dataclass(frozen=True)
class StructuredError:
    """Structured error object with code, type and message."""

    message: str
    code: str | None = None
    error_type: str | None = None


RemoteError = ErrorMessage | StructuredError

_STRUCTURED_KEYS = ("code", "type", "error_type", "message")


def _as_text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return value if isinstance(value, str) else str(value)


def parse_remote_error(raw: Any) -> RemoteError | None:
    """
    Resolve a raw ``error`` value into a RemoteError, or None for "no error".

    An error object whose fields are all null counts as no error; the
    transaction status endpoint sends one on every successful lookup.

    Args:
        raw: Value of the ``error`` field as decoded from JSON

    Returns:
        ErrorMessage, StructuredError or None
    """
    if isinstance(raw, (ErrorMessage, StructuredError)):
        return raw
    if raw is None or raw == "":
        return None
    if isinstance(raw, str):
        return ErrorMessage(message=raw)
    if isinstance(raw, dict):
        if all(_as_text(raw.get(key)) is None for key in _STRUCTURED_KEYS):
            return None
        return StructuredError(
            message=_as_text(raw.get("message")) or "",
            code=_as_text(raw.get("code")),
            error_type=_as_text(raw.get("type")) or _as_text(raw.get("error_type")),
        )
    return ErrorMessage(message=json.dumps(raw, default=str))


def to_exception(
    error: RemoteError,
    structured_cls: type[StructuredRemoteError] = GatewayError,
    plain_cls: type[PesapalError] = PesapalError,
) -> PesapalError:
    """
    Translate a RemoteError into the exception the caller should raise.

    Args:
        error: Resolved remote error
        structured_cls: Exception type for structured errors
        plain_cls: Exception type for string errors

    Returns:
        Exception instance (not raised)
    """
    if isinstance(error, StructuredError):
        return structured_cls(error.message, code=error.code, error_type=error.error_type)
    return plain_cls(error.message)
