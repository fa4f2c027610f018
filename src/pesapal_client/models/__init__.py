"""Data shapes for the Pesapal client."""

from pesapal_client.models.errors import (
    ErrorMessage,
    RemoteError,
    StructuredError,
    parse_remote_error,
    to_exception,
)
from pesapal_client.models.gateway import (
    BillingAddress,
    GatewayResponse,
    IpnRegistration,
    NotificationMethod,
    OrderRequest,
    OrderResponse,
    OrderSubmission,
    RefundRequest,
    RefundResponse,
    SubscriptionDetails,
    SubscriptionFrequency,
    TokenResponse,
    TransactionStatus,
)

__all__ = [
    "BillingAddress",
    "ErrorMessage",
    "GatewayResponse",
    "IpnRegistration",
    "NotificationMethod",
    "OrderRequest",
    "OrderResponse",
    "OrderSubmission",
    "RefundRequest",
    "RefundResponse",
    "RemoteError",
    "StructuredError",
    "SubscriptionDetails",
    "SubscriptionFrequency",
    "TokenResponse",
    "TransactionStatus",
    "parse_remote_error",
    "to_exception",
]
