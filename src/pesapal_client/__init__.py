"""Async client for the Pesapal v3 payments API."""

from pesapal_client.auth import CredentialStore, TokenAcquirer, TokenCoordinator, TokenStatus
from pesapal_client.client import PesapalClient
from pesapal_client.config import IpnUrlSettings, PesapalSettings
from pesapal_client.exceptions import (
    AuthenticationError,
    ConfigurationError,
    GatewayError,
    InitializationError,
    IpnResolutionError,
    PesapalError,
    TransactionStatusError,
    TransportError,
    UnknownAuthenticationError,
    ValidationError,
)
from pesapal_client.initializer import initialise_pesapal
from pesapal_client.logging_config import configure_logging, get_logger
from pesapal_client.models import (
    BillingAddress,
    IpnRegistration,
    NotificationMethod,
    OrderRequest,
    OrderSubmission,
    RefundRequest,
    RefundResponse,
    SubscriptionDetails,
    SubscriptionFrequency,
    TransactionStatus,
)

__all__ = [
    "AuthenticationError",
    "BillingAddress",
    "ConfigurationError",
    "CredentialStore",
    "GatewayError",
    "InitializationError",
    "IpnRegistration",
    "IpnResolutionError",
    "IpnUrlSettings",
    "NotificationMethod",
    "OrderRequest",
    "OrderSubmission",
    "PesapalClient",
    "PesapalError",
    "PesapalSettings",
    "RefundRequest",
    "RefundResponse",
    "SubscriptionDetails",
    "SubscriptionFrequency",
    "TokenAcquirer",
    "TokenCoordinator",
    "TokenStatus",
    "TransactionStatus",
    "TransactionStatusError",
    "TransportError",
    "UnknownAuthenticationError",
    "ValidationError",
    "configure_logging",
    "get_logger",
    "initialise_pesapal",
]
