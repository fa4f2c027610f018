"""Bearer token management."""

from pesapal_client.auth.acquisition import TOKEN_PATH, TokenAcquirer
from pesapal_client.auth.coordinator import TokenCoordinator, TokenStatus, utc_now
from pesapal_client.auth.credentials import CredentialStore, parse_expiry

__all__ = [
    "TOKEN_PATH",
    "CredentialStore",
    "TokenAcquirer",
    "TokenCoordinator",
    "TokenStatus",
    "parse_expiry",
    "utc_now",
]
