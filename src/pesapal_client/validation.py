"""Configuration validation.

Runs before the client is built, so a bad configuration never reaches the
network.
"""

import re

from pesapal_client.config import PesapalSettings
from pesapal_client.exceptions import ConfigurationError

# Dotted hostnames with no empty labels, or localhost with an optional port
IPN_URL_PATTERN = re.compile(
    r"^(http|https)://(localhost(:\d{1,5})?|(www\.)?[a-z0-9-]+(\.[a-z0-9-]+)*\.[a-z]{2,})([/?#].*)?$",
    re.IGNORECASE,
)


def validate_ipn_url(url: str) -> None:
    """
    Check a single IPN URL.

    Raises:
        ConfigurationError: If the URL has no http(s) scheme or a bad host
    """
    if not url or not url.startswith(("http://", "https://")):
        raise ConfigurationError(
            f"Invalid IPN URL: {url} - Must start with http:// or https://"
        )
    if not IPN_URL_PATTERN.match(url):
        raise ConfigurationError(f"Invalid IPN URL format: {url}")


def validate_settings(settings: PesapalSettings) -> None:
    """
    Validate the settings consumed by initialise_pesapal().

    Args:
        settings: Client settings

    Raises:
        ConfigurationError: On a missing field, an empty IPN list or a bad URL
    """
    if not settings.environment or not settings.consumer_key or not settings.consumer_secret:
        raise ConfigurationError("Invalid configuration: Missing required fields")

    if len(settings.ipn_urls) == 0:
        raise ConfigurationError("Invalid IPN URLS: Array cannot be empty")

    for ipn in settings.ipn_urls:
        validate_ipn_url(ipn.url)

    if settings.ipn_delay_seconds < 0:
        raise ConfigurationError("Invalid configuration: ipn_delay_seconds cannot be negative")
