"""One-call setup: validate settings, register IPN URLs, load the IPN list."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any

from pesapal_client.client import PesapalClient
from pesapal_client.config import PesapalSettings
from pesapal_client.exceptions import InitializationError, PesapalError
from pesapal_client.logging_config import get_null_logger
from pesapal_client.validation import validate_settings


async def initialise_pesapal(
    settings: PesapalSettings | None = None,
    *,
    logger: Any = None,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    **client_options: Any,
) -> PesapalClient:
    """
    Build a ready-to-use client.

    IPN URLs are registered one at a time, pausing ``ipn_delay_seconds``
    between registrations (not after the last one) to stay under Pesapal's
    rate limit. The IPN list is then refreshed from the gateway.

    Args:
        settings: Client settings; read from PESAPAL_* variables when omitted
        logger: structlog logger passed on to the client
        sleep: Coroutine used for the pause between registrations
        **client_options: Extra PesapalClient keyword arguments
            (http_client, clock, coalesce_refresh)

    Returns:
        PesapalClient with ``ipns`` populated

    Raises:
        ConfigurationError: Invalid settings; raised before any network call
        InitializationError: Registration or listing failed
    """
    settings = settings or PesapalSettings()
    validate_settings(settings)

    logger = logger or get_null_logger()
    client = PesapalClient(settings, logger=logger, **client_options)
    last_index = len(settings.ipn_urls) - 1

    try:
        for index, ipn in enumerate(settings.ipn_urls):
            await client.register_ipn(ipn.url, ipn.notification_method_type)
            if index < last_index:
                logger.info(
                    "pesapal_ipn_registration_paused",
                    delay_seconds=settings.ipn_delay_seconds,
                )
                await sleep(settings.ipn_delay_seconds)

        await client.get_ipn_endpoints()
    except PesapalError as e:
        logger.error("pesapal_initialization_failed", error=str(e))
        await client.close()
        raise InitializationError(f"Failed to initialize Pesapal: {e}") from e
    except BaseException:
        await client.close()
        raise

    logger.info("pesapal_initialized", ipn_count=len(client.ipns))
    return client
