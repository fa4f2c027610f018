"""Token lifecycle: decides whether a token is reused, refreshed or acquired.

Token states:
    ABSENT  --acquire ok-->  VALID  --expiry passes-->  EXPIRED  --acquire ok-->  VALID
    ABSENT/EXPIRED  --acquire fails-->  ABSENT
"""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from pesapal_client.auth.acquisition import TokenAcquirer
from pesapal_client.auth.credentials import CredentialStore
from pesapal_client.logging_config import get_null_logger


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class TokenStatus:
    """Outcome of ensure_valid()."""

    valid: bool
    refreshed: bool


class TokenCoordinator:
    """
    Gate for all authenticated traffic.

    ensure_valid() must be awaited before a bearer token is attached to a
    request. By default each caller runs its own check-then-acquire, so two
    operations that both observe an expired token can trigger two
    acquisitions; the last one to finish wins. With ``coalesce_refresh=True``
    concurrent callers share a single in-flight acquisition instead; a
    cancelled caller stops waiting but the shared acquisition keeps running
    for the others.
    """

    def __init__(
        self,
        store: CredentialStore,
        acquirer: TokenAcquirer,
        clock: Callable[[], datetime] = utc_now,
        coalesce_refresh: bool = False,
        logger: Any = None,
    ) -> None:
        self.store = store
        self.acquirer = acquirer
        self.clock = clock
        self.coalesce_refresh = coalesce_refresh
        self.logger = logger or get_null_logger()
        self._in_flight: asyncio.Future | None = None

    async def ensure_valid(self) -> TokenStatus:
        """
        Make sure the store holds a valid token.

        Returns:
            TokenStatus(valid=True, refreshed=...) where ``refreshed`` is True
            only when an expired token was replaced

        Raises:
            Whatever TokenAcquirer.acquire() raises; the store is left empty
        """
        if not self.store.present():
            await self._acquire()
            return TokenStatus(valid=True, refreshed=False)

        if self.store.expired(self.clock()):
            self.logger.info("pesapal_token_expired")
            await self._acquire()
            return TokenStatus(valid=True, refreshed=True)

        return TokenStatus(valid=True, refreshed=False)

    async def _acquire(self) -> None:
        if not self.coalesce_refresh:
            await self.acquirer.acquire()
            return

        task = self._in_flight
        if task is None:
            task = asyncio.ensure_future(self.acquirer.acquire())
            task.add_done_callback(self._forget_in_flight)
            self._in_flight = task
        else:
            self.logger.debug("pesapal_token_acquisition_joined")
        await asyncio.shield(task)

    def _forget_in_flight(self, task: asyncio.Future) -> None:
        if self._in_flight is task:
            self._in_flight = None
