"""Bearer token storage."""

import re
from datetime import datetime, timezone

_FRACTION = re.compile(r"(\.\d{6})\d+")


def parse_expiry(value: str | None) -> datetime | None:
    """
    Parse Pesapal's ``expiryDate`` into an aware UTC datetime.

    Pesapal sends .NET timestamps such as "2024-08-26T12:29:30.5177702Z",
    with seven fractional digits. Naive timestamps are taken as UTC.

    Returns:
        The expiry, or None if the value is missing or unparseable
    """
    if not value:
        return None
    text = _FRACTION.sub(r"\1", value.strip())
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class CredentialStore:
    """
    Holds the current bearer token and its expiry.

    A credential is valid only while a token is present and the current time
    is strictly before the expiry. A missing expiry counts as expired.
    """

    def __init__(self) -> None:
        self.token: str | None = None
        self.expiry: datetime | None = None

    def present(self) -> bool:
        return bool(self.token)

    def expired(self, now: datetime | None = None) -> bool:
        if not self.present() or self.expiry is None:
            return True
        now = now or datetime.now(timezone.utc)
        return now >= self.expiry

    def replace(self, token: str, expiry: datetime | None) -> None:
        self.token = token
        self.expiry = expiry

    def clear(self) -> None:
        self.token = None
        self.expiry = None
