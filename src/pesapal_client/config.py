"""Configuration management for the Pesapal client."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pesapal_client.models.gateway import NotificationMethod

LIVE_BASE_URL = "https://pay.pesapal.com/v3"
SANDBOX_BASE_URL = "https://cybqa.pesapal.com/pesapalv3"

LIVE_ENVIRONMENTS = frozenset({"live", "production"})

DEFAULT_IPN_DELAY_SECONDS = 10.0


class IpnUrlSettings(BaseModel):
    """An IPN URL to register at initialization."""

    model_config = ConfigDict(frozen=True)

    url: str = Field(..., description="Endpoint Pesapal calls with payment updates")
    notification_method_type: NotificationMethod = Field(
        default=NotificationMethod.GET,
        description="HTTP method Pesapal uses for the IPN call",
    )


class PesapalSettings(BaseSettings):
    """
    Client settings, loaded from keyword arguments or PESAPAL_* variables.

    Example environment:
        PESAPAL_ENVIRONMENT=sandbox
        PESAPAL_CONSUMER_KEY=...
        PESAPAL_CONSUMER_SECRET=...
        PESAPAL_IPN_URLS='[{"url": "https://shop.example.com/ipn"}]'
    """

    environment: str = Field(default="", description="sandbox or live; required")
    consumer_key: str = Field(default="", description="Pesapal consumer key")
    consumer_secret: str = Field(default="", description="Pesapal consumer secret")
    ipn_urls: list[IpnUrlSettings] = Field(
        default_factory=list,
        description="IPN URLs registered by initialise_pesapal()",
    )
    ipn_delay_seconds: float = Field(
        default=DEFAULT_IPN_DELAY_SECONDS,
        description="Pause between IPN registrations to stay under the rate limit",
    )
    timeout_seconds: float = Field(default=30.0, description="HTTP request timeout")

    model_config = SettingsConfigDict(
        env_prefix="PESAPAL_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    @property
    def is_live(self) -> bool:
        return (self.environment or "").strip().lower() in LIVE_ENVIRONMENTS

    @property
    def base_url(self) -> str:
        """Production host for live environments, the sandbox host otherwise."""
        return LIVE_BASE_URL if self.is_live else SANDBOX_BASE_URL
