"""Pydantic models for Pesapal JSON requests/responses.

Response models ignore unknown fields; the gateway adds fields over time.
Every response's ``error`` field is resolved into a RemoteError while the
model is built, so callers only ever branch on ``response.error``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field

from pesapal_client.models.errors import RemoteError, parse_remote_error

RemoteErrorField = Annotated[RemoteError | None, BeforeValidator(parse_remote_error)]


class NotificationMethod(str, Enum):
    """How Pesapal delivers an IPN call."""

    GET = "GET"
    POST = "POST"


class SubscriptionFrequency(str, Enum):
    """Billing frequency for recurring payments."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class GatewayResponse(BaseModel):
    """Fields shared by every Pesapal response body."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    error: RemoteErrorField = None
    status: str | int | None = None


class TokenResponse(GatewayResponse):
    """Response of /api/Auth/RequestToken."""

    token: str | None = None
    expiry_date: str | None = Field(None, alias="expiryDate")
    message: str | None = None


class IpnRegistration(GatewayResponse):
    """A registered IPN endpoint, as returned by RegisterIPN and GetIpnList."""

    url: str | None = None
    created_date: str | None = None
    ipn_id: str | None = None
    notification_type: int | None = None
    ipn_notification_type_description: str | None = None
    ipn_status: int | None = None
    ipn_status_description: str | None = None


class BillingAddress(BaseModel):
    """Payer billing details. Pesapal requires at least email or phone."""

    email_address: str | None = None
    phone_number: str | None = None
    country_code: str | None = None
    first_name: str | None = None
    middle_name: str | None = None
    last_name: str | None = None
    line_1: str | None = None
    line_2: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    zip_code: str | None = None


class SubscriptionDetails(BaseModel):
    """Recurring-payment schedule; every field is needed for a recurring order."""

    start_date: str | None = None
    end_date: str | None = None
    frequency: SubscriptionFrequency | None = None

    def is_complete(self) -> bool:
        return bool(self.start_date and self.end_date and self.frequency)


class OrderRequest(BaseModel):
    """
    Payment details for SubmitOrderRequest.

    The notification endpoint is referenced either directly by
    ``notification_id`` or by ``notification_ipn_url``, which the client
    resolves against its registered IPN endpoints.
    """

    model_config = ConfigDict(extra="ignore")

    id: str | None = None
    currency: str | None = None
    amount: float | None = None
    description: str | None = None
    callback_url: str | None = None
    notification_id: str | None = None
    notification_ipn_url: str | None = None
    billing_address: BillingAddress | None = None
    redirect_mode: str | None = None
    cancellation_url: str | None = None
    branch: str | None = None
    account_number: str | None = None
    subscription_details: SubscriptionDetails | None = None

    def to_payload(
        self,
        notification_id: str,
        product_id: str,
        description: str,
    ) -> dict[str, Any]:
        """
        Build the JSON body sent to SubmitOrderRequest.

        Args:
            notification_id: Resolved IPN id
            product_id: Merchant reference for the order (falls back to ``id``)
            description: Order description shown to the payer

        Returns:
            Request body with unset optional fields dropped
        """
        payload = self.model_dump(
            mode="json",
            exclude_none=True,
            exclude={"notification_ipn_url", "id", "description", "notification_id"},
        )
        payload["id"] = product_id or self.id
        payload["description"] = description
        payload["notification_id"] = notification_id
        return payload


class OrderResponse(GatewayResponse):
    """Response of /api/Transactions/SubmitOrderRequest."""

    order_tracking_id: str | None = None
    merchant_reference: str | None = None
    redirect_url: str | None = None


@dataclass
class OrderSubmission:
    """Result of a successful order submission."""

    status_code: int
    order_tracking_id: str | None
    merchant_reference: str | None
    redirect_url: str | None
    status: str | int | None = None


class TransactionStatus(GatewayResponse):
    """Response of /api/Transactions/GetTransactionStatus."""

    payment_method: str | None = None
    amount: float | None = None
    created_date: str | None = None
    confirmation_code: str | None = None
    payment_status_description: str | None = None
    description: str | None = None
    message: str | None = None
    payment_account: str | None = None
    call_back_url: str | None = None
    status_code: int | None = None
    merchant_reference: str | None = None
    payment_status_code: str | int | None = None
    currency: str | None = None

    @property
    def is_completed(self) -> bool:
        return (self.payment_status_description or "").lower() == "completed"


class RefundRequest(BaseModel):
    """Body of /api/Transactions/RefundRequestt."""

    confirmation_code: str
    amount: str
    username: str
    remarks: str


class RefundResponse(GatewayResponse):
    """Response of a refund request."""

    message: str | None = None
