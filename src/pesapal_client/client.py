"""Pesapal API client."""

from collections.abc import Callable
from datetime import datetime
from typing import Any, TypeVar

import httpx
import pydantic

from pesapal_client.auth import (
    CredentialStore,
    TokenAcquirer,
    TokenCoordinator,
    TokenStatus,
    utc_now,
)
from pesapal_client.config import PesapalSettings
from pesapal_client.exceptions import (
    ConfigurationError,
    IpnResolutionError,
    PesapalError,
    TransactionStatusError,
    ValidationError,
)
from pesapal_client.logging_config import get_null_logger
from pesapal_client.models import (
    GatewayResponse,
    IpnRegistration,
    NotificationMethod,
    OrderRequest,
    OrderResponse,
    OrderSubmission,
    RefundRequest,
    RefundResponse,
    TransactionStatus,
    to_exception,
)
from pesapal_client.transport import GatewayReply, GatewayTransport

IPN_REGISTER_PATH = "/api/URLSetup/RegisterIPN"
IPN_LIST_PATH = "/api/URLSetup/GetIpnList"
SUBMIT_ORDER_PATH = "/api/Transactions/SubmitOrderRequest"
TRANSACTION_STATUS_PATH = "/api/Transactions/GetTransactionStatus"
REFUND_PATH = "/api/Transactions/RefundRequestt"

ResponseT = TypeVar("ResponseT", bound=GatewayResponse)


class PesapalClient:
    """
    Client for the Pesapal v3 API.

    Every operation first awaits the TokenCoordinator, which fetches or
    refreshes the bearer token as needed, then sends exactly one request and
    interprets the response. Nothing is retried automatically.

    Registered IPN endpoints are cached in ``ipns``; submit_order() resolves
    notification URLs against this cache.
    """

    def __init__(
        self,
        settings: PesapalSettings,
        *,
        http_client: httpx.AsyncClient | None = None,
        logger: Any = None,
        clock: Callable[[], datetime] = utc_now,
        coalesce_refresh: bool = False,
    ):
        """
        Initialize the client.

        Args:
            settings: Environment and consumer credentials
            http_client: Optional pre-built httpx client (owned by the caller)
            logger: structlog logger; events are dropped when omitted
            clock: Returns the current aware UTC time; used for token expiry
            coalesce_refresh: Share one in-flight token acquisition among
                concurrent callers instead of letting each acquire its own

        Raises:
            ConfigurationError: If the consumer key or secret is empty
        """
        if not settings.consumer_key or not settings.consumer_secret:
            raise ConfigurationError("Invalid configuration: Missing consumer key or secret")

        self.settings = settings
        self.base_url = settings.base_url
        self.logger = logger or get_null_logger()
        self.ipns: list[IpnRegistration] = []

        self.transport = GatewayTransport(
            base_url=self.base_url,
            timeout_seconds=settings.timeout_seconds,
            http_client=http_client,
            logger=self.logger,
        )
        self.credentials = CredentialStore()
        self.acquirer = TokenAcquirer(
            transport=self.transport,
            store=self.credentials,
            consumer_key=settings.consumer_key,
            consumer_secret=settings.consumer_secret,
            logger=self.logger,
        )
        self.coordinator = TokenCoordinator(
            store=self.credentials,
            acquirer=self.acquirer,
            clock=clock,
            coalesce_refresh=coalesce_refresh,
            logger=self.logger,
        )

        self.logger.info(
            "pesapal_client_initialized",
            base_url=self.base_url,
            live=settings.is_live,
        )

    async def close(self) -> None:
        """Close the HTTP client connection pool."""
        await self.transport.close()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()

    async def ensure_token(self) -> TokenStatus:
        """Fetch or refresh the bearer token if needed."""
        return await self.coordinator.ensure_valid()

    async def register_ipn(
        self,
        url: str,
        notification_method_type: NotificationMethod | str = NotificationMethod.GET,
    ) -> IpnRegistration:
        """
        Register an IPN URL with Pesapal.

        Args:
            url: Endpoint Pesapal should call with payment updates
            notification_method_type: GET (default) or POST

        Returns:
            The registration record, also appended to ``ipns``

        Raises:
            ValidationError: Unknown notification method
            GatewayError: Structured error from Pesapal
            PesapalError: String error or unreadable response
        """
        method = self._notification_method(notification_method_type)
        self.logger.info("pesapal_ipn_registering", url=url, notification_method_type=method.value)

        reply = await self._authorized_request(
            "POST",
            IPN_REGISTER_PATH,
            json_body={"url": url, "ipn_notification_type": method.value},
        )
        registration = self._parse(reply, IpnRegistration)

        self.ipns = [*self.ipns, registration]
        self.logger.info("pesapal_ipn_registered", url=registration.url, ipn_id=registration.ipn_id)
        return registration

    async def get_ipn_endpoints(self) -> list[IpnRegistration]:
        """
        Fetch every IPN endpoint registered for this merchant.

        Replaces ``ipns`` wholesale with the remote list.

        Returns:
            Copy of the refreshed list

        Raises:
            GatewayError: First element carries a structured error
            PesapalError: First element carries a string error, or the body
                is not a list
        """
        reply = await self._authorized_request("GET", IPN_LIST_PATH)

        body = reply.body
        if isinstance(body, dict):
            # Errors on this endpoint sometimes come back as a bare object
            self._parse(reply, IpnRegistration)
            raise PesapalError(f"Unexpected IPN list response: {reply.text}")
        if not isinstance(body, list):
            # Empty or non-JSON body; the cached registrations are kept
            raise PesapalError(
                f"Unexpected IPN list response (HTTP {reply.status_code}): {reply.text}"
            )

        try:
            registrations = [IpnRegistration.model_validate(item) for item in body]
        except pydantic.ValidationError as e:
            raise PesapalError(f"Malformed IPN list response: {reply.text}") from e

        if registrations and registrations[0].error is not None:
            raise to_exception(registrations[0].error)
        self._raise_for_status(reply)

        self.ipns = registrations
        self.logger.debug("pesapal_ipn_list_refreshed", count=len(registrations))
        return list(self.ipns)

    async def submit_order(
        self,
        order: OrderRequest | dict[str, Any],
        product_id: str,
        description: str,
    ) -> OrderSubmission:
        """
        Submit an order and get the payment redirect URL.

        Validation and IPN resolution happen before any network call.

        Args:
            order: Payment details
            product_id: Merchant reference sent as the order id
            description: Order description

        Returns:
            OrderSubmission with the HTTP status, order tracking id,
            merchant reference and redirect URL

        Raises:
            ValidationError: Missing details, or an incomplete recurring block
            IpnResolutionError: No IPN registered, or the URL is unknown
            GatewayError / PesapalError: Pesapal rejected the order
        """
        order = self._validate_order(order, product_id, description)
        notification_id = self._resolve_notification_id(order)

        self.logger.info("pesapal_order_submitting", product_id=product_id)

        reply = await self._authorized_request(
            "POST",
            SUBMIT_ORDER_PATH,
            json_body=order.to_payload(notification_id, product_id, description),
        )
        try:
            response = self._parse(reply, OrderResponse)
        except PesapalError as e:
            self.logger.error("pesapal_order_submission_failed", product_id=product_id, error=str(e))
            raise

        self.logger.info(
            "pesapal_order_submitted",
            product_id=product_id,
            order_tracking_id=response.order_tracking_id,
        )
        return OrderSubmission(
            status_code=reply.status_code,
            order_tracking_id=response.order_tracking_id,
            merchant_reference=response.merchant_reference,
            redirect_url=response.redirect_url,
            status=response.status,
        )

    async def get_transaction_status(self, order_tracking_id: str) -> TransactionStatus:
        """
        Look up a transaction by order tracking id.

        Only a "completed" transaction (case-insensitive) counts as success.
        Pending, failed and reversed transactions all raise
        TransactionStatusError, which carries the raw status.

        Raises:
            ValidationError: Empty order tracking id
            TransactionStatusError: Transaction is not completed
            GatewayError / PesapalError: Pesapal returned an error
        """
        if not order_tracking_id:
            raise ValidationError("Order tracking ID is required")

        reply = await self._authorized_request(
            "GET",
            TRANSACTION_STATUS_PATH,
            params={"orderTrackingId": order_tracking_id},
        )
        status = self._parse(reply, TransactionStatus)

        if not status.is_completed:
            self.logger.warning(
                "pesapal_transaction_not_completed",
                order_tracking_id=order_tracking_id,
                payment_status_description=status.payment_status_description,
            )
            raise TransactionStatusError(status.payment_status_description or "", response=status)

        return status

    async def request_refund(self, request: RefundRequest | dict[str, Any]) -> RefundResponse:
        """
        Request a refund for a completed payment.

        Raises:
            ValidationError: Missing refund fields
            PesapalError: Empty response ("Refund Unsuccessful") or remote error
        """
        if not isinstance(request, RefundRequest):
            try:
                request = RefundRequest.model_validate(request)
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid refund request: {e}") from e

        self.logger.info("pesapal_refund_requesting", confirmation_code=request.confirmation_code)

        reply = await self._authorized_request("POST", REFUND_PATH, json_body=request.model_dump())
        if not reply.body:
            self.logger.error("pesapal_refund_empty_response", status_code=reply.status_code)
            raise PesapalError("Refund Unsuccessful")

        refund = self._parse(reply, RefundResponse)
        self.logger.info("pesapal_refund_requested", status=refund.status)
        return refund

    async def _authorized_request(
        self,
        method: str,
        path: str,
        *,
        json_body: Any = None,
        params: dict[str, Any] | None = None,
    ) -> GatewayReply:
        await self.coordinator.ensure_valid()
        return await self.transport.request(
            method,
            path,
            json_body=json_body,
            params=params,
            bearer_token=self.credentials.token,
        )

    @staticmethod
    def _parse(reply: GatewayReply, model: type[ResponseT]) -> ResponseT:
        """Validate a JSON object body, raising on remote errors and bad statuses."""
        if not isinstance(reply.body, dict):
            raise PesapalError(
                f"Unexpected response from Pesapal (HTTP {reply.status_code}): {reply.text}"
            )
        try:
            response = model.model_validate(reply.body)
        except pydantic.ValidationError as e:
            raise PesapalError(f"Malformed response from Pesapal: {reply.text}") from e

        if response.error is not None:
            raise to_exception(response.error)
        PesapalClient._raise_for_status(reply)
        return response

    @staticmethod
    def _raise_for_status(reply: GatewayReply) -> None:
        if not reply.ok:
            raise PesapalError(f"Pesapal returned HTTP {reply.status_code}: {reply.text}")

    @staticmethod
    def _notification_method(value: NotificationMethod | str) -> NotificationMethod:
        try:
            return NotificationMethod(value.upper() if isinstance(value, str) else value)
        except ValueError as e:
            raise ValidationError(f"Invalid notification method: {value}") from e

    @staticmethod
    def _validate_order(
        order: OrderRequest | dict[str, Any] | None,
        product_id: str,
        description: str,
    ) -> OrderRequest:
        if not order:
            raise ValidationError("Payment details are required")
        if not product_id:
            raise ValidationError("Product ID is required")
        if not description:
            raise ValidationError("Description is required")

        if not isinstance(order, OrderRequest):
            try:
                order = OrderRequest.model_validate(order)
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid payment details: {e}") from e

        if order.account_number and order.subscription_details is None:
            raise ValidationError("Subscription details are required")
        if order.subscription_details is not None and not order.subscription_details.is_complete():
            raise ValidationError("Subscription details are required")
        return order

    def _resolve_notification_id(self, order: OrderRequest) -> str:
        if not self.ipns:
            raise IpnResolutionError("No IPN endpoints available")
        if order.notification_id:
            return order.notification_id
        if not order.notification_ipn_url:
            raise IpnResolutionError("Notification IPN URL is required")

        for ipn in self.ipns:
            if ipn.url == order.notification_ipn_url and ipn.ipn_id:
                return ipn.ipn_id
        raise IpnResolutionError("Notification IPN URL does not match")
