"""Unit tests for Pesapal models and remote error resolution."""

import pytest

from pesapal_client.exceptions import (
    AuthenticationError,
    GatewayError,
    PesapalError,
    TransactionStatusError,
)
from pesapal_client.models import (
    ErrorMessage,
    IpnRegistration,
    OrderRequest,
    StructuredError,
    TokenResponse,
    TransactionStatus,
    parse_remote_error,
    to_exception,
)


class TestParseRemoteError:
    """Tests for parse_remote_error."""

    @pytest.mark.parametrize("raw", [None, "", {}])
    def test_no_error(self, raw):
        assert parse_remote_error(raw) is None

    def test_all_null_object_is_no_error(self):
        """Test the null-filled error object sent with successful status lookups."""
        raw = {"error_type": None, "code": None, "message": None, "call_back_url": None}

        assert parse_remote_error(raw) is None

    def test_string(self):
        assert parse_remote_error("Unauthorized") == ErrorMessage(message="Unauthorized")

    def test_structured_with_type(self):
        raw = {"code": "500", "type": "error", "message": "x"}

        assert parse_remote_error(raw) == StructuredError(message="x", code="500", error_type="error")

    def test_structured_with_error_type(self):
        raw = {"error_type": "api_error", "code": "payment_details_not_found", "message": ""}

        error = parse_remote_error(raw)

        assert error == StructuredError(
            message="", code="payment_details_not_found", error_type="api_error"
        )

    def test_numeric_code_is_text(self):
        assert parse_remote_error({"code": 401, "message": "no"}).code == "401"

    def test_unexpected_shape(self):
        assert parse_remote_error(["a", "b"]) == ErrorMessage(message='["a", "b"]')


class TestToException:
    """Tests for to_exception."""

    def test_structured_defaults_to_gateway_error(self):
        exc = to_exception(StructuredError(message="Bad URL", code="invalid_url", error_type="api_error"))

        assert isinstance(exc, GatewayError)
        assert str(exc) == "Bad URL"
        assert exc.code == "invalid_url"
        assert exc.error_type == "api_error"

    def test_plain_defaults_to_pesapal_error(self):
        exc = to_exception(ErrorMessage(message="oops"))

        assert type(exc) is PesapalError
        assert str(exc) == "oops"

    def test_custom_classes(self):
        structured = to_exception(
            StructuredError(message="x", code="500"), AuthenticationError, AuthenticationError
        )
        plain = to_exception(ErrorMessage(message="y"), AuthenticationError, AuthenticationError)

        assert isinstance(structured, AuthenticationError)
        assert isinstance(plain, AuthenticationError)
        assert plain.code is None


class TestResponseModels:
    """Tests for response model parsing."""

    def test_token_response_alias(self):
        response = TokenResponse.model_validate(
            {"token": "t", "expiryDate": "2025-01-01T12:05:00Z", "error": None, "status": "200"}
        )

        assert response.expiry_date == "2025-01-01T12:05:00Z"
        assert response.error is None

    def test_error_resolved_on_validation(self):
        registration = IpnRegistration.model_validate({"error": "bad", "status": "500"})

        assert registration.error == ErrorMessage(message="bad")

    def test_unknown_fields_ignored(self):
        registration = IpnRegistration.model_validate(
            {"url": "https://example.com/ipn", "ipn_id": "abc123", "brand_new_field": 1}
        )

        assert registration.ipn_id == "abc123"

    @pytest.mark.parametrize("description", ["Completed", "completed", "COMPLETED"])
    def test_transaction_completed(self, description):
        assert TransactionStatus(payment_status_description=description).is_completed

    @pytest.mark.parametrize("description", [None, "", "Pending", "Failed", "Reversed"])
    def test_transaction_not_completed(self, description):
        assert not TransactionStatus(payment_status_description=description).is_completed

    def test_transaction_status_error_message(self):
        exc = TransactionStatusError("Failed")

        assert str(exc) == "Getting Transaction Status Failed With Failed"
        assert exc.status_description == "Failed"
        assert exc.response is None


class TestOrderPayload:
    """Tests for OrderRequest.to_payload."""

    def test_payload_overrides_and_drops(self):
        order = OrderRequest(
            id="ignored",
            currency="KES",
            amount=150.5,
            description="ignored",
            callback_url="https://shop.example.com/callback",
            notification_ipn_url="https://example.com/ipn",
            billing_address={"email_address": "payer@example.com"},
        )

        payload = order.to_payload("abc123", "prod-1", "Two tickets")

        assert payload == {
            "id": "prod-1",
            "currency": "KES",
            "amount": 150.5,
            "description": "Two tickets",
            "callback_url": "https://shop.example.com/callback",
            "notification_id": "abc123",
            "billing_address": {"email_address": "payer@example.com"},
        }

    def test_payload_falls_back_to_order_id(self):
        order = OrderRequest(id="order-9", currency="KES", amount=1)

        assert order.to_payload("abc123", "", "desc")["id"] == "order-9"
