"""Unit tests for the credential store and expiry parsing."""

from datetime import datetime, timedelta, timezone

from pesapal_client.auth.credentials import CredentialStore, parse_expiry

NOW = datetime(2025, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class TestParseExpiry:
    """Tests for parse_expiry."""

    def test_dotnet_timestamp_with_seven_fraction_digits(self):
        """Test Pesapal's 7-digit fractional seconds with a Z suffix."""
        parsed = parse_expiry("2025-01-01T12:05:00.5177702Z")

        assert parsed == datetime(2025, 1, 1, 12, 5, 0, 517770, tzinfo=timezone.utc)

    def test_naive_timestamp_is_utc(self):
        """Test that a timestamp without offset is taken as UTC."""
        parsed = parse_expiry("2025-01-01T12:05:00")

        assert parsed == datetime(2025, 1, 1, 12, 5, tzinfo=timezone.utc)

    def test_offset_is_normalised_to_utc(self):
        """Test that an explicit offset is converted to UTC."""
        parsed = parse_expiry("2025-01-01T15:05:00+03:00")

        assert parsed == datetime(2025, 1, 1, 12, 5, tzinfo=timezone.utc)

    def test_missing_or_garbage_value(self):
        """Test that unusable values parse to None."""
        assert parse_expiry(None) is None
        assert parse_expiry("") is None
        assert parse_expiry("Thu Dec 12 2025") is None


class TestCredentialStore:
    """Tests for CredentialStore."""

    def test_new_store_is_empty_and_expired(self):
        """Test the initial ABSENT state."""
        store = CredentialStore()

        assert store.present() is False
        assert store.expired(NOW) is True

    def test_future_expiry_is_valid(self):
        """Test that a token expiring later is not expired."""
        store = CredentialStore()
        store.replace("tok", NOW + timedelta(minutes=5))

        assert store.present() is True
        assert store.expired(NOW) is False

    def test_expiry_boundary_counts_as_expired(self):
        """Test that now == expiry is already expired."""
        store = CredentialStore()
        store.replace("tok", NOW)

        assert store.expired(NOW) is True
        assert store.expired(NOW - timedelta(microseconds=1)) is False

    def test_missing_expiry_counts_as_expired(self):
        """Test that a token without a usable expiry is never reused."""
        store = CredentialStore()
        store.replace("tok", None)

        assert store.present() is True
        assert store.expired(NOW) is True

    def test_empty_token_is_not_present(self):
        """Test that an empty string token is treated as absent."""
        store = CredentialStore()
        store.replace("", NOW + timedelta(minutes=5))

        assert store.present() is False
        assert store.expired(NOW) is True

    def test_clear(self):
        """Test that clear() returns the store to ABSENT."""
        store = CredentialStore()
        store.replace("tok", NOW + timedelta(minutes=5))

        store.clear()

        assert store.token is None
        assert store.expiry is None
        assert store.present() is False

    def test_expired_defaults_to_wall_clock(self):
        """Test expired() without an explicit time."""
        store = CredentialStore()
        store.replace("tok", datetime.now(timezone.utc) + timedelta(hours=1))

        assert store.expired() is False
