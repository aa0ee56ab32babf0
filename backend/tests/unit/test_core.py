"""
Unit tests for core exceptions, constants, config and error mapping.
"""
import pytest
from unittest.mock import patch

from fitment_hub.clients.supabase_client import SupabaseClient
from fitment_hub.core.config import Settings
from fitment_hub.core.constants import TAG_BATCH_DELAY_SECONDS, TAG_BATCH_SIZE, UNIVERSAL_TAG
from fitment_hub.core.exceptions import (
    ExternalAPIError,
    FitmentHubException,
    FitmentSetNotFoundError,
    NonRetryableError,
    PersistenceError,
    RateLimitError,
    RetryableError,
    ValidationError,
)
from fitment_hub.core.middleware import status_for


pytestmark = pytest.mark.unit


class TestExceptions:

    def test_hierarchy(self):
        assert issubclass(ValidationError, NonRetryableError)
        assert issubclass(PersistenceError, NonRetryableError)
        assert issubclass(ExternalAPIError, RetryableError)
        assert issubclass(RetryableError, FitmentHubException)

    def test_external_api_error_message(self):
        exc = ExternalAPIError(service="Shopify", message="timeout", status_code=504)
        assert str(exc) == "Shopify API error: timeout"
        assert exc.status_code == 504

    def test_rate_limit_default(self):
        exc = RateLimitError(service="Shopify")
        assert exc.retry_after == 60


class TestStatusMapping:

    @pytest.mark.parametrize("exc, expected", [
        (ValidationError("x"), (422, "VALIDATION_ERROR")),
        (FitmentSetNotFoundError("x"), (404, "NOT_FOUND")),
        (PersistenceError("x"), (500, "PERSISTENCE_ERROR")),
        (RateLimitError("Shopify"), (429, "RATE_LIMITED")),
        (ExternalAPIError("Shopify", "x"), (502, "UPSTREAM_ERROR")),
        (FitmentHubException("x"), (500, "INTERNAL_ERROR")),
    ])
    def test_status_for(self, exc, expected):
        assert status_for(exc) == expected


class TestConstantsAndSettings:

    def test_tagging_constants(self):
        assert UNIVERSAL_TAG == "universal"
        assert TAG_BATCH_SIZE == 10
        assert TAG_BATCH_DELAY_SECONDS == 0.5

    def test_settings_defaults(self):
        settings = Settings()
        assert settings.shopify_api_version
        assert settings.tag_batch_size >= 1
        assert settings.fitment_page_size >= 1


class TestSupabaseClient:

    @pytest.fixture(autouse=True)
    def _reset_instance(self):
        SupabaseClient._instance = None
        yield
        SupabaseClient._instance = None

    def test_missing_credentials(self):
        with pytest.raises(RuntimeError, match="SUPABASE_SERVICE_ROLE_KEY"):
            SupabaseClient(Settings(supabase_url="", supabase_service_role_key=""))

    def test_client_created_once(self, mock_settings):
        with patch("fitment_hub.clients.supabase_client.create_client") as create:
            wrapper = SupabaseClient(mock_settings)
            assert wrapper.client is wrapper.client
        create.assert_called_once_with("https://test.supabase.co", "test-supabase-key")
