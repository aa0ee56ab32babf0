"""
Pytest configuration and shared fixtures for Fitment Hub tests.

Provides mock clients, stores, services, and sample test data.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock

from fitment_hub.schemas.fitment import FieldType, FitmentField, SelectedProduct, VariantRef


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_settings():
    """Settings object with test defaults (no real credentials)."""
    from fitment_hub.core.config import Settings
    return Settings(
        supabase_url="https://test.supabase.co",
        supabase_key="test-supabase-key",
        supabase_service_role_key="test-supabase-key",
        shopify_store_domain="test-store.myshopify.com",
        shopify_admin_api_token="shpat_test_token",
        shopify_api_version="2024-01",
        shopify_api_key="test-api-key",
        shopify_api_secret="test-api-secret",
    )


# ---------------------------------------------------------------------------
# Clients (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_shopify_client():
    """Mocked ShopifyClient; tag calls succeed with no userErrors."""
    client = MagicMock()
    client.store_domain = "test-store.myshopify.com"
    client.access_token = "shpat_test_token"
    client.call_shopify = AsyncMock(return_value={})
    client.call_shopify_graphql = AsyncMock(return_value={})
    client.tags_add = AsyncMock(return_value=[])
    client.tags_remove = AsyncMock(return_value=[])
    client.list_products = AsyncMock(return_value=[])
    client.list_collections = AsyncMock(return_value=[])
    client.to_gid = MagicMock(side_effect=lambda entity, val: f"gid://shopify/{entity}/{val}")
    return client


@pytest.fixture
def mock_supabase():
    """Mock SupabaseClient with a chained table builder and rpc."""
    supabase_client = MagicMock()
    mock_table = MagicMock()
    for method in ("select", "insert", "update", "delete", "eq", "in_", "order", "limit"):
        getattr(mock_table, method).return_value = mock_table
    mock_table.execute.return_value = MagicMock(data=[], count=0)
    supabase_client.client.table.return_value = mock_table
    supabase_client.client.rpc.return_value.execute.return_value = MagicMock(data=[])
    return supabase_client, mock_table


# ---------------------------------------------------------------------------
# Stores / services (mocked)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_field_store(sample_fields):
    store = MagicMock()
    store.list_fields = AsyncMock(return_value=list(sample_fields))
    store.insert_field = AsyncMock()
    store.update_field = AsyncMock()
    store.delete_field = AsyncMock(return_value=None)
    store.set_sort_order = AsyncMock(return_value=None)
    return store


@pytest.fixture
def mock_fitment_store():
    store = MagicMock()
    store.upsert_bundle = AsyncMock(return_value=[{"fitment_set_id": 99}])
    store.get_set_details = AsyncMock(return_value={})
    store.get_sets_page = AsyncMock(return_value=[])
    store.duplicate_set = AsyncMock(return_value=100)
    store.delete_sets = AsyncMock(side_effect=lambda store_id, ids: len(ids))
    store.delete_all_sets = AsyncMock(return_value=0)
    store.count_sets = AsyncMock(return_value=0)
    return store


@pytest.fixture
def mock_tagging_service():
    from fitment_hub.schemas.tags import TagUpdateResult
    service = MagicMock()
    service.update_product_tags = AsyncMock(return_value=TagUpdateResult(ok=True))
    return service


# ---------------------------------------------------------------------------
# Sample data
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_fields():
    """Year (Range), Make and Model (Select), persisted in that order."""
    return [
        FitmentField(id=1, label="Year", slug="year", type=FieldType.RANGE,
                     required=True, sort_order=0, range_from="1990", range_to="2030"),
        FitmentField(id=2, label="Make", slug="make", type=FieldType.SELECT,
                     required=True, sort_order=1),
        FitmentField(id=3, label="Model", slug="model", type=FieldType.SELECT,
                     required=False, sort_order=2),
    ]


def make_product(pid: str, variant_ids=None) -> SelectedProduct:
    variant_ids = variant_ids or [int(pid) * 10]
    return SelectedProduct(
        id=pid,
        title=f"Product {pid}",
        variants=[VariantRef(shopify_variant_id=v) for v in variant_ids],
    )


@pytest.fixture
def product_factory():
    return make_product


@pytest.fixture
def sample_set_details():
    """Detail RPC row for a set tagged 2018-2022-honda with products 1 and 2."""
    return {
        "universal_fit": False,
        "fitment_tags": [{"tag": "2018-2022-honda"}, {"tag": "stale-tag"}],
        "field_values": [
            {"field_id": 1, "value_int": "[2018,2022)"},
            {"field_id": 2, "value_string": "Honda"},
        ],
        "products": [
            {"shopify_product_id": 1, "shopify_variant_id": 10, "title": "Product 1", "status": "active"},
            {"shopify_product_id": 2, "shopify_variant_id": 20, "title": "Product 2"},
        ],
    }
