"""
Unit tests for ShopifyClient HTTP transport layer.

Tests domain normalization, GID conversion, GraphQL calls, tag mutations
and catalog listing.
"""
import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
from fastapi import HTTPException

from fitment_hub.clients.shopify_client import ShopifyClient
from fitment_hub.core.exceptions import ConnectionTimeoutError, RateLimitError


pytestmark = pytest.mark.unit


def _make_client(domain="test-store.myshopify.com", token="shpat_test", version="2024-01"):
    settings = MagicMock()
    settings.shopify_store_domain = domain
    settings.shopify_admin_api_token = token
    settings.shopify_api_version = version
    return ShopifyClient(settings)


def _mock_httpx(mock_async_client, status_code=200, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.text = "x" if payload is not None else ""
    resp.json.return_value = payload
    ctx = MagicMock()
    ctx.request = AsyncMock(return_value=resp)
    mock_async_client.return_value.__aenter__ = AsyncMock(return_value=ctx)
    mock_async_client.return_value.__aexit__ = AsyncMock(return_value=False)
    return ctx


class TestNormalizeStoreDomain:

    def test_none_returns_none(self):
        assert ShopifyClient.normalize_store_domain(None) is None

    def test_adds_suffix(self):
        assert ShopifyClient.normalize_store_domain("my-store") == "my-store.myshopify.com"

    def test_strips_protocol_and_slash(self):
        assert ShopifyClient.normalize_store_domain("https://my-store.myshopify.com/") == "my-store.myshopify.com"


class TestToGid:

    def test_numeric(self):
        assert _make_client().to_gid("Product", 123) == "gid://shopify/Product/123"

    def test_already_gid(self):
        gid = "gid://shopify/Product/9"
        assert _make_client().to_gid("Product", gid) == gid


class TestCalls:

    @pytest.mark.asyncio
    async def test_missing_env_raises_500(self):
        client = _make_client(token=None)
        with pytest.raises(HTTPException) as exc_info:
            await client.call_shopify_graphql("{ shop { name } }")
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_http_error_status(self):
        with patch("fitment_hub.clients.shopify_client.httpx.AsyncClient") as mock_async_client:
            _mock_httpx(mock_async_client, status_code=404, payload={})
            with pytest.raises(HTTPException) as exc_info:
                await _make_client().call_shopify("POST", "/graphql.json", json={})
        assert exc_info.value.status_code == 404

    @pytest.mark.asyncio
    async def test_429_raises_rate_limit(self):
        with patch("fitment_hub.clients.shopify_client.httpx.AsyncClient") as mock_async_client:
            ctx = _mock_httpx(mock_async_client, status_code=429, payload={})
            ctx.request.return_value.headers = {"Retry-After": "2.0"}
            with pytest.raises(RateLimitError) as exc_info:
                await _make_client().call_shopify("POST", "/graphql.json", json={})
        assert exc_info.value.retry_after == 2

    @pytest.mark.asyncio
    async def test_timeout_raises_retryable(self):
        with patch("fitment_hub.clients.shopify_client.httpx.AsyncClient") as mock_async_client:
            ctx = _mock_httpx(mock_async_client)
            ctx.request.side_effect = httpx.ReadTimeout("slow")
            with pytest.raises(ConnectionTimeoutError):
                await _make_client().call_shopify("POST", "/graphql.json", json={})

    @pytest.mark.asyncio
    async def test_graphql_errors_raise_502(self):
        client = _make_client()
        client.call_shopify = AsyncMock(return_value={"errors": [{"message": "bad"}]})
        with pytest.raises(HTTPException) as exc_info:
            await client.call_shopify_graphql("{ x }")
        assert exc_info.value.status_code == 502

    @pytest.mark.asyncio
    async def test_graphql_request_url_and_headers(self):
        with patch("fitment_hub.clients.shopify_client.httpx.AsyncClient") as mock_async_client:
            ctx = _mock_httpx(mock_async_client, payload={"data": {}})
            await _make_client().call_shopify_graphql("{ x }", {"a": 1})
        kwargs = ctx.request.await_args.kwargs
        assert kwargs["url"] == "https://test-store.myshopify.com/admin/api/2024-01/graphql.json"
        assert kwargs["headers"]["X-Shopify-Access-Token"] == "shpat_test"
        assert kwargs["json"] == {"query": "{ x }", "variables": {"a": 1}}


class TestTagMutations:

    @pytest.mark.asyncio
    async def test_tags_add_sends_gid_and_returns_user_errors(self):
        client = _make_client()
        client.call_shopify_graphql = AsyncMock(return_value={
            "data": {"tagsAdd": {"node": None, "userErrors": [{"field": ["id"], "message": "missing"}]}}
        })
        errors = await client.tags_add("42", ["honda"])
        query, variables = client.call_shopify_graphql.await_args.args
        assert "tagsAdd(id: $id, tags: $tags)" in query
        assert variables == {"id": "gid://shopify/Product/42", "tags": ["honda"]}
        assert errors == [{"field": ["id"], "message": "missing"}]

    @pytest.mark.asyncio
    async def test_tags_remove_success(self):
        client = _make_client()
        client.call_shopify_graphql = AsyncMock(return_value={
            "data": {"tagsRemove": {"node": {"id": "gid://shopify/Product/42"}, "userErrors": []}}
        })
        assert await client.tags_remove(42, ["honda"]) == []


class TestCatalog:

    @pytest.mark.asyncio
    async def test_list_products(self):
        client = _make_client()
        client.call_shopify_graphql = AsyncMock(return_value={"data": {"products": {"edges": [{
            "node": {
                "id": "gid://shopify/Product/1",
                "title": "Brake Pad",
                "featuredImage": {"originalSrc": "https://cdn/x.png"},
                "variants": {"edges": [{"node": {"sku": "BP-1"}}, {"node": {"sku": None}}]},
            }
        }]}}})
        products = await client.list_products()
        assert products == [{
            "id": "gid://shopify/Product/1",
            "title": "Brake Pad",
            "image": "https://cdn/x.png",
            "skus": ["BP-1"],
        }]

    @pytest.mark.asyncio
    async def test_list_collections(self):
        client = _make_client()
        client.call_shopify_graphql = AsyncMock(return_value={"data": {"collections": {"edges": [{
            "node": {
                "id": "gid://shopify/Collection/5",
                "title": "Brakes",
                "image": None,
                "products": {"edges": [{"node": {"title": "Brake Pad", "variants": {"edges": []}}}]},
            }
        }]}}})
        collections = await client.list_collections()
        assert collections[0]["collection_name"] == "Brakes"
        assert collections[0]["collection_image"] is None
        assert collections[0]["products"] == [{"product_name": "Brake Pad", "skus": []}]
