import logging
from typing import Any, Dict, List, Optional
import httpx
from fastapi import HTTPException

from fitment_hub.core.config import Settings
from fitment_hub.core.constants.tagging import TAGS_ADD_MUTATION, TAGS_REMOVE_MUTATION
from fitment_hub.core.exceptions import ConnectionTimeoutError, RateLimitError

logger = logging.getLogger("shopify_client")


PRODUCTS_QUERY = """
    query listProducts($first: Int!) {
      products(first: $first) {
        edges {
          node {
            id
            title
            featuredImage { originalSrc }
            variants(first: 10) {
              edges { node { sku } }
            }
          }
        }
      }
    }
"""

COLLECTIONS_QUERY = """
    query listCollections($first: Int!) {
      collections(first: $first) {
        edges {
          node {
            id
            title
            handle
            image { originalSrc }
            products(first: 100) {
              edges {
                node {
                  title
                  variants(first: 10) {
                    edges { node { sku } }
                  }
                }
              }
            }
          }
        }
      }
    }
"""


def _variant_skus(node: Dict[str, Any]) -> List[str]:
    edges = ((node.get("variants") or {}).get("edges")) or []
    return [e["node"]["sku"] for e in edges if (e.get("node") or {}).get("sku")]


class ShopifyClient:
    """HTTP transport for the Shopify Admin API of the installed shop."""

    def __init__(self, settings: Settings) -> None:
        raw_domain = settings.shopify_store_domain
        self._store_domain = self.normalize_store_domain(raw_domain)
        self._token = settings.shopify_admin_api_token
        self._api_version = settings.shopify_api_version
        logger.info(f"ShopifyClient initialized: domain={self._store_domain} (raw: {raw_domain})")

    @property
    def store_domain(self) -> Optional[str]:
        return self._store_domain

    @property
    def access_token(self) -> Optional[str]:
        return self._token

    @staticmethod
    def normalize_store_domain(domain: Optional[str]) -> Optional[str]:
        """
        Normalize Shopify store domain to ensure it has .myshopify.com suffix.

        Handles these formats:
        - "my-store" -> "my-store.myshopify.com"
        - "my-store.myshopify.com" -> "my-store.myshopify.com" (unchanged)
        - "https://my-store.myshopify.com" -> "my-store.myshopify.com" (strips protocol)
        """
        if not domain:
            return domain

        domain = domain.replace("https://", "").replace("http://", "")
        domain = domain.rstrip("/")

        if not domain.endswith(".myshopify.com"):
            domain = f"{domain}.myshopify.com"

        return domain

    def to_gid(self, entity: str, value: str | int) -> str:
        if isinstance(value, str) and value.startswith("gid://"):
            return value
        return f"gid://shopify/{entity}/{value}"

    def _base_url(self) -> str:
        if not self._store_domain or not self._token:
            raise HTTPException(status_code=500, detail="Shopify env vars missing")
        return f"https://{self._store_domain}/admin/api/{self._api_version}"

    async def call_shopify(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        base = self._base_url()
        url = f"{base}{path}"
        logger.info("shopify request method=%s path=%s params=%s", method, path, params)

        headers = {
            "X-Shopify-Access-Token": self._token or "",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=30.0) as client:
                resp = await client.request(method=method, url=url, headers=headers, json=json, params=params)
        except (httpx.TimeoutException, httpx.ConnectError) as e:
            logger.info("shopify transport error path=%s detail=%s", path, str(e))
            raise ConnectionTimeoutError(f"Shopify request to {path} failed: {e}") from e

        logger.info("shopify response status=%s path=%s", resp.status_code, path)
        if resp.status_code == 429:
            retry_after = resp.headers.get("Retry-After") or "2"
            raise RateLimitError("Shopify", retry_after=int(float(retry_after)))
        if resp.status_code >= 400:
            raise HTTPException(status_code=resp.status_code, detail=resp.text)

        if resp.text:
            return resp.json()
        return {}

    async def call_shopify_graphql(self, query: str, variables: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        payload = {"query": query, "variables": variables or {}}
        data = await self.call_shopify("POST", "/graphql.json", json=payload)
        if data.get("errors"):
            raise HTTPException(status_code=502, detail=str(data.get("errors")))
        return data

    async def tags_add(self, product_id: str | int, tags: List[str]) -> List[Dict[str, Any]]:
        """Add tags to one product without touching its other tags. Returns userErrors."""
        variables = {"id": self.to_gid("Product", product_id), "tags": tags}
        data = await self.call_shopify_graphql(TAGS_ADD_MUTATION, variables)
        return ((data.get("data") or {}).get("tagsAdd") or {}).get("userErrors") or []

    async def tags_remove(self, product_id: str | int, tags: List[str]) -> List[Dict[str, Any]]:
        """Remove tags from one product without touching its other tags. Returns userErrors."""
        variables = {"id": self.to_gid("Product", product_id), "tags": tags}
        data = await self.call_shopify_graphql(TAGS_REMOVE_MUTATION, variables)
        return ((data.get("data") or {}).get("tagsRemove") or {}).get("userErrors") or []

    async def list_products(self, first: int = 50) -> List[Dict[str, Any]]:
        """First page of products with featured image and variant SKUs."""
        data = await self.call_shopify_graphql(PRODUCTS_QUERY, {"first": first})
        edges = ((data.get("data") or {}).get("products") or {}).get("edges") or []
        products = []
        for edge in edges:
            node = edge.get("node") or {}
            products.append({
                "id": node.get("id"),
                "title": node.get("title"),
                "image": (node.get("featuredImage") or {}).get("originalSrc"),
                "skus": _variant_skus(node),
            })
        return products

    async def list_collections(self, first: int = 50) -> List[Dict[str, Any]]:
        """First page of collections with their products' SKUs."""
        data = await self.call_shopify_graphql(COLLECTIONS_QUERY, {"first": first})
        edges = ((data.get("data") or {}).get("collections") or {}).get("edges") or []
        collections = []
        for edge in edges:
            node = edge.get("node") or {}
            product_edges = ((node.get("products") or {}).get("edges")) or []
            collections.append({
                "collection_id": node.get("id"),
                "collection_name": node.get("title"),
                "collection_image": (node.get("image") or {}).get("originalSrc"),
                "products": [
                    {
                        "product_name": (pe.get("node") or {}).get("title"),
                        "skus": _variant_skus(pe.get("node") or {}),
                    }
                    for pe in product_edges
                ],
            })
        return collections
