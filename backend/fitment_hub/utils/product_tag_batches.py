"""
Batched productUpdate tag replacement against the Shopify Admin GraphQL API.

Each request carries up to TAG_BATCH_SIZE aliased ``productUpdate``
mutations, so one round trip sets the full tag list of up to ten products.
Batches run strictly one after another with a fixed pause in between.

GraphQL-level ``errors`` are logged and the remaining batches still run;
the caller gets no per-batch result.
"""
import asyncio
import json
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence

import httpx

from fitment_hub.core.constants.tagging import (
    TAG_BATCH_DELAY_SECONDS,
    TAG_BATCH_SIZE,
    TAG_GRAPHQL_API_VERSION,
)
from fitment_hub.schemas.tags import ProductTags

logger = logging.getLogger("product_tag_batches")


def build_product_update_mutation(product_id: str, tags: Sequence[str]) -> str:
    """One productUpdate selection that replaces the product's tags."""
    tag_list = ", ".join(json.dumps(t) for t in tags)
    return (
        f"productUpdate(input: {{id: {json.dumps(product_id)}, tags: [{tag_list}]}}) {{\n"
        "    product { id tags }\n"
        "    userErrors { field message }\n"
        "  }"
    )


def build_bulk_mutation(batch: Sequence[ProductTags]) -> str:
    """Aliased document: ``mutation0: productUpdate(...) mutation1: ...``."""
    body = "\n".join(
        f"  mutation{i}: {build_product_update_mutation(p.product_id, p.tags)}"
        for i, p in enumerate(batch)
    )
    return "mutation {\n" + body + "\n}"


def chunk(items: Sequence[Any], size: int) -> List[Sequence[Any]]:
    return [items[i:i + size] for i in range(0, len(items), size)]


def graphql_url(shop: str) -> str:
    return f"https://{shop}/admin/api/{TAG_GRAPHQL_API_VERSION}/graphql.json"


async def _post_batch(
    client: httpx.AsyncClient,
    shop: str,
    access_token: str,
    query: str,
) -> Optional[Dict[str, Any]]:
    headers = {
        "X-Shopify-Access-Token": access_token,
        "Content-Type": "application/json",
    }
    resp = await client.post(graphql_url(shop), headers=headers, json={"query": query})
    try:
        payload = resp.json()
    except ValueError:
        logger.error("shopify graphql non-json response status=%s body=%s", resp.status_code, resp.text[:500])
        return None
    if not isinstance(payload, dict):
        logger.error("shopify graphql unexpected response status=%s body=%s", resp.status_code, resp.text[:500])
        return None
    if payload.get("errors"):
        logger.error("shopify graphql errors status=%s errors=%s", resp.status_code, payload["errors"])
    return payload.get("data")


async def bulk_update_product_tags(
    products_with_tags: Sequence[ProductTags],
    shop: str,
    access_token: str,
    *,
    batch_size: int = TAG_BATCH_SIZE,
    delay_seconds: float = TAG_BATCH_DELAY_SECONDS,
    http_client: Optional[httpx.AsyncClient] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> None:
    """
    Replace the complete tag list of every product, ``batch_size`` per request.

    Args:
        products_with_tags: full desired tag list per product (not a patch)
        shop: myshopify domain of the store
        access_token: Admin API access token
    """
    batches = chunk(list(products_with_tags), batch_size)
    if not batches:
        return

    owns_client = http_client is None
    client = http_client or httpx.AsyncClient(timeout=30.0)
    try:
        for index, batch in enumerate(batches):
            if index > 0:
                await sleep(delay_seconds)
            query = build_bulk_mutation(batch)
            data = await _post_batch(client, shop, access_token, query)
            logger.info(
                "tag batch %s/%s updated size=%s result=%s",
                index + 1, len(batches), len(batch), data,
            )
    finally:
        if owns_client:
            await client.aclose()
