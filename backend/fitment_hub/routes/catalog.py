"""
Catalog routes — Shopify products and collections for the pickers.
"""
from fastapi import APIRouter, Depends, Query

from fitment_hub.clients.shopify_client import ShopifyClient
from fitment_hub.container import get_shopify_client
from fitment_hub.core.auth import get_current_shop

router = APIRouter(prefix="/catalog", tags=["catalog"])


@router.get("/products")
async def list_products(
    first: int = Query(50, ge=1, le=250),
    current_shop: dict = Depends(get_current_shop),
    client: ShopifyClient = Depends(get_shopify_client),
):
    """Products with featured image and variant SKUs."""
    return {"products": await client.list_products(first=first)}


@router.get("/collections")
async def list_collections(
    first: int = Query(50, ge=1, le=250),
    current_shop: dict = Depends(get_current_shop),
    client: ShopifyClient = Depends(get_shopify_client),
):
    """Collections with their products' SKUs."""
    return {"collections": await client.list_collections(first=first)}
