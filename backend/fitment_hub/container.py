"""
Lazy DI container — singleton access to clients, stores, and services.

Works in both FastAPI (as ``Depends`` targets) and Celery (called directly).
Import individual getters to avoid circular imports.
"""

from functools import lru_cache

from fitment_hub.core.config import settings
from fitment_hub.clients.supabase_client import SupabaseClient
from fitment_hub.clients.shopify_client import ShopifyClient
from fitment_hub.db.field_store import FieldStore
from fitment_hub.db.fitment_store import FitmentStore
from fitment_hub.db.shop_store import ShopStore
from fitment_hub.services.field_service import FieldService
from fitment_hub.services.fitment_service import FitmentService
from fitment_hub.services.tagging_service import TaggingService


# -- Clients ---------------------------------------------------------------

@lru_cache(maxsize=1)
def get_supabase_client():
    return SupabaseClient(settings)


@lru_cache(maxsize=1)
def get_shopify_client():
    return ShopifyClient(settings)


# -- DB Stores -------------------------------------------------------------

@lru_cache(maxsize=1)
def get_shop_store():
    return ShopStore(get_supabase_client())


@lru_cache(maxsize=1)
def get_field_store():
    return FieldStore(get_supabase_client())


@lru_cache(maxsize=1)
def get_fitment_store():
    return FitmentStore(get_supabase_client())


# -- Services --------------------------------------------------------------

@lru_cache(maxsize=1)
def get_tagging_service():
    return TaggingService(
        client=get_shopify_client(),
        batch_size=settings.tag_batch_size,
        action_delay_seconds=settings.tag_action_delay_ms / 1000,
        replace_delay_seconds=settings.tag_batch_delay_ms / 1000,
    )


@lru_cache(maxsize=1)
def get_field_service():
    return FieldService(get_field_store())


@lru_cache(maxsize=1)
def get_fitment_service():
    return FitmentService(
        fitment_store=get_fitment_store(),
        field_store=get_field_store(),
        tagging=get_tagging_service(),
        shop_store=get_shop_store(),
    )
