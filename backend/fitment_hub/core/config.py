import os
from typing import Optional
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel


load_dotenv()


class Settings(BaseModel):
    # Supabase
    supabase_url: str | None = os.getenv("SUPABASE_URL")
    supabase_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    supabase_service_role_key: str | None = os.getenv("SUPABASE_SERVICE_ROLE_KEY")

    # Shopify Admin API (offline token for the installed shop)
    shopify_store_domain: str | None = os.getenv("SHOPIFY_STORE_DOMAIN")
    shopify_admin_api_token: str | None = os.getenv("SHOPIFY_ADMIN_API_TOKEN")
    shopify_api_version: str = os.getenv("SHOPIFY_API_VERSION", "2024-01")

    # Shopify app credentials, used to verify App Bridge session tokens
    shopify_api_key: Optional[str] = os.getenv("SHOPIFY_API_KEY")
    shopify_api_secret: Optional[str] = os.getenv("SHOPIFY_API_SECRET")

    # Redis
    redis_url: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Celery
    celery_broker_url: str = os.getenv("CELERY_BROKER_URL", os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    celery_result_backend: str = os.getenv("CELERY_RESULT_BACKEND", os.getenv("REDIS_URL", "redis://localhost:6379/0"))

    # Tagging
    tag_batch_size: int = int(os.getenv("TAG_BATCH_SIZE", "10"))
    tag_batch_delay_ms: int = int(os.getenv("TAG_BATCH_DELAY_MS", "500"))
    tag_action_delay_ms: int = int(os.getenv("TAG_ACTION_DELAY_MS", "150"))

    # Fitment table
    fitment_page_size: int = int(os.getenv("FITMENT_PAGE_SIZE", "50"))

    # Rate limits
    shopify_api_rate_limit: str = os.getenv("SHOPIFY_API_RATE_LIMIT", "30/m")


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = Settings()
