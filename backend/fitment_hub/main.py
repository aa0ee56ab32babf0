import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from fitment_hub.core.config import settings
from fitment_hub.core.middleware import apply_cors, register_exception_handlers
from fitment_hub.routes import health_router, v1_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Log startup configuration and shutdown."""
    logger.info("=== Fitment Hub Starting ===")
    if not settings.shopify_store_domain or not settings.shopify_admin_api_token:
        logger.warning("Shopify env vars missing; tag and catalog routes will fail")
    if not settings.shopify_api_secret:
        logger.warning("SHOPIFY_API_SECRET not set; session tokens cannot be verified")
    logger.info(
        f"Tagging: batch_size={settings.tag_batch_size} "
        f"batch_delay_ms={settings.tag_batch_delay_ms} action_delay_ms={settings.tag_action_delay_ms}"
    )
    logger.info("=== Fitment Hub Ready ===")

    yield

    logger.info("=== Fitment Hub Shutting Down ===")


app = FastAPI(title="Fitment Hub Backend", lifespan=lifespan)
logging.basicConfig(level=logging.INFO, format="%(levelname)s:%(name)s:%(message)s")

apply_cors(app)
register_exception_handlers(app)

app.include_router(health_router)
app.include_router(v1_router)
