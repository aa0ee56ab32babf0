"""
Tagging tasks — Shopify product tag jobs run off the request path.

Tasks:
- replace_product_tags: full tag replacement via batched productUpdate
"""
import logging
from typing import Any, Dict, List

import httpx

from fitment_hub.celery_app.celery_config import celery_app
from fitment_hub.celery_app.tasks.base import BaseTask, run_async, get_tagging_service
from fitment_hub.core.exceptions import RetryableError, NonRetryableError
from fitment_hub.schemas.tags import ProductTags

logger = logging.getLogger(__name__)

RETRY_ON = (RetryableError, ConnectionError, TimeoutError, httpx.ConnectError, httpx.ReadTimeout)


@celery_app.task(
    bind=True,
    base=BaseTask,
    name="tasks.tagging.replace_product_tags",
    autoretry_for=RETRY_ON,
    dont_autoretry_for=(NonRetryableError,),
    retry_backoff=True,
    max_retries=3,
)
def replace_product_tags(self, products: List[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Overwrite the tag lists of ``products`` ([{product_id, tags}]).

    GraphQL errors inside a batch are logged by the primitive and do not
    fail the task.
    """
    entries = [ProductTags(**p) for p in products]
    logger.info(f"Tag replace job: {len(entries)} products")
    run_async(get_tagging_service().replace_product_tags(entries))
    return {"status": "completed", "total_products": len(entries)}
