"""
Base task class — common retry logic, async helpers, and lazy DI.

Provides:
- Standardized failure/retry/success logging
- Retry backoff defaults
- ``run_async`` to drive service coroutines from a sync worker
"""
import asyncio
import logging
from celery import Task

logger = logging.getLogger(__name__)


class BaseTask(Task):
    """Base task with common functionality for all workers."""

    abstract = True

    # Each task declares its own autoretry_for.
    retry_backoff = True
    retry_backoff_max = 300  # 5 minutes max backoff
    retry_jitter = True
    max_retries = 3

    track_started = True

    def on_failure(self, exc, task_id, args, kwargs, einfo):
        """Called when task fails after all retries exhausted."""
        logger.error(f"Task {self.name}[{task_id}] failed: {exc}")

    def on_retry(self, exc, task_id, args, kwargs, einfo):
        """Called when task is being retried."""
        logger.warning(f"Task {self.name}[{task_id}] retrying (attempt {self.request.retries}): {exc}")

    def on_success(self, retval, task_id, args, kwargs):
        """Called when task succeeds."""
        logger.info(f"Task {self.name}[{task_id}] succeeded")


def run_async(coro):
    """
    Run async function in sync context.

    Each call creates a new event loop to avoid conflicts.
    """
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


_dependencies = None


def get_dependencies():
    """
    Lazy load dependencies.

    Called after fork so each worker gets own instances.
    """
    global _dependencies
    if _dependencies is None:
        # Lazy imports: circular dependency avoidance
        from fitment_hub.core.config import settings
        from fitment_hub.clients.shopify_client import ShopifyClient
        from fitment_hub.services.tagging_service import TaggingService

        shopify_client = ShopifyClient(settings)
        _dependencies = {
            "settings": settings,
            "shopify_client": shopify_client,
            "tagging_service": TaggingService(
                client=shopify_client,
                batch_size=settings.tag_batch_size,
                action_delay_seconds=settings.tag_action_delay_ms / 1000,
                replace_delay_seconds=settings.tag_batch_delay_ms / 1000,
            ),
        }
    return _dependencies


def get_tagging_service():
    """Get tagging service instance."""
    return get_dependencies()["tagging_service"]
