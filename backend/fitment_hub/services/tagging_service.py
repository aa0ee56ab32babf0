"""
Tagging service — Shopify product tag add/remove/replace.

Two paths:
- Managed bulk actions (``bulk_add_product_tags`` / ``bulk_remove_product_tags``)
  use per-product ``tagsAdd`` / ``tagsRemove``, so other tags on the product
  are kept. Products of one batch are settled together; batches run in order.
- ``replace_product_tags`` uses the aliased ``productUpdate`` primitive and
  overwrites each product's full tag list.

``update_product_tags`` is the reconcile step of a fitment-set save.
"""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, List, Sequence

from fitment_hub.clients.shopify_client import ShopifyClient
from fitment_hub.core.constants.tagging import (
    MAX_SUMMARY_ERRORS,
    TAG_ACTION_DELAY_SECONDS,
    TAG_BATCH_DELAY_SECONDS,
    TAG_BATCH_SIZE,
)
from fitment_hub.core.exceptions import AuthenticationError, ValidationError
from fitment_hub.schemas.tags import BulkTagSummary, ProductTags, TagUpdateResult
from fitment_hub.utils import product_tag_batches
from fitment_hub.utils.product_tag_batches import chunk

logger = logging.getLogger(__name__)

TagCall = Callable[[str, List[str]], Awaitable[List[Dict[str, Any]]]]


def normalize_tags(tags: Sequence[Any]) -> List[str]:
    """Trim, drop blanks, de-duplicate (first occurrence wins)."""
    cleaned = (str(t).strip() for t in tags)
    return list(dict.fromkeys(t for t in cleaned if t))


def format_user_errors(product_id: str, user_errors: List[Dict[str, Any]]) -> str:
    parts = []
    for err in user_errors:
        path = err.get("field")
        field_name = ".".join(path) if isinstance(path, list) else "field"
        parts.append(f"{field_name}: {err.get('message')}")
    return f"UserErrors for product {product_id}: " + " | ".join(parts)


class TaggingService:
    def __init__(
        self,
        client: ShopifyClient,
        batch_size: int = TAG_BATCH_SIZE,
        action_delay_seconds: float = TAG_ACTION_DELAY_SECONDS,
        replace_delay_seconds: float = TAG_BATCH_DELAY_SECONDS,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._client = client
        self._batch_size = batch_size
        self._action_delay = action_delay_seconds
        self._replace_delay = replace_delay_seconds
        self._sleep = sleep

    async def bulk_add_product_tags(self, product_ids: Sequence[str], tags: Sequence[str]) -> BulkTagSummary:
        """Add ``tags`` to every product, keeping their existing tags."""
        return await self._run_bulk("add", self._client.tags_add, product_ids, tags)

    async def bulk_remove_product_tags(self, product_ids: Sequence[str], tags: Sequence[str]) -> BulkTagSummary:
        """Remove ``tags`` from every product, keeping their other tags."""
        return await self._run_bulk("remove", self._client.tags_remove, product_ids, tags)

    async def _run_bulk(
        self,
        action: str,
        call: TagCall,
        product_ids: Sequence[str],
        tags: Sequence[str],
    ) -> BulkTagSummary:
        if not product_ids:
            raise ValidationError("productIds must be a non-empty array")
        if not tags:
            raise ValidationError("tags must be a non-empty array")
        clean_tags = normalize_tags(tags)
        if not clean_tags:
            raise ValidationError("All provided tags were empty after normalization")

        ids = [str(pid) for pid in product_ids]
        batches = chunk(ids, self._batch_size)
        logger.info(f"Tags {action}: {len(ids)} products, tags={', '.join(clean_tags)}")

        success_count = 0
        errors: List[str] = []
        for index, batch in enumerate(batches):
            logger.info(f"Batch {index + 1}/{len(batches)} size {len(batch)}")
            results = await asyncio.gather(
                *(call(pid, clean_tags) for pid in batch),
                return_exceptions=True,
            )
            for pid, result in zip(batch, results):
                if isinstance(result, BaseException):
                    msg = f"Failed to update product {pid}: {result}"
                    errors.append(msg)
                    logger.error(msg)
                elif result:
                    msg = format_user_errors(pid, result)
                    errors.append(msg)
                    logger.error(msg)
                else:
                    success_count += 1

            logger.info(
                f"Completed batch {index + 1}/{len(batches)}. "
                f"Success: {success_count}, Errors: {len(errors)}"
            )
            if index + 1 < len(batches):
                await self._sleep(self._action_delay)

        logger.info(f"Tags {action} complete. Total: {len(ids)}, Success: {success_count}, Errors: {len(errors)}")
        return BulkTagSummary(
            total_products=len(ids),
            success_count=success_count,
            error_count=len(errors),
            errors=errors[:MAX_SUMMARY_ERRORS],
            tags=clean_tags,
            shop=self._client.store_domain,
        )

    async def update_product_tags(
        self,
        to_add: Sequence[str],
        to_remove: Sequence[str],
        tags: Sequence[str],
    ) -> TagUpdateResult:
        """
        Push the fitment tag to newly attached products and take it off
        detached ones. Add and remove are attempted independently; any
        failure makes the result not ok. Nothing is retried or rolled back.
        """
        if (not to_add and not to_remove) or not tags:
            return TagUpdateResult(ok=True)

        errors: List[str] = []
        if to_add:
            errors.extend(await self._attempt("add", self.bulk_add_product_tags, to_add, tags))
        if to_remove:
            errors.extend(await self._attempt("remove", self.bulk_remove_product_tags, to_remove, tags))
        return TagUpdateResult(ok=not errors, errors=errors)

    async def _attempt(self, action: str, bulk_call, product_ids, tags) -> List[str]:
        try:
            summary = await bulk_call(list(product_ids), list(tags))
        except Exception as e:
            logger.error(f"Tag {action} failed for {len(product_ids)} products: {e}")
            return [f"Failed to update product tags: {e}"]
        if summary.error_count:
            return summary.errors or [f"Failed to {action} tags on {summary.error_count} products"]
        return []

    async def replace_product_tags(self, products_with_tags: Sequence[ProductTags]) -> None:
        """Overwrite full tag lists via the batched productUpdate primitive."""
        if not self._client.store_domain or not self._client.access_token:
            raise AuthenticationError("Shopify env vars missing")
        await product_tag_batches.bulk_update_product_tags(
            products_with_tags,
            self._client.store_domain,
            self._client.access_token,
            batch_size=self._batch_size,
            delay_seconds=self._replace_delay,
            sleep=self._sleep,
        )
