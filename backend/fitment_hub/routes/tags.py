"""
Tag routes — managed bulk tag actions and queued tag replacement.

Provides:
- POST /tags/add      – tagsAdd on every product, returns the summary
- POST /tags/remove   – tagsRemove on every product, returns the summary
- POST /tags/replace  – queue full tag replacement (batched productUpdate)
"""
import logging

from fastapi import APIRouter, Depends

from fitment_hub.celery_app.tasks.tagging import replace_product_tags
from fitment_hub.container import get_tagging_service
from fitment_hub.core.auth import get_current_shop
from fitment_hub.schemas.tags import (
    BulkTagRequest,
    BulkTagSummary,
    QueuedTaskResponse,
    ReplaceTagsRequest,
)
from fitment_hub.services.tagging_service import TaggingService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tags", tags=["tags"])


@router.post("/add", response_model=BulkTagSummary)
async def add_tags(
    request: BulkTagRequest,
    current_shop: dict = Depends(get_current_shop),
    service: TaggingService = Depends(get_tagging_service),
):
    return await service.bulk_add_product_tags(request.product_ids, request.tags)


@router.post("/remove", response_model=BulkTagSummary)
async def remove_tags(
    request: BulkTagRequest,
    current_shop: dict = Depends(get_current_shop),
    service: TaggingService = Depends(get_tagging_service),
):
    return await service.bulk_remove_product_tags(request.product_ids, request.tags)


@router.post("/replace", response_model=QueuedTaskResponse, status_code=202)
async def replace_tags(
    request: ReplaceTagsRequest,
    current_shop: dict = Depends(get_current_shop),
):
    task = replace_product_tags.delay([p.model_dump() for p in request.products])
    logger.info(f"Tag replace queued shop={current_shop['shop']} products={len(request.products)} task_id={task.id}")
    return QueuedTaskResponse(
        status="queued",
        task_id=task.id,
        message=f"Tag replacement queued for {len(request.products)} products",
    )
