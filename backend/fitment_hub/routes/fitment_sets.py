"""
Fitment set routes — editor load/save, listing, delete and duplicate.

Provides:
- GET    /fitment-sets                  – keyset page (after_id, limit)
- GET    /fitment-sets/exists           – does the shop have any sets
- GET    /fitment-sets/{id}             – editor state of one set
- POST   /fitment-sets                  – create a set and tag its products
- PUT    /fitment-sets/{id}             – update a set and reconcile tags
- DELETE /fitment-sets/{id}             – delete one set
- POST   /fitment-sets/delete           – delete selected sets
- POST   /fitment-sets/{id}/duplicate   – duplicate a set
- DELETE /fitment-sets                  – delete every set of the store
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query

from fitment_hub.container import get_fitment_service
from fitment_hub.core.auth import get_current_shop, get_current_store_id
from fitment_hub.core.config import settings
from fitment_hub.schemas.fitment import (
    DeleteSetsRequest,
    DeleteSetsResponse,
    FitmentSetEditorState,
    FitmentSetExistsResponse,
    FitmentSetPage,
    SaveFitmentSetRequest,
    SaveFitmentSetResponse,
)
from fitment_hub.services.fitment_service import FitmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fitment-sets", tags=["fitment-sets"])


@router.get("", response_model=FitmentSetPage)
async def list_fitment_sets(
    after_id: Optional[int] = Query(None),
    limit: int = Query(settings.fitment_page_size, ge=1, le=500),
    store_id: int = Depends(get_current_store_id),
    service: FitmentService = Depends(get_fitment_service),
):
    return await service.list_page(store_id, after_id, limit)


@router.get("/exists", response_model=FitmentSetExistsResponse)
async def fitment_sets_exist(
    current_shop: dict = Depends(get_current_shop),
    service: FitmentService = Depends(get_fitment_service),
):
    shop = current_shop["shop"]
    return FitmentSetExistsResponse(shop=shop, has_fitment_sets=await service.has_fitment_sets(shop))


@router.post("/delete", response_model=DeleteSetsResponse)
async def delete_selected_sets(
    request: DeleteSetsRequest,
    store_id: int = Depends(get_current_store_id),
    service: FitmentService = Depends(get_fitment_service),
):
    deleted = await service.delete_sets(store_id, request.set_ids)
    return DeleteSetsResponse(deleted=deleted, message=f"Deleted {deleted} fitment sets")


@router.get("/{set_id}", response_model=FitmentSetEditorState)
async def get_fitment_set(
    set_id: int,
    store_id: int = Depends(get_current_store_id),
    service: FitmentService = Depends(get_fitment_service),
):
    return await service.load_set(store_id, set_id)


@router.post("", response_model=SaveFitmentSetResponse)
async def create_fitment_set(
    request: SaveFitmentSetRequest,
    store_id: int = Depends(get_current_store_id),
    service: FitmentService = Depends(get_fitment_service),
):
    return await service.save(store_id, request)


@router.put("/{set_id}", response_model=SaveFitmentSetResponse)
async def update_fitment_set(
    set_id: int,
    request: SaveFitmentSetRequest,
    store_id: int = Depends(get_current_store_id),
    service: FitmentService = Depends(get_fitment_service),
):
    return await service.save(store_id, request, fitment_set_id=set_id)


@router.delete("/{set_id}", response_model=DeleteSetsResponse)
async def delete_fitment_set(
    set_id: int,
    store_id: int = Depends(get_current_store_id),
    service: FitmentService = Depends(get_fitment_service),
):
    deleted = await service.delete_set(store_id, set_id)
    return DeleteSetsResponse(deleted=deleted, message="Fitment set deleted")


@router.post("/{set_id}/duplicate")
async def duplicate_fitment_set(
    set_id: int,
    store_id: int = Depends(get_current_store_id),
    service: FitmentService = Depends(get_fitment_service),
):
    data = await service.duplicate_set(store_id, set_id)
    return {"source_id": set_id, "result": data, "message": "Fitment set duplicated"}


@router.delete("", response_model=DeleteSetsResponse)
async def clear_fitment_sets(
    store_id: int = Depends(get_current_store_id),
    service: FitmentService = Depends(get_fitment_service),
):
    deleted = await service.clear_all(store_id)
    logger.info(f"Fitment sets cleared store_id={store_id} deleted={deleted}")
    return DeleteSetsResponse(deleted=deleted, message=f"Deleted {deleted} fitment sets")
