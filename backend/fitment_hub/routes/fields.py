"""
Field routes — fitment field registry.

Provides:
- GET    /fields            – list fields in sort order
- POST   /fields            – create a field
- PUT    /fields/{id}       – update a field
- DELETE /fields/{id}       – delete a field
- POST   /fields/reorder    – rewrite sort order
"""
import logging
from typing import List

from fastapi import APIRouter, Depends

from fitment_hub.container import get_field_service
from fitment_hub.core.auth import get_current_store_id
from fitment_hub.schemas.fields import FieldForm, ReorderFieldsRequest
from fitment_hub.schemas.fitment import FitmentField
from fitment_hub.services.field_service import FieldService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/fields", tags=["fields"])


@router.get("", response_model=List[FitmentField])
async def list_fields(
    store_id: int = Depends(get_current_store_id),
    service: FieldService = Depends(get_field_service),
):
    return await service.list_fields(store_id)


@router.post("", response_model=FitmentField)
async def create_field(
    form: FieldForm,
    store_id: int = Depends(get_current_store_id),
    service: FieldService = Depends(get_field_service),
):
    return await service.save_field(store_id, form)


# Registered before /{field_id} so "reorder" is not read as an id
@router.post("/reorder", response_model=List[FitmentField])
async def reorder_fields(
    request: ReorderFieldsRequest,
    store_id: int = Depends(get_current_store_id),
    service: FieldService = Depends(get_field_service),
):
    return await service.reorder_fields(store_id, request.field_ids)


@router.put("/{field_id}", response_model=FitmentField)
async def update_field(
    field_id: int,
    form: FieldForm,
    store_id: int = Depends(get_current_store_id),
    service: FieldService = Depends(get_field_service),
):
    return await service.save_field(store_id, form, field_id=field_id)


@router.delete("/{field_id}")
async def delete_field(
    field_id: int,
    store_id: int = Depends(get_current_store_id),
    service: FieldService = Depends(get_field_service),
):
    await service.delete_field(store_id, field_id)
    return {"deleted": field_id, "message": "Field deleted"}
