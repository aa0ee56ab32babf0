"""
Field store — fitment_fields CRUD.

Rows carry ``field_type`` ('int'/'range' for Range fields, 'string' for
Select) and ``localized_json`` ({range: {from, to}, placeholder}).
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from fastapi import HTTPException
from postgrest.exceptions import APIError

from fitment_hub.core.constants.fitment import (
    FIELDS_TABLE,
    FOREIGN_KEY_VIOLATION,
    MSG_FIELD_IN_USE,
    RANGE_FIELD_TYPES,
)
from fitment_hub.core.exceptions import ValidationError
from fitment_hub.db.base_store import BaseStore
from fitment_hub.schemas.fitment import FieldType, FitmentField

logger = logging.getLogger("field_store")

FIELD_COLUMNS = "id,label,slug,field_type,required,sort_order,localized_json"


def row_to_field(row: Dict[str, Any], index: int = 0) -> FitmentField:
    """Map a fitment_fields row to a FitmentField."""
    is_range = row.get("field_type") in RANGE_FIELD_TYPES
    lj = row.get("localized_json") or {}
    rng = lj.get("range") or {}
    sort_order = row.get("sort_order")
    placeholder = lj.get("placeholder")
    return FitmentField(
        id=row.get("id"),
        label=row.get("label") or "",
        slug=row.get("slug") or None,
        type=FieldType.RANGE if is_range else FieldType.SELECT,
        required=bool(row.get("required")),
        sort_order=sort_order if isinstance(sort_order, int) else index,
        range_from=str(rng["from"]) if is_range and rng.get("from") is not None else None,
        range_to=str(rng["to"]) if is_range and rng.get("to") is not None else None,
        placeholder=placeholder if isinstance(placeholder, str) else None,
    )


class FieldStore(BaseStore):
    """CRUD for the fitment_fields table."""

    async def list_fields(self, store_id: int) -> List[FitmentField]:
        rows = await self._select(
            FIELDS_TABLE, FIELD_COLUMNS, {"store_id": store_id}, order_by="sort_order"
        )
        return [row_to_field(row, idx) for idx, row in enumerate(rows)]

    async def insert_field(self, store_id: int, payload: Dict[str, Any]) -> FitmentField:
        rows = await self._insert(FIELDS_TABLE, [{**payload, "store_id": store_id}])
        logger.info("fitment field created store_id=%s label=%s", store_id, payload.get("label"))
        return row_to_field(rows[0]) if rows else row_to_field({**payload, "store_id": store_id})

    async def update_field(
        self, store_id: int, field_id: int, payload: Dict[str, Any]
    ) -> FitmentField | None:
        body = {**payload, "updated_at": datetime.now(timezone.utc).isoformat()}
        rows = await self._update(FIELDS_TABLE, {"id": field_id, "store_id": store_id}, body)
        logger.info("fitment field updated store_id=%s field_id=%s", store_id, field_id)
        return row_to_field(rows[0]) if rows else None

    async def delete_field(self, store_id: int, field_id: int) -> None:
        """
        Delete one field.

        Raises:
            ValidationError: fitment values still reference the field.
            HTTPException: any other Supabase failure (500).
        """
        try:
            (
                self._client.table(FIELDS_TABLE)
                .delete()
                .eq("id", field_id)
                .eq("store_id", store_id)
                .execute()
            )
        except APIError as e:
            logger.info("supabase error table=%s code=%s detail=%s", FIELDS_TABLE, e.code, str(e))
            if e.code == FOREIGN_KEY_VIOLATION:
                raise ValidationError(MSG_FIELD_IN_USE)
            raise HTTPException(
                status_code=500,
                detail=f"Supabase delete from {FIELDS_TABLE} failed: {e.message or e}",
            )
        logger.info("fitment field deleted store_id=%s field_id=%s", store_id, field_id)

    async def set_sort_order(self, store_id: int, field_id: int, sort_order: int) -> None:
        await self._update(
            FIELDS_TABLE,
            {"id": field_id, "store_id": store_id},
            {"sort_order": sort_order, "updated_at": datetime.now(timezone.utc).isoformat()},
        )
