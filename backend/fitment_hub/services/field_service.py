"""
Field service — fitment field registry (create, edit, delete, reorder).

A store may have at most one Range field.
"""
import logging
from typing import List, Optional

from fitment_hub.core.exceptions import ValidationError
from fitment_hub.db.field_store import FieldStore
from fitment_hub.schemas.fields import FieldForm
from fitment_hub.schemas.fitment import FieldType, FitmentField
from fitment_hub.utils.slug import slugify

logger = logging.getLogger(__name__)


def _parse_int(value: str) -> Optional[int]:
    try:
        return int(value.strip())
    except ValueError:
        return None


def validate_field_form(
    form: FieldForm,
    existing: List[FitmentField],
    field_id: Optional[int] = None,
) -> Optional[str]:
    """Return the first problem with a field form, or None."""
    if not form.label.strip():
        return "Label is required"
    if form.type == FieldType.RANGE:
        if not form.range_from.strip() or not form.range_to.strip():
            return "Range requires From and To"
        start = _parse_int(form.range_from)
        end = _parse_int(form.range_to)
        if start is None or end is None:
            return "Range values must be integers"
        if start > end:
            return "From must be ≤ To"
        if any(f.type == FieldType.RANGE and f.id != field_id for f in existing):
            return "Only one Range field is allowed"
    return None


class FieldService:
    def __init__(self, store: FieldStore) -> None:
        self._store = store

    async def list_fields(self, store_id: int) -> List[FitmentField]:
        fields = await self._store.list_fields(store_id)
        return sorted(fields, key=lambda f: f.sort_order)

    async def save_field(
        self, store_id: int, form: FieldForm, field_id: Optional[int] = None
    ) -> FitmentField:
        """
        Create a field, or update ``field_id``.

        New fields are appended with ``required`` false; edits keep the
        stored ``required`` flag.
        """
        existing = await self.list_fields(store_id)
        error = validate_field_form(form, existing, field_id)
        if error:
            raise ValidationError(error)

        localized = {}
        if form.type == FieldType.RANGE:
            localized["range"] = {"from": int(form.range_from), "to": int(form.range_to)}
        if form.placeholder and form.placeholder.strip():
            localized["placeholder"] = form.placeholder.strip()

        current = next((f for f in existing if f.id == field_id), None) if field_id else None
        if field_id and current is None:
            raise ValidationError(f"Field {field_id} not found")

        payload = {
            "label": form.label.strip(),
            "slug": slugify(form.label),
            "field_type": "int" if form.type == FieldType.RANGE else "string",
            "required": current.required if current else False,
            "localized_json": localized or None,
        }

        if current:
            updated = await self._store.update_field(store_id, field_id, payload)
            return updated or current.model_copy(update={
                "label": payload["label"],
                "slug": payload["slug"],
                "type": form.type,
            })

        payload["sort_order"] = len(existing)
        return await self._store.insert_field(store_id, payload)

    async def delete_field(self, store_id: int, field_id: int) -> None:
        await self._store.delete_field(store_id, field_id)
        logger.info(f"Field deleted store_id={store_id} field_id={field_id}")

    async def reorder_fields(self, store_id: int, ordered_ids: List[int]) -> List[FitmentField]:
        """Rewrite sort_order to the position of each id in ``ordered_ids``."""
        existing = {f.id: f for f in await self.list_fields(store_id)}
        unknown = [fid for fid in ordered_ids if fid not in existing]
        if unknown:
            raise ValidationError(f"Unknown field ids: {unknown}")
        for position, field_id in enumerate(ordered_ids):
            await self._store.set_sort_order(store_id, field_id, position)
        logger.info(f"Fields rearranged store_id={store_id} order={ordered_ids}")
        return [
            existing[fid].model_copy(update={"sort_order": pos})
            for pos, fid in enumerate(ordered_ids)
        ]
