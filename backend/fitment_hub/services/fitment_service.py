"""
Fitment service — fitment set load, save and listing.

Save flow:
1. Snapshot (edit mode: persisted set; create mode: empty state)
2. Dirty check against the snapshot
3. Validation
4. Tag derivation (edit mode reuses the first persisted tag)
5. Bundle upsert RPC
6. Tag reconciliation for products attached or detached by this save

Persistence always finishes before any tag call. A failed upsert stops the
save; a failed tag call does not undo the upsert.
"""
import logging
from typing import Dict, List, Optional, Sequence

from fitment_hub.core.constants.fitment import (
    DEFAULT_PAGE_SIZE,
    MSG_NO_CHANGES,
    MSG_SAVED,
    MSG_SAVED_TAGS_FAILED,
    MSG_SAVED_WITH_TAGS,
)
from fitment_hub.core.exceptions import StoreNotFoundError, ValidationError
from fitment_hub.db.field_store import FieldStore
from fitment_hub.db.fitment_store import FitmentStore
from fitment_hub.db.shop_store import ShopStore
from fitment_hub.schemas.fitment import (
    FieldType,
    FieldValue,
    FieldValueRow,
    FitmentField,
    FitmentSetEditorState,
    FitmentSetPage,
    FitmentSetRow,
    SaveFitmentSetRequest,
    SaveFitmentSetResponse,
    UpsertValue,
    ValuesState,
)
from fitment_hub.services.tagging_service import TaggingService
from fitment_hub.utils.fitment_tags import (
    build_tag,
    clean_range_input,
    consolidate_products,
    diff_products,
    field_slug,
    first_variant_ids,
    format_field_value,
    hydrate_values,
    products_key,
    sort_fields,
    values_equal,
)

logger = logging.getLogger(__name__)


def _to_int(value: Optional[str]) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except ValueError:
        return None


def clean_values(fields: Sequence[FitmentField], values: ValuesState) -> ValuesState:
    """Strip Range inputs to digits and '-'; Select inputs pass through."""
    range_ids = {f.id for f in fields if f.type == FieldType.RANGE and f.id is not None}
    cleaned: ValuesState = {}
    for field_id, v in values.items():
        if field_id in range_ids:
            cleaned[field_id] = FieldValue(from_=clean_range_input(v.from_), to=clean_range_input(v.to))
        else:
            cleaned[field_id] = v
    return cleaned


def validate_values(
    sorted_fields: Sequence[FitmentField],
    values: ValuesState,
    universal: bool,
) -> Optional[str]:
    """Return the first problem with the entered values, or None."""
    if universal:
        return None
    for f in sorted_fields:
        if f.id is None:
            continue
        v = values.get(f.id) or FieldValue()
        if f.required:
            if f.type == FieldType.RANGE:
                if not v.from_ or not v.to:
                    return f'Enter range for "{f.label}"'
            elif not (v.select or "").strip():
                return f'Enter value for "{f.label}"'

        if f.type != FieldType.RANGE:
            continue
        start = _to_int(v.from_)
        end = _to_int(v.to)
        if (v.from_ and start is None) or (v.to and end is None):
            return f'"{f.label}" range must be integers'
        if start is not None and end is not None and start > end:
            return f'"{f.label}" From must be ≤ To'
        low = _to_int(f.range_from)
        high = _to_int(f.range_to)
        if low is not None and start is not None and start < low:
            return f'"{f.label}" From must be ≥ {low}'
        if high is not None and end is not None and end > high:
            return f'"{f.label}" To must be ≤ {high}'
    return None


def build_values_for_upsert(
    sorted_fields: Sequence[FitmentField],
    values: ValuesState,
    universal: bool,
) -> List[UpsertValue]:
    """
    ``p_values`` for the bundle upsert.

    Range ends become ``<slug>_from`` / ``<slug>_to`` int entries; the stored
    upper end is exclusive, hence ``to - 1``.
    """
    payload: List[UpsertValue] = []
    if universal:
        return payload
    for f in sorted_fields:
        if f.id is None:
            continue
        slug = field_slug(f)
        v = values.get(f.id) or FieldValue()
        if f.type == FieldType.RANGE:
            if v.from_:
                payload.append(UpsertValue(field_slug=f"{slug}_from", type="int", value=str(int(v.from_))))
            if v.to:
                payload.append(UpsertValue(field_slug=f"{slug}_to", type="int", value=str(int(v.to) - 1)))
        else:
            s = (v.select or "").strip()
            if s:
                payload.append(UpsertValue(field_slug=slug, type="string", value=s))
    return payload


class FitmentService:
    def __init__(
        self,
        fitment_store: FitmentStore,
        field_store: FieldStore,
        tagging: TaggingService,
        shop_store: Optional[ShopStore] = None,
    ) -> None:
        self._fitments = fitment_store
        self._fields = field_store
        self._tagging = tagging
        self._shops = shop_store

    async def _sorted_fields(self, store_id: int) -> List[FitmentField]:
        return sort_fields(await self._fields.list_fields(store_id))

    async def load_set(
        self,
        store_id: int,
        set_id: int,
        fields: Optional[Sequence[FitmentField]] = None,
    ) -> FitmentSetEditorState:
        """Hydrate the editor state of one persisted fitment set."""
        sorted_fields = sort_fields(fields) if fields is not None else await self._sorted_fields(store_id)
        row = await self._fitments.get_set_details(store_id, set_id)

        fitment_tags = row.get("fitment_tags") or []
        existing_tags = [fitment_tags[0]["tag"]] if fitment_tags else []
        products = consolidate_products(row.get("products") or [])

        return FitmentSetEditorState(
            fitment_set_id=set_id,
            universal_fit=bool(row.get("universal_fit")),
            existing_tags=existing_tags,
            values=hydrate_values(sorted_fields, row.get("field_values") or []),
            products=products,
            initial_product_ids=[p.id for p in products],
        )

    def tags_for_update(
        self,
        sorted_fields: Sequence[FitmentField],
        snapshot: FitmentSetEditorState,
        values: ValuesState,
        universal: bool,
    ) -> List[str]:
        """Edits of a tagged set keep its first tag; everything else is rebuilt."""
        if snapshot.fitment_set_id is not None and snapshot.existing_tags:
            return list(snapshot.existing_tags)
        return build_tag(sorted_fields, values, universal)

    async def save(
        self,
        store_id: int,
        request: SaveFitmentSetRequest,
        fitment_set_id: Optional[int] = None,
    ) -> SaveFitmentSetResponse:
        """
        Create (``fitment_set_id`` None) or update a fitment set and reconcile
        product tags.

        Raises:
            ValidationError: the entered values are invalid.
            PersistenceError: the bundle upsert failed; no tag call was made.
        """
        sorted_fields = await self._sorted_fields(store_id)
        if fitment_set_id is not None:
            snapshot = await self.load_set(store_id, fitment_set_id, sorted_fields)
        else:
            snapshot = FitmentSetEditorState()

        values = clean_values(sorted_fields, request.values)
        dirty = (
            request.universal_fit != snapshot.universal_fit
            or not values_equal(values, snapshot.values)
            or products_key(request.products) != products_key(snapshot.products)
        )
        if not dirty:
            return SaveFitmentSetResponse(success=True, message=MSG_NO_CHANGES, fitment_set_id=fitment_set_id)

        error = validate_values(sorted_fields, values, request.universal_fit)
        if error:
            raise ValidationError(error)

        tags = self.tags_for_update(sorted_fields, snapshot, values, request.universal_fit)
        data = await self._fitments.upsert_bundle(
            store_id,
            fitment_set_id,
            request.universal_fit,
            build_values_for_upsert(sorted_fields, values, request.universal_fit),
            tags,
            first_variant_ids(request.products),
        )
        saved_id = fitment_set_id if fitment_set_id is not None else _returned_set_id(data)

        changes = diff_products(snapshot.initial_product_ids, request.products)
        result = await self._tagging.update_product_tags(changes.to_add, changes.to_remove, tags)

        response = SaveFitmentSetResponse(
            success=result.ok,
            message=MSG_SAVED,
            persisted=True,
            fitment_set_id=saved_id,
            tags=tags,
            products_added=changes.to_add,
            products_removed=changes.to_remove,
            tag_errors=result.errors,
        )
        if not result.ok:
            logger.error(f"Tag reconcile failed store_id={store_id} set_id={saved_id} errors={result.errors}")
            response.message = MSG_SAVED_TAGS_FAILED
        elif request.products or not changes.is_empty:
            response.message = MSG_SAVED_WITH_TAGS
        logger.info(
            f"Fitment set saved store_id={store_id} set_id={saved_id} tags={tags} "
            f"added={len(changes.to_add)} removed={len(changes.to_remove)}"
        )
        return response

    async def list_page(
        self,
        store_id: int,
        after_id: Optional[int] = None,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> FitmentSetPage:
        """One keyset page of fitment sets; the cursor comes from the tail row."""
        rows = await self._fitments.get_sets_page(store_id, after_id, limit)
        if not rows:
            return FitmentSetPage()

        items = []
        for row in rows:
            universal = bool(row.get("universal_fit"))
            field_values = [FieldValueRow(**fv) for fv in row.get("field_values") or []]
            by_field: Dict[int, FieldValueRow] = {fv.field_id: fv for fv in field_values}
            field_ids = [f.get("id") for f in row.get("fields") or [] if f.get("id") is not None]
            display = {fid: format_field_value(by_field.get(fid), universal) for fid in field_ids or by_field}
            items.append(FitmentSetRow(
                fitment_set_id=row["fitment_set_id"],
                universal_fit=universal,
                field_values=field_values,
                product_count=row.get("product_count") or 0,
                display_values=display,
            ))

        tail = rows[-1]
        return FitmentSetPage(
            items=items,
            next_cursor=tail.get("next_cursor"),
            has_more=bool(tail.get("has_more")),
        )

    async def delete_sets(self, store_id: int, set_ids: List[int]) -> int:
        return await self._fitments.delete_sets(store_id, set_ids)

    async def delete_set(self, store_id: int, set_id: int) -> int:
        return await self._fitments.delete_sets(store_id, [set_id])

    async def duplicate_set(self, store_id: int, set_id: int):
        data = await self._fitments.duplicate_set(store_id, set_id)
        logger.info(f"Fitment set duplicated store_id={store_id} set_id={set_id}")
        return data

    async def clear_all(self, store_id: int) -> int:
        return await self._fitments.delete_all_sets(store_id)

    async def has_fitment_sets(self, shop_domain: str) -> bool:
        if self._shops is None:
            raise RuntimeError("FitmentService was built without a ShopStore")
        try:
            store_id = await self._shops.get_store_id(shop_domain)
        except StoreNotFoundError:
            return False
        return await self._fitments.count_sets(store_id) > 0


def _returned_set_id(data) -> Optional[int]:
    """Set id from the upsert RPC result (scalar, row or list of rows)."""
    if isinstance(data, list):
        data = data[0] if data else None
    if isinstance(data, dict):
        data = data.get("fitment_set_id") or data.get("id")
    return data if isinstance(data, int) else None
