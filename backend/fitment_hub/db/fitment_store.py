"""
Fitment store — fitment set RPCs and deletes.

The bundle upsert, set detail, paging and duplicate operations are stored
procedures owned by the database; this store only shapes their parameters.
Deleting a fitment set cascades to its values and product links in the
database.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException
from postgrest.exceptions import APIError

from fitment_hub.core.constants.fitment import (
    AMBIGUOUS_COLUMN_MARKER,
    CLEAR_ALL_BATCH_SIZE,
    MSG_LOAD_AMBIGUOUS,
    MSG_SAVE_AMBIGUOUS,
    RPC_DUPLICATE_SET,
    RPC_SET_DETAILS,
    RPC_SETS_PAGE,
    RPC_UPSERT_BUNDLE,
    SETS_TABLE,
)
from fitment_hub.core.exceptions import FitmentSetNotFoundError, PersistenceError
from fitment_hub.db.base_store import BaseStore
from fitment_hub.schemas.fitment import UpsertValue

logger = logging.getLogger("fitment_store")


def _error_message(exc: APIError) -> str:
    return getattr(exc, "message", None) or str(exc)


class FitmentStore(BaseStore):
    """Fitment set persistence via Supabase RPCs."""

    async def upsert_bundle(
        self,
        store_id: int,
        fitment_set_id: Optional[int],
        universal_fit: bool,
        values: List[UpsertValue],
        tags: List[str],
        variant_ids: List[int],
    ) -> Any:
        """
        Atomically create/update one fitment set with its values and variants.

        Raises:
            PersistenceError: the RPC failed; message is merchant-facing.
        """
        params = {
            "p_store_id": store_id,
            "p_fitment_set_id": fitment_set_id,
            "p_universal_fit": universal_fit,
            "p_values": [v.model_dump() for v in values],
            "p_tags": list(tags),
            "p_variant_ids": list(variant_ids),
        }
        try:
            data = self._rpc_raw(RPC_UPSERT_BUNDLE, params)
        except APIError as e:
            message = _error_message(e)
            logger.info("fitment upsert failed store_id=%s set_id=%s detail=%s", store_id, fitment_set_id, message)
            if AMBIGUOUS_COLUMN_MARKER in message:
                raise PersistenceError(MSG_SAVE_AMBIGUOUS)
            raise PersistenceError(f"Save failed: {message}")
        logger.info(
            "fitment upsert ok store_id=%s set_id=%s values=%s variants=%s",
            store_id, fitment_set_id, len(values), len(variant_ids),
        )
        return data

    async def get_set_details(self, store_id: int, set_id: int) -> Dict[str, Any]:
        """First row of the set detail RPC (values, tags, products)."""
        try:
            data = self._rpc_raw(RPC_SET_DETAILS, {"_store_id": store_id, "_set_id": set_id})
        except APIError as e:
            message = _error_message(e)
            logger.info("fitment load failed store_id=%s set_id=%s detail=%s", store_id, set_id, message)
            if AMBIGUOUS_COLUMN_MARKER in message:
                raise PersistenceError(MSG_LOAD_AMBIGUOUS)
            raise PersistenceError(f"Load failed: {message}")
        row = data[0] if isinstance(data, list) and data else None
        if not row:
            raise FitmentSetNotFoundError("Set not found")
        return row

    async def get_sets_page(
        self, store_id: int, after_id: Optional[int], limit: int
    ) -> List[Dict[str, Any]]:
        data = await self._rpc(
            RPC_SETS_PAGE, {"_store_id": store_id, "_after_id": after_id, "_limit": limit}
        )
        return data or []

    async def duplicate_set(self, store_id: int, set_id: int) -> Any:
        return await self._rpc(RPC_DUPLICATE_SET, {"_store_id": store_id, "_set_id": set_id})

    async def delete_sets(self, store_id: int, set_ids: List[int]) -> int:
        if not set_ids:
            return 0
        await self._delete(SETS_TABLE, {"store_id": store_id}, in_filter=("id", list(set_ids)))
        logger.info("fitment sets deleted store_id=%s count=%s", store_id, len(set_ids))
        return len(set_ids)

    async def delete_all_sets(self, store_id: int, batch_size: int = CLEAR_ALL_BATCH_SIZE) -> int:
        """Delete every fitment set of a store, ``batch_size`` ids per pass."""
        total = 0
        while True:
            rows = await self._select_id_batch(store_id, batch_size)
            if not rows:
                break
            ids = [row["id"] for row in rows]
            await self._delete(SETS_TABLE, {"store_id": store_id}, in_filter=("id", ids))
            total += len(ids)
            if len(ids) < batch_size:
                break
        logger.info("fitment sets cleared store_id=%s total=%s", store_id, total)
        return total

    async def _select_id_batch(self, store_id: int, batch_size: int) -> List[Dict[str, Any]]:
        try:
            response = (
                self._client.table(SETS_TABLE)
                .select("id")
                .eq("store_id", store_id)
                .order("id")
                .limit(batch_size)
                .execute()
            )
            return response.data or []
        except APIError as e:
            logger.info("supabase error table=%s detail=%s", SETS_TABLE, str(e))
            raise PersistenceError(f"Clear failed: {_error_message(e)}")

    async def count_sets(self, store_id: int) -> int:
        try:
            response = (
                self._client.table(SETS_TABLE)
                .select("id", count="exact")
                .eq("store_id", store_id)
                .limit(1)
                .execute()
            )
        except APIError as e:
            logger.info("supabase error table=%s detail=%s", SETS_TABLE, str(e))
            raise HTTPException(
                status_code=500,
                detail=f"Supabase count on {SETS_TABLE} failed: {e}",
            )
        return response.count or 0
