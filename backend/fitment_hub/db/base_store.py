"""
Base Supabase store with shared CRUD helpers.

All domain-specific stores inherit from this class to get
standardised insert / select / update / delete / rpc primitives.
"""

import logging
from typing import Any, Dict, List

from fastapi import HTTPException
from postgrest.exceptions import APIError

from fitment_hub.core.config import settings
from fitment_hub.clients.supabase_client import SupabaseClient

logger = logging.getLogger("base_store")


class BaseStore:
    """Base class for all Supabase stores providing shared CRUD operations."""

    def __init__(self, supabase_client: SupabaseClient | None = None) -> None:
        self._supabase_client = supabase_client or SupabaseClient(settings)

    @property
    def _client(self):
        """Get the Supabase client instance."""
        return self._supabase_client.client

    async def _insert(self, table: str, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Insert rows into a table and return the inserted rows."""
        if not rows:
            return []
        try:
            response = self._client.table(table).insert(rows).execute()
            return response.data or []
        except APIError as e:
            logger.info("supabase error table=%s detail=%s", table, str(e))
            raise HTTPException(
                status_code=500,
                detail=f"Supabase insert into {table} failed: {e}",
            )

    async def _select(
        self,
        table: str,
        columns: str = "*",
        filters: Dict[str, Any] | None = None,
        order_by: str | None = None,
    ) -> List[Dict[str, Any]]:
        """Select rows from a table with optional equality filters and ordering."""
        try:
            query = self._client.table(table).select(columns)
            if filters:
                for key, value in filters.items():
                    query = query.eq(key, value)
            if order_by:
                query = query.order(order_by)
            response = query.execute()
            return response.data or []
        except APIError as e:
            logger.info("supabase error table=%s detail=%s", table, str(e))
            raise HTTPException(
                status_code=500,
                detail=f"Supabase select from {table} failed: {e}",
            )

    async def _update(
        self, table: str, filters: Dict[str, Any], payload: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        """Update rows in a table matching the filters."""
        try:
            query = self._client.table(table).update(payload)
            for key, value in filters.items():
                query = query.eq(key, value)
            response = query.execute()
            return response.data or []
        except APIError as e:
            logger.info("supabase error table=%s detail=%s", table, str(e))
            raise HTTPException(
                status_code=500,
                detail=f"Supabase update {table} failed: {e}",
            )

    async def _delete(
        self,
        table: str,
        filters: Dict[str, Any],
        in_filter: tuple[str, List[Any]] | None = None,
    ) -> List[Dict[str, Any]]:
        """Delete rows matching equality filters (and an optional IN filter)."""
        try:
            query = self._client.table(table).delete()
            for key, value in filters.items():
                query = query.eq(key, value)
            if in_filter:
                column, values = in_filter
                query = query.in_(column, values)
            response = query.execute()
            return response.data or []
        except APIError as e:
            logger.info("supabase error table=%s detail=%s", table, str(e))
            raise HTTPException(
                status_code=500,
                detail=f"Supabase delete from {table} failed: {e}",
            )

    def _rpc_raw(self, fn: str, params: Dict[str, Any]) -> Any:
        """Call a stored procedure, letting APIError propagate."""
        logger.info("supabase rpc fn=%s", fn)
        return self._client.rpc(fn, params).execute().data

    async def _rpc(self, fn: str, params: Dict[str, Any]) -> Any:
        """Call a stored procedure and return its data."""
        try:
            return self._rpc_raw(fn, params)
        except APIError as e:
            logger.info("supabase error rpc=%s detail=%s", fn, str(e))
            raise HTTPException(
                status_code=500,
                detail=f"Supabase rpc {fn} failed: {e}",
            )
