"""
Shop store — resolves a Shopify shop domain to its store row.
"""

import logging

from fitment_hub.core.constants.fitment import STORES_TABLE
from fitment_hub.core.exceptions import StoreNotFoundError
from fitment_hub.db.base_store import BaseStore

logger = logging.getLogger("shop_store")


class ShopStore(BaseStore):
    """Lookups on the stores table."""

    async def get_store_id(self, shop_domain: str) -> int:
        rows = await self._select(STORES_TABLE, "id", {"shop_domain": shop_domain})
        if not rows:
            logger.info("store not found shop=%s", shop_domain)
            raise StoreNotFoundError(f"Store not found for {shop_domain}")
        return int(rows[0]["id"])
