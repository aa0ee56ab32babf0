"""
Tag schemas — bulk add/remove requests, replacement entries, and summaries.
"""
from typing import List, Optional

from pydantic import BaseModel, Field


class BulkTagRequest(BaseModel):
    product_ids: List[str]
    tags: List[str]


class ProductTags(BaseModel):
    """Full replacement tag list for one product."""
    product_id: str
    tags: List[str]


class ReplaceTagsRequest(BaseModel):
    products: List[ProductTags] = Field(..., min_length=1)


class BulkTagSummary(BaseModel):
    total_products: int
    success_count: int = 0
    error_count: int = 0
    errors: List[str] = []
    tags: List[str] = []
    shop: Optional[str] = None


class TagUpdateResult(BaseModel):
    ok: bool
    errors: List[str] = []


class QueuedTaskResponse(BaseModel):
    status: str
    task_id: str
    message: str
