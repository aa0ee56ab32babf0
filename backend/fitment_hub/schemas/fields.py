"""
Field registry schemas — create/update form and reorder payloads.
"""
from typing import List, Optional

from pydantic import BaseModel, Field

from fitment_hub.schemas.fitment import FieldType


class FieldForm(BaseModel):
    label: str = ""
    type: FieldType = FieldType.SELECT
    range_from: str = ""
    range_to: str = ""
    placeholder: Optional[str] = None


class ReorderFieldsRequest(BaseModel):
    field_ids: List[int] = Field(..., min_length=1)
