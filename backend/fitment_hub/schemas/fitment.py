"""
Fitment schemas — fields, value state, product selection, and set pages.
"""
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class FieldType(str, Enum):
    RANGE = "Range"
    SELECT = "Select"


class FitmentField(BaseModel):
    """One store-defined fitment field. ``id`` is None until persisted."""
    id: Optional[int] = None
    label: str
    slug: Optional[str] = None
    type: FieldType = FieldType.SELECT
    required: bool = False
    sort_order: int = 0
    range_from: Optional[str] = None
    range_to: Optional[str] = None
    placeholder: Optional[str] = None


class FieldValue(BaseModel):
    """Per-field input. Select fields use ``select``; Range fields use from/to."""
    model_config = ConfigDict(populate_by_name=True)

    select: Optional[str] = None
    from_: Optional[str] = Field(default=None, alias="from")
    to: Optional[str] = None


ValuesState = Dict[int, FieldValue]


class VariantRef(BaseModel):
    shopify_variant_id: int
    sku: Optional[str] = None
    price: Optional[str] = None
    status: Optional[str] = None
    variant_title: Optional[str] = None


class SelectedProduct(BaseModel):
    id: str
    title: Optional[str] = None
    image: Optional[str] = None
    vendor: Optional[str] = None
    product_type: Optional[str] = None
    handle: Optional[str] = None
    variants: List[VariantRef] = []


class UpsertValue(BaseModel):
    """One entry of the ``p_values`` array sent to the bundle upsert."""
    field_slug: str
    type: str
    value: str


class FitmentSetEditorState(BaseModel):
    """Hydrated editor snapshot of a persisted fitment set."""
    fitment_set_id: Optional[int] = None
    universal_fit: bool = False
    existing_tags: List[str] = []
    values: ValuesState = {}
    products: List[SelectedProduct] = []
    initial_product_ids: List[str] = []


class SaveFitmentSetRequest(BaseModel):
    universal_fit: bool = False
    values: ValuesState = {}
    products: List[SelectedProduct] = []


class SaveFitmentSetResponse(BaseModel):
    success: bool
    message: str
    persisted: bool = False
    fitment_set_id: Optional[int] = None
    tags: List[str] = []
    products_added: List[str] = []
    products_removed: List[str] = []
    tag_errors: List[str] = []


class FieldValueRow(BaseModel):
    """Stored value row as returned by the listing RPCs."""
    field_id: int
    value_string: Optional[str] = None
    value_int: Optional[str] = None
    value_bool: Optional[bool] = None


class FitmentSetRow(BaseModel):
    fitment_set_id: int
    universal_fit: bool = False
    field_values: List[FieldValueRow] = []
    product_count: int = 0
    display_values: Dict[int, str] = {}


class FitmentSetPage(BaseModel):
    items: List[FitmentSetRow] = []
    next_cursor: Optional[int] = None
    has_more: bool = False


class DeleteSetsRequest(BaseModel):
    set_ids: List[int] = Field(..., min_length=1)


class DeleteSetsResponse(BaseModel):
    deleted: int
    message: str


class FitmentSetExistsResponse(BaseModel):
    shop: str
    has_fitment_sets: bool
