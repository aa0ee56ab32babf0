"""
Fitment constants — table names, RPC names, and merchant-facing messages.
"""

# Tables
STORES_TABLE: str = "stores"
FIELDS_TABLE: str = "fitment_fields"
SETS_TABLE: str = "fitment_sets"

# Stored procedures
RPC_UPSERT_BUNDLE: str = "upsert_fitment_bundle_by_variant_ids"
RPC_SETS_PAGE: str = "get_fitment_sets_page"
RPC_SET_DETAILS: str = "get_fitment_set_details_with_products"
RPC_DUPLICATE_SET: str = "duplicate_fitment_set"

# field_type values stored for Range fields; anything else is a Select
RANGE_FIELD_TYPES: tuple[str, ...] = ("int", "range")

DEFAULT_PAGE_SIZE: int = 50
CLEAR_ALL_BATCH_SIZE: int = 1000

# Postgres error fragment raised by a badly-qualified RPC
AMBIGUOUS_COLUMN_MARKER: str = "fitment_set_id is ambiguous"

# Postgres SQLSTATE for a foreign key violation
FOREIGN_KEY_VIOLATION: str = "23503"

MSG_NO_CHANGES: str = "No changes"
MSG_SAVED: str = "Saved fitment data"
MSG_SAVED_WITH_TAGS: str = "Saved fitment data and updated product tags"
MSG_SAVED_TAGS_FAILED: str = "Fitment data saved, but failed to update product tags"
MSG_SAVE_AMBIGUOUS: str = (
    "Save failed due to ambiguous column in backend function. "
    "Ask backend to qualify fitment_set_id."
)
MSG_LOAD_AMBIGUOUS: str = (
    "Load failed: ambiguous column in backend. "
    "Ask backend to fully-qualify fitment_set_id."
)
MSG_FIELD_IN_USE: str = (
    "Delete failed. Please remove all associated Fitment Values before deleting this field."
)
