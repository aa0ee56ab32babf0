"""
Constants package — re-exports from domain-specific modules.

Usage:
    from fitment_hub.core.constants.tagging import UNIVERSAL_TAG
    # or import everything:
    from fitment_hub.core.constants import fitment, tagging
"""

from fitment_hub.core.constants import fitment, tagging
from fitment_hub.core.constants.tagging import (
    UNIVERSAL_TAG,
    TAG_BATCH_SIZE,
    TAG_BATCH_DELAY_SECONDS,
    TAG_ACTION_DELAY_SECONDS,
    TAG_GRAPHQL_API_VERSION,
    MAX_SUMMARY_ERRORS,
)
from fitment_hub.core.constants.fitment import (
    RANGE_FIELD_TYPES,
    DEFAULT_PAGE_SIZE,
    CLEAR_ALL_BATCH_SIZE,
    AMBIGUOUS_COLUMN_MARKER,
)

__all__ = [
    "fitment",
    "tagging",
    "UNIVERSAL_TAG",
    "TAG_BATCH_SIZE",
    "TAG_BATCH_DELAY_SECONDS",
    "TAG_ACTION_DELAY_SECONDS",
    "TAG_GRAPHQL_API_VERSION",
    "MAX_SUMMARY_ERRORS",
    "RANGE_FIELD_TYPES",
    "DEFAULT_PAGE_SIZE",
    "CLEAR_ALL_BATCH_SIZE",
    "AMBIGUOUS_COLUMN_MARKER",
]
