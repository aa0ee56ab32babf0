"""
Celery tasks package.

Exports all tasks for convenient imports.
"""
from fitment_hub.celery_app.tasks.tagging import replace_product_tags

__all__ = [
    "replace_product_tags",
]
