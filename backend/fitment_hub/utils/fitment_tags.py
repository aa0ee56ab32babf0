"""
Fitment tag helpers — tag building, product-selection diffing, value state
hydration and normalization.

Pure functions; no I/O. Used by FitmentService on load and save.
"""
import json
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence

from fitment_hub.core.constants.tagging import UNIVERSAL_TAG
from fitment_hub.schemas.fitment import (
    FieldType,
    FieldValue,
    FieldValueRow,
    FitmentField,
    SelectedProduct,
    ValuesState,
    VariantRef,
)
from fitment_hub.utils.slug import slugify

# Postgres int4range text form, e.g. "[2015,2021)"
_INT4RANGE = re.compile(r"\[(-?\d+),(-?\d+)\)")
_NOT_RANGE_CHAR = re.compile(r"[^0-9-]")


@dataclass
class ProductChanges:
    to_add: List[str] = field(default_factory=list)
    to_remove: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.to_add and not self.to_remove


def sort_fields(fields: Iterable[FitmentField]) -> List[FitmentField]:
    return sorted(fields, key=lambda f: f.sort_order)


def field_slug(f: FitmentField) -> str:
    return f.slug or slugify(f.label)


def clean_range_input(value: str | None) -> str:
    """Keep only digits and '-' (negative bounds are allowed)."""
    return _NOT_RANGE_CHAR.sub("", value or "")


def build_tag(
    sorted_fields: Sequence[FitmentField],
    values: ValuesState,
    universal: bool,
) -> List[str]:
    """
    Derive the canonical fitment tag for a set.

    Universal sets always get ``["universal"]``. Otherwise each persisted
    field contributes one fragment in ``sort_order``: ``"<from>-<to>"`` for a
    Range with both ends filled, ``slugify(value)`` for a non-blank Select.
    The joined fragments are slugified once more; an empty result yields no
    tag at all rather than an empty string.
    """
    if universal:
        return [UNIVERSAL_TAG]
    parts: List[str] = []
    for f in sorted_fields:
        if f.id is None:
            continue
        v = values.get(f.id) or FieldValue()
        if f.type == FieldType.RANGE:
            start = (v.from_ or "").strip()
            end = (v.to or "").strip()
            if start and end:
                parts.append(f"{start}-{end}")
        else:
            s = (v.select or "").strip()
            if s:
                parts.append(slugify(s))
    tag = slugify("-".join(parts))
    return [tag] if tag else []


def diff_products(
    initial_ids: Iterable[str],
    current_products: Sequence[SelectedProduct],
) -> ProductChanges:
    """
    Product-level set difference between the load-time and save-time
    selections. IDs compare as strings; variants are not diffed.
    """
    initial = list(dict.fromkeys(initial_ids))
    current = list(dict.fromkeys(p.id for p in current_products))
    initial_set = set(initial)
    current_set = set(current)
    return ProductChanges(
        to_add=[pid for pid in current if pid not in initial_set],
        to_remove=[pid for pid in initial if pid not in current_set],
    )


def first_variant_ids(products: Sequence[SelectedProduct]) -> List[int]:
    """Variant ids sent to the bundle upsert: first variant of each product."""
    return [p.variants[0].shopify_variant_id for p in products if p.variants]


def values_equal(a: ValuesState, b: ValuesState) -> bool:
    for k in set(a) | set(b):
        av = a.get(k) or FieldValue()
        bv = b.get(k) or FieldValue()
        if (av.select or "") != (bv.select or ""):
            return False
        if (av.from_ or "") != (bv.from_ or ""):
            return False
        if (av.to or "") != (bv.to or ""):
            return False
    return True


def products_key(products: Sequence[SelectedProduct]) -> str:
    """Stable key of a selection (product ids with sorted variant ids)."""
    entries = sorted(
        (
            {"id": p.id, "variants": sorted(v.shopify_variant_id for v in p.variants)}
            for p in products
        ),
        key=lambda e: e["id"],
    )
    return json.dumps(entries, separators=(",", ":"))


def parse_int4range(value: Any) -> Optional[tuple[str, str]]:
    if not isinstance(value, str):
        return None
    m = _INT4RANGE.search(value)
    return (m.group(1), m.group(2)) if m else None


def hydrate_values(
    sorted_fields: Sequence[FitmentField],
    rows: Iterable[Dict[str, Any]],
) -> ValuesState:
    """
    Map persisted value rows onto fields. Rows match by ``field_id`` first,
    then by ``field_slug`` / ``slug``. Range values come from ``value_int``
    and are overridden by explicit ``value_from`` / ``value_to``.
    """
    by_id = {f.id: f for f in sorted_fields if f.id is not None}
    by_slug = {field_slug(f): f for f in sorted_fields}

    values: ValuesState = {}
    for row in rows:
        f = by_id.get(row.get("field_id")) if row.get("field_id") is not None else None
        if f is None and row.get("field_slug"):
            f = by_slug.get(row["field_slug"])
        if f is None and row.get("slug"):
            f = by_slug.get(row["slug"])
        if f is None or f.id is None:
            continue

        if f.type == FieldType.RANGE:
            start, end = parse_int4range(row.get("value_int")) or ("", "")
            if row.get("value_from") is not None:
                start = str(row["value_from"])
            if row.get("value_to") is not None:
                end = str(row["value_to"])
            values[f.id] = FieldValue(from_=start, to=end)
        else:
            values[f.id] = FieldValue(select=row.get("value_string") or "")
    return values


def consolidate_products(rows: Iterable[Dict[str, Any]]) -> List[SelectedProduct]:
    """Group variant rows into products, de-duplicating variants. Rows without a variant id are skipped."""
    by_product: Dict[str, SelectedProduct] = {}
    for row in rows:
        if row.get("shopify_variant_id") is None:
            continue
        pid = str(row.get("shopify_product_id"))
        product = by_product.get(pid)
        if product is None:
            product = SelectedProduct(
                id=pid,
                title=row.get("title") or "Untitled Product",
                image=row.get("image_url") or "",
                vendor=row.get("vendor") or None,
                product_type=row.get("product_type") or None,
                handle=row.get("handle") or None,
                variants=[],
            )
            by_product[pid] = product
        variant_id = int(row.get("shopify_variant_id"))
        if any(v.shopify_variant_id == variant_id for v in product.variants):
            continue
        product.variants.append(VariantRef(
            shopify_variant_id=variant_id,
            sku=row.get("sku") or None,
            price=str(row["price"]) if row.get("price") else None,
            status=row.get("status") or "draft",
            variant_title=row.get("variant_title") or None,
        ))
    return list(by_product.values())


def format_field_value(row: Optional[FieldValueRow], universal: bool = False) -> str:
    """Display form of one stored value in the fitment table."""
    if universal or row is None:
        return "-"
    if row.value_string:
        return row.value_string
    if row.value_int:
        parsed = parse_int4range(row.value_int)
        return f"{parsed[0]}-{parsed[1]}" if parsed else row.value_int
    if row.value_bool is not None:
        return "Yes" if row.value_bool else "No"
    return "-"
