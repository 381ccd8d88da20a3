from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional

from loguru import logger
from pydantic import ValidationError

from .models import Item
from .stores import ItemId


# ---------------------------
# Record flattening
# ---------------------------

def _unwrap(record: Mapping[str, Any]) -> Mapping[str, Any]:
    # Some exports wrap each product as {"product": {...}}.
    inner = record.get("product")
    if isinstance(inner, Mapping):
        return inner
    return record


def item_from_record(record: Mapping[str, Any]) -> Item:
    """
    Build an :class:`Item` from one catalog record.

    Expected shape::

        {"product_id": 7, "name": "...", "image_url": "...",
         "filterable_properties": {"category": "...", "colors": [...],
                                   "user_rating": 4.2, "price": 349.0, ...}}

    Top-level attributes are accepted too; nested ones win on conflict.
    Raises ``pydantic.ValidationError`` when the record has no product id.
    """
    base = _unwrap(record)
    flat: Dict[str, Any] = {k: v for k, v in base.items() if k != "filterable_properties"}
    props = base.get("filterable_properties")
    if isinstance(props, Mapping):
        flat.update(props)
    if "product_id" not in flat and "id" in flat:
        flat["product_id"] = flat["id"]
    return Item.model_validate(flat)


def parse_catalog(payload: Any) -> List[Item]:
    """
    Turn a deserialised catalog document into items.

    Accepts ``{"products": [...]}`` or a bare list. Records that fail
    validation are logged and skipped so one bad row never sinks the catalog.
    """
    if isinstance(payload, Mapping):
        records = payload.get("products")
        if records is None:
            logger.warning("Catalog document has no 'products' array; keys={}", list(payload.keys()))
            return []
    else:
        records = payload

    if not isinstance(records, list):
        raise ValueError(f"Catalog products must be a list, got {type(records).__name__}")

    items: List[Item] = []
    for idx, record in enumerate(records):
        if not isinstance(record, Mapping):
            logger.warning("Catalog record {} is not an object; skipping", idx)
            continue
        try:
            items.append(item_from_record(record))
        except ValidationError as e:
            logger.warning("Catalog record {} failed validation; skipping: {}", idx, e.errors())

    logger.info("Parsed {} catalog items ({} skipped)", len(items), len(records) - len(items))
    return items


def load_catalog(path: Path | str) -> List[Item]:
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")
    logger.info("Loading catalog from {}", path)
    with path.open("r", encoding="utf-8") as f:
        payload = json.load(f)
    return parse_catalog(payload)


# ---------------------------
# History lookups
# ---------------------------

def history_items(items: Iterable[Item], ids: Optional[Iterable[ItemId]]) -> List[Item]:
    """Catalog items whose id is in ``ids``, in catalog order."""
    wanted = {str(i) for i in (ids or [])}
    if not wanted:
        return []
    return [item for item in items if str(item.product_id) in wanted]
