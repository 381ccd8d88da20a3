from __future__ import annotations

"""
Interaction-history and selection-state adapters over a key-value store.

The ranking core never touches these directly: callers read the id lists and
the selected filters once and pass them in. Keys are namespaced by a context
string (one catalog/page per context), e.g. ``"shop_bought"``.

Reads are forgiving: a missing or corrupt entry reads as an empty list, which
the rankers treat as "no signal".
"""

from typing import Any, Dict, List, Optional, Protocol, Union

from loguru import logger

from .constants import BOUGHT_SUFFIX, LIKED_SUFFIX, SELECTED_FILTERS_SUFFIX

ItemId = Union[int, str]


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[Any]: ...

    def set(self, key: str, value: Any) -> None: ...

    def remove(self, key: str) -> None: ...


class MemoryStore:
    """Dict-backed :class:`KeyValueStore`; values are copied in and out."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = {k: list(v) if isinstance(v, list) else v for k, v in (initial or {}).items()}

    def get(self, key: str) -> Optional[Any]:
        value = self._data.get(key)
        return list(value) if isinstance(value, list) else value

    def set(self, key: str, value: Any) -> None:
        self._data[key] = list(value) if isinstance(value, list) else value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)


def _namespaced(context: str, suffix: str) -> str:
    return f"{context}_{suffix}" if context else suffix


def _read_list(store: KeyValueStore, key: str) -> List[Any]:
    try:
        value = store.get(key)
    except Exception as e:
        logger.warning("Store read failed for {}: {}; treating as empty", key, e)
        return []
    if value is None:
        return []
    if not isinstance(value, (list, tuple)):
        logger.warning("Store entry {} is not a list ({}); treating as empty", key, type(value).__name__)
        return []
    return list(value)


def same_id(a: ItemId, b: ItemId) -> bool:
    """Ids compare by string form; catalog exports mix 7 and "7"."""
    return str(a) == str(b)


class InteractionHistory:
    """Bought and liked product ids for one context."""

    def __init__(self, store: KeyValueStore, context: str = ""):
        self.store = store
        self.context = context
        self._bought_key = _namespaced(context, BOUGHT_SUFFIX)
        self._liked_key = _namespaced(context, LIKED_SUFFIX)

    # -- bought --

    def get_bought_ids(self) -> List[ItemId]:
        return _read_list(self.store, self._bought_key)

    def add_bought(self, product_id: ItemId) -> None:
        self._add(self._bought_key, product_id)

    def remove_bought(self, product_id: ItemId) -> None:
        self._remove(self._bought_key, product_id)

    def is_bought(self, product_id: ItemId) -> bool:
        return any(same_id(i, product_id) for i in self.get_bought_ids())

    def clear_bought(self) -> None:
        self.store.remove(self._bought_key)

    # -- liked --

    def get_liked_ids(self) -> List[ItemId]:
        return _read_list(self.store, self._liked_key)

    def add_liked(self, product_id: ItemId) -> None:
        self._add(self._liked_key, product_id)

    def remove_liked(self, product_id: ItemId) -> None:
        self._remove(self._liked_key, product_id)

    def is_liked(self, product_id: ItemId) -> bool:
        return any(same_id(i, product_id) for i in self.get_liked_ids())

    def clear_liked(self) -> None:
        self.store.remove(self._liked_key)

    def _add(self, key: str, product_id: ItemId) -> None:
        ids = _read_list(self.store, key)
        if not any(same_id(i, product_id) for i in ids):
            ids.append(product_id)
            self.store.set(key, ids)

    def _remove(self, key: str, product_id: ItemId) -> None:
        ids = _read_list(self.store, key)
        self.store.set(key, [i for i in ids if not same_id(i, product_id)])


class SelectionStore:
    """Facet values the user pinned in the filter bar, for one context."""

    def __init__(self, store: KeyValueStore, context: str = ""):
        self.store = store
        self.context = context
        self._key = _namespaced(context, SELECTED_FILTERS_SUFFIX)

    def get_selected_filters(self) -> List[str]:
        return [str(v) for v in _read_list(self.store, self._key)]

    def add_selected_filter(self, filter_key: str) -> None:
        selected = self.get_selected_filters()
        if filter_key not in selected:
            selected.append(filter_key)
            self.store.set(self._key, selected)

    def remove_selected_filter(self, filter_key: str) -> None:
        selected = self.get_selected_filters()
        self.store.set(self._key, [k for k in selected if k != filter_key])
