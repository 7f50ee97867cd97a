"""
CartStore: the single owner of the quote cart.

Every mutation goes through this class and is written through to the durable
store straight away. Storage problems are logged and never reach the caller;
the in-memory cart stays authoritative when a write fails.
"""

from __future__ import annotations

import json
from typing import Any, Iterator, Mapping

from medquote.domains.cart.models import CartLineItem, QuoteSnapshot
from medquote.infrastructure.storage.json_store import JsonFileStore
from medquote.utils.config import cart_storage_key
from medquote.utils.logger import get_logger

logger = get_logger()


class CartStore:
    """
    Ordered cart of line items keyed by product id.

    Invariants: ids are unique; no line item has quantity < 1.
    """

    def __init__(self, storage: Any | None = None, key: str | None = None) -> None:
        self._storage = storage if storage is not None else JsonFileStore()
        self._key = key or cart_storage_key()
        self._items: list[CartLineItem] = []
        self.load()

    # --- durable storage ---

    def load(self) -> None:
        """Rehydrate from the durable store. Absent or corrupt data gives an empty cart."""
        try:
            raw = self._storage.get_item(self._key)
        except Exception as e:
            logger.exception("Error loading cart from durable store: %s", e)
            self._items = []
            return
        if raw is None:
            logger.debug("No stored cart under %r; starting empty", self._key)
            self._items = []
            return
        try:
            self._items = _parse_cart(raw)
        except (TypeError, ValueError) as e:
            logger.warning("Stored cart under %r is unreadable (%s); starting empty", self._key, e)
            self._items = []
            return
        logger.info("Loaded cart with %d line items", len(self._items))

    def persist(self) -> None:
        """Write the cart through to the durable store; failures are logged only."""
        try:
            payload = json.dumps([item.to_dict() for item in self._items], ensure_ascii=False)
            self._storage.set_item(self._key, payload)
        except Exception as e:
            logger.exception("Error saving cart to durable store: %s", e)

    # --- mutations ---

    def add_item(self, product_id: int, item_data: Mapping[str, Any] | None = None) -> CartLineItem:
        """Add one unit of product_id, merging into an existing line item."""
        idx = self._index_of(product_id)
        if idx is not None:
            item = self._items[idx].with_quantity(self._items[idx].quantity + 1)
            self._items[idx] = item
        else:
            item = CartLineItem.from_product(product_id, item_data or {})
            self._items.append(item)
        logger.info("Cart add: id=%s quantity=%d", product_id, item.quantity)
        self.persist()
        return item

    def update_quantity(self, item_id: int, new_quantity: int) -> None:
        """Set an absolute quantity; zero or less removes the line item."""
        if new_quantity <= 0:
            before = len(self._items)
            self._items = [i for i in self._items if i.id != item_id]
            if len(self._items) != before:
                logger.info("Cart remove: id=%s", item_id)
        else:
            idx = self._index_of(item_id)
            if idx is not None:
                self._items[idx] = self._items[idx].with_quantity(int(new_quantity))
                logger.info("Cart update: id=%s quantity=%d", item_id, new_quantity)
            else:
                logger.debug("Cart update ignored for unknown id=%s", item_id)
        self.persist()

    def clear(self) -> None:
        self._items = []
        logger.info("Cart cleared")
        self.persist()

    # --- reads ---

    def _index_of(self, item_id: int) -> int | None:
        for i, item in enumerate(self._items):
            if item.id == item_id:
                return i
        return None

    def get(self, item_id: int) -> CartLineItem | None:
        idx = self._index_of(item_id)
        return self._items[idx] if idx is not None else None

    @property
    def items(self) -> tuple[CartLineItem, ...]:
        return tuple(self._items)

    @property
    def total_units(self) -> int:
        return sum(i.quantity for i in self._items)

    def snapshot(self) -> QuoteSnapshot:
        return QuoteSnapshot.of(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[CartLineItem]:
        return iter(tuple(self._items))

    def __contains__(self, item_id: object) -> bool:
        return any(i.id == item_id for i in self._items)


def _parse_cart(raw: str) -> list[CartLineItem]:
    """
    Parse a stored cart.

    Raises:
        ValueError: On invalid JSON, a non-list value, a malformed entry or a duplicate id.
    """
    data = json.loads(raw)
    if not isinstance(data, list):
        raise ValueError("stored cart is not a list")
    items: list[CartLineItem] = []
    seen: set[int] = set()
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError(f"line item is not an object: {entry!r}")
        item = CartLineItem.from_dict(entry)
        if item.id in seen:
            raise ValueError(f"duplicate line item id {item.id}")
        seen.add(item.id)
        items.append(item)
    return items


def client_cart_key(client_id: str, base: str | None = None) -> str:
    """Storage key for one client's cart, e.g. `cart:3f2a...`."""
    if not client_id:
        raise ValueError("client_id must not be empty")
    return f"{base or cart_storage_key()}:{client_id}"
