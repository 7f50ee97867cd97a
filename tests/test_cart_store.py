"""
Tests for CartStore: merge semantics, absolute quantity updates, durable round-trip
and recovery from bad storage.
"""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from medquote.domains.cart.models import CartLineItem
from medquote.infrastructure.storage.json_store import JsonFileStore
from medquote.services.cart_store import CartStore


@pytest.mark.parametrize("calls", [1, 2, 5])
def test_repeated_add_item_merges_into_one_line(cart: CartStore, calls: int) -> None:
    for _ in range(calls):
        cart.add_item(7, {"name": "Keytruda"})
    assert len(cart) == 1
    assert cart.get(7).quantity == calls


def test_add_item_appends_in_insertion_order(cart: CartStore) -> None:
    cart.add_item(3, {"name": "C"})
    cart.add_item(1, {"name": "A"})
    cart.add_item(3, {"name": "C"})
    cart.add_item(2, {"name": "B"})
    assert [i.id for i in cart.items] == [3, 1, 2]
    assert cart.total_units == 4


def test_add_item_copies_catalog_fields(cart: CartStore) -> None:
    cart.add_item(1, {"name": "Herceptin", "activeIngredient": "Trastuzumab", "manufacturer": "Roche", "country": "CH"})
    item = cart.get(1)
    assert item == CartLineItem(id=1, name="Herceptin", active_ingredient="Trastuzumab", manufacturer="Roche", quantity=1)


def test_update_quantity_sets_absolute_value(two_item_cart: CartStore) -> None:
    two_item_cart.update_quantity(1, 5)
    assert two_item_cart.get(1).quantity == 5
    two_item_cart.update_quantity(1, 3)
    assert two_item_cart.get(1).quantity == 3


@pytest.mark.parametrize("qty", [0, -1])
def test_update_quantity_non_positive_removes(two_item_cart: CartStore, qty: int) -> None:
    two_item_cart.update_quantity(1, qty)
    assert 1 not in two_item_cart
    assert [i.id for i in two_item_cart.items] == [2]


def test_update_quantity_unknown_id_is_noop(two_item_cart: CartStore) -> None:
    before = two_item_cart.items
    two_item_cart.update_quantity(99, 4)
    assert two_item_cart.items == before


def test_clear_empties_and_persists(two_item_cart: CartStore, store: JsonFileStore) -> None:
    two_item_cart.clear()
    assert len(two_item_cart) == 0
    assert json.loads(store.get_item("cart")) == []


def test_cart_round_trips_through_durable_store(two_item_cart: CartStore, store: JsonFileStore) -> None:
    reloaded = CartStore(store, key="cart")
    assert reloaded.items == two_item_cart.items


def test_stored_format_uses_storefront_field_names(two_item_cart: CartStore, store: JsonFileStore) -> None:
    data = json.loads(store.get_item("cart"))
    assert data[0] == {"id": 1, "name": "A", "activeIngredient": "Alpha", "manufacturer": "Acme", "quantity": 2}
    assert data[1]["id"] == 2 and data[1]["quantity"] == 1


def test_every_mutation_writes_through() -> None:
    storage = MagicMock()
    storage.get_item.return_value = None
    c = CartStore(storage, key="cart")
    c.add_item(1, {"name": "A"})
    c.update_quantity(1, 3)
    c.update_quantity(1, 0)
    c.clear()
    assert storage.set_item.call_count == 4
    key, value = storage.set_item.call_args[0]
    assert key == "cart" and json.loads(value) == []


@pytest.mark.parametrize(
    "raw",
    [
        "{not json",
        '{"id": 1}',
        '[{"id": "1", "name": "A", "quantity": 1}]',
        '[{"id": 1, "name": "A", "quantity": 0}]',
        '[{"id": 1, "name": "A", "quantity": 1}, {"id": 1, "name": "A", "quantity": 2}]',
        '[{"id": true, "name": "A", "quantity": 1}]',
        "[1, 2]",
    ],
)
def test_corrupt_stored_value_loads_empty(store: JsonFileStore, raw: str) -> None:
    store.set_item("cart", raw)
    c = CartStore(store, key="cart")
    assert len(c) == 0


def test_absent_value_loads_empty(store: JsonFileStore) -> None:
    assert CartStore(store, key="cart").items == ()


def test_read_failure_loads_empty() -> None:
    storage = MagicMock()
    storage.get_item.side_effect = OSError("disk gone")
    c = CartStore(storage, key="cart")
    assert len(c) == 0


def test_write_failure_keeps_cart_in_memory() -> None:
    storage = MagicMock()
    storage.get_item.return_value = None
    storage.set_item.side_effect = OSError("read-only filesystem")
    c = CartStore(storage, key="cart")
    c.add_item(1, {"name": "A"})
    c.add_item(1, {"name": "A"})
    assert c.get(1).quantity == 2


def test_snapshot_is_detached_from_later_mutations(two_item_cart: CartStore) -> None:
    snap = two_item_cart.snapshot()
    two_item_cart.clear()
    assert [(i.name, i.quantity) for i in snap] == [("A", 2), ("B", 1)]
