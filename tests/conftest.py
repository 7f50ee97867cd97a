"""
Shared fixtures: a hand-driven clock, a temp durable store and a seeded cart.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from medquote.infrastructure.storage.json_store import JsonFileStore
from medquote.services.cart_store import CartStore


class ManualClock:
    """Clock for TimerArena; time only moves when a test advances it."""

    def __init__(self, start_ms: int = 0) -> None:
        # whole milliseconds so deadlines compare exactly
        self.ms = start_ms

    def __call__(self) -> float:
        return self.ms / 1000.0

    def advance(self, ms: int) -> None:
        self.ms += ms


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def store(tmp_path: Path) -> JsonFileStore:
    return JsonFileStore(tmp_path / "store" / "cart_store.json")


@pytest.fixture
def cart(store: JsonFileStore) -> CartStore:
    return CartStore(store, key="cart")


@pytest.fixture
def two_item_cart(cart: CartStore) -> CartStore:
    """[{id: 1, name: A, qty: 2}, {id: 2, name: B, qty: 1}]"""
    cart.add_item(1, {"name": "A", "activeIngredient": "Alpha", "manufacturer": "Acme"})
    cart.add_item(1, {"name": "A", "activeIngredient": "Alpha", "manufacturer": "Acme"})
    cart.add_item(2, {"name": "B", "activeIngredient": "Beta", "manufacturer": "Bmx"})
    return cart
