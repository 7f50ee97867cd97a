"""
Cart domain models: line items, contact details and quote snapshots.

Line items serialize with the storefront's camelCase field names so a stored
cart stays readable by any client that shares the durable store.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Mapping


@dataclass(frozen=True)
class CartLineItem:
    id: int
    name: str
    active_ingredient: str = ""
    manufacturer: str = ""
    quantity: int = 1

    def with_quantity(self, quantity: int) -> "CartLineItem":
        return replace(self, quantity=quantity)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "activeIngredient": self.active_ingredient,
            "manufacturer": self.manufacturer,
            "quantity": self.quantity,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CartLineItem":
        """
        Build a line item from its stored form.

        Raises:
            ValueError: If id or quantity are not positive integers, or name is missing.
        """
        item_id = data.get("id")
        quantity = data.get("quantity")
        # bool is an int subclass; a stored true/false is not an id.
        if not isinstance(item_id, int) or isinstance(item_id, bool):
            raise ValueError(f"line item id must be an integer, got {item_id!r}")
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 1:
            raise ValueError(f"line item quantity must be a positive integer, got {quantity!r}")
        name = data.get("name")
        if not isinstance(name, str) or not name:
            raise ValueError(f"line item {item_id} has no name")
        return cls(
            id=item_id,
            name=name,
            active_ingredient=str(data.get("activeIngredient") or ""),
            manufacturer=str(data.get("manufacturer") or ""),
            quantity=quantity,
        )

    @classmethod
    def from_product(cls, product_id: int, item_data: Mapping[str, Any]) -> "CartLineItem":
        """New line item (quantity 1) from a catalog record; accepts camelCase or snake_case keys."""
        return cls(
            id=product_id,
            name=str(item_data.get("name") or f"Product {product_id}"),
            active_ingredient=str(
                item_data.get("activeIngredient") or item_data.get("active_ingredient") or ""
            ),
            manufacturer=str(item_data.get("manufacturer") or ""),
            quantity=1,
        )


@dataclass
class ContactInfo:
    name: str = ""
    email: str = ""
    phone: str = ""
    message: str = ""

    @classmethod
    def from_form(cls, form: Mapping[str, Any]) -> "ContactInfo":
        return cls(
            name=str(form.get("name") or "").strip(),
            email=str(form.get("email") or "").strip(),
            phone=str(form.get("phone") or "").strip(),
            message=str(form.get("message") or "").strip(),
        )


@dataclass(frozen=True)
class QuoteSnapshot:
    """Cart contents frozen at submission time, kept for the confirmation view."""

    items: tuple[CartLineItem, ...] = field(default_factory=tuple)

    @classmethod
    def of(cls, items: Iterable[CartLineItem]) -> "QuoteSnapshot":
        return cls(items=tuple(items))

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)

    @property
    def total_units(self) -> int:
        return sum(i.quantity for i in self.items)
