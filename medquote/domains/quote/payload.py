"""
Quote request payload: contact validation and the textual cart rendering
sent to the intake endpoint.
"""

from __future__ import annotations

import re
from typing import Any, Iterable

from medquote.domains.cart.models import CartLineItem, ContactInfo
from medquote.utils.config import quote_subject, quote_template

REQUIRED_FIELDS = ("name", "email", "phone")

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class QuoteValidationError(ValueError):
    """Raised when a contact form is missing required fields or has a bad email."""

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__("; ".join(f"{k}: {v}" for k, v in errors.items()))
        self.errors = errors


def validate_contact(contact: ContactInfo, raise_on_error: bool = False) -> dict[str, str]:
    """
    Check required contact fields.

    Returns:
        Dict of field name -> problem. Empty when the contact is valid.

    Raises:
        QuoteValidationError: If raise_on_error and any field is invalid.
    """
    errors: dict[str, str] = {}
    for name in REQUIRED_FIELDS:
        if not (getattr(contact, name, "") or "").strip():
            errors[name] = "This field is required."
    email = (contact.email or "").strip()
    if email and not _EMAIL_RE.match(email):
        errors["email"] = "Enter a valid email address."
    if errors and raise_on_error:
        raise QuoteValidationError(errors)
    return errors


def format_cart_items(items: Iterable[CartLineItem]) -> str:
    """Render line items as "<name> - <quantity> units", one per line."""
    return "\n".join(f"{item.name} - {item.quantity} units" for item in items)


def build_quote_payload(
    contact: ContactInfo,
    items: Iterable[CartLineItem],
    subject: str | None = None,
    template: str | None = None,
) -> dict[str, Any]:
    """
    Assemble the JSON body for the quote-intake POST.

    Example:
        >>> c = ContactInfo(name="Ada", email="ada@example.com", phone="555")
        >>> build_quote_payload(c, [CartLineItem(id=1, name="A", quantity=2)])["request"]
        'A - 2 units'
    """
    return {
        "name": contact.name,
        "email": contact.email,
        "phone": contact.phone,
        "message": contact.message or "",
        "_subject": subject or quote_subject(),
        "_template": template or quote_template(),
        "request": format_cart_items(items),
    }
