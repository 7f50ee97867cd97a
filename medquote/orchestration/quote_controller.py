"""
Quote submission state machine for the cart panel.

    IDLE -> SUBMITTING -> SUBMITTED -(D1)-> CLEARING_CART -(D2)-> CLOSED -> IDLE
                 \\-> IDLE (failure, cart untouched)

The post-success phases run off TimerArena entries owned by this controller's
session, so a manual close can cancel them.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable

from medquote.automation.quote_client import send_quote_request
from medquote.domains.cart.models import ContactInfo, QuoteSnapshot
from medquote.domains.quote.payload import build_quote_payload, validate_contact
from medquote.orchestration.timers import TimerArena, TimerHandle
from medquote.services.cart_store import CartStore
from medquote.utils.config import quote_clear_delay_ms, quote_close_delay_ms
from medquote.utils.logger import get_logger

logger = get_logger()

SUBMIT_ERROR_MESSAGE = "An error occurred. Please try again later."


class QuotePhase(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUBMITTED = "submitted"
    CLEARING_CART = "clearing_cart"
    CLOSED = "closed"


@dataclass(frozen=True)
class SubmissionOutcome:
    status: str  # submitted / invalid / failed / ignored
    message: str = ""
    errors: dict[str, str] = field(default_factory=dict)
    status_code: int | None = None

    @property
    def ok(self) -> bool:
        return self.status == "submitted"


class QuoteSubmissionController:
    """
    One instance per panel session.

    Args:
        cart: The session's CartStore.
        poster: Callable taking the JSON payload and returning a result dict with
            "success"; defaults to send_quote_request.
        arena: Timer registry; a private one is created when omitted.
        on_close: Called once whenever the panel should close.
        clear_delay_ms / close_delay_ms: D1 and D2; default from config.
    """

    def __init__(
        self,
        cart: CartStore,
        poster: Callable[[dict[str, Any]], dict[str, Any]] | None = None,
        arena: TimerArena | None = None,
        on_close: Callable[[], None] | None = None,
        clear_delay_ms: int | None = None,
        close_delay_ms: int | None = None,
        session_id: str | None = None,
    ) -> None:
        self._cart = cart
        self._poster = poster
        self._arena = arena or TimerArena()
        self._on_close = on_close
        self._clear_delay_ms = clear_delay_ms if clear_delay_ms is not None else quote_clear_delay_ms()
        self._close_delay_ms = close_delay_ms if close_delay_ms is not None else quote_close_delay_ms()
        self._session_id = session_id or uuid.uuid4().hex
        self._phase = QuotePhase.IDLE
        self._snapshot: QuoteSnapshot | None = None
        self._error: str | None = None
        self._clear_timer: TimerHandle | None = None

    # --- state ---

    @property
    def phase(self) -> QuotePhase:
        return self._phase

    @property
    def snapshot(self) -> QuoteSnapshot | None:
        return self._snapshot

    @property
    def error(self) -> str | None:
        return self._error

    @property
    def session_id(self) -> str:
        return self._session_id

    @property
    def is_submitting(self) -> bool:
        return self._phase is QuotePhase.SUBMITTING

    @property
    def is_submitted(self) -> bool:
        return self._phase in (QuotePhase.SUBMITTED, QuotePhase.CLEARING_CART)

    @property
    def has_pending_timers(self) -> bool:
        return bool(self._arena.pending(self._session_id))

    def clear_error(self) -> None:
        self._error = None

    # --- transitions ---

    def submit(self, contact: ContactInfo) -> SubmissionOutcome:
        """Validate, POST the quote and enter SUBMITTED on success."""
        if self._phase is QuotePhase.SUBMITTING:
            logger.warning("Quote submit ignored: a request is already in flight")
            return SubmissionOutcome("ignored", "A quote request is already being sent.")
        if self.is_submitted:
            logger.warning("Quote submit ignored: confirmation still showing")
            return SubmissionOutcome("ignored", "Your request was already sent.")

        errors = validate_contact(contact)
        if not len(self._cart):
            errors["cart"] = "Your cart is empty."
        if errors:
            # shown with the form that produced it; not kept as controller state
            logger.info("Quote submit rejected locally: %s", sorted(errors))
            return SubmissionOutcome(
                "invalid", "Please complete the required fields: " + ", ".join(errors), errors=errors
            )

        snapshot = self._cart.snapshot()
        payload = build_quote_payload(contact, snapshot.items)
        self._phase = QuotePhase.SUBMITTING
        self._error = None
        post = self._poster or send_quote_request
        try:
            result = post(payload)
        except Exception as e:
            logger.exception("Quote poster raised: %s", e)
            result = {"success": False, "message": str(e), "error": str(e)}

        if not (isinstance(result, dict) and result.get("success")):
            detail = result.get("message") if isinstance(result, dict) else repr(result)
            self._phase = QuotePhase.IDLE
            self._error = SUBMIT_ERROR_MESSAGE
            logger.warning("Quote submission failed: %s", detail)
            return SubmissionOutcome(
                "failed",
                detail or SUBMIT_ERROR_MESSAGE,
                status_code=result.get("status_code") if isinstance(result, dict) else None,
            )

        self._snapshot = snapshot
        self._phase = QuotePhase.SUBMITTED
        self._clear_timer = self._arena.schedule(
            self._session_id, self._clear_delay_ms, self._on_clear_due, name="clear_cart"
        )
        logger.info("Quote submitted with %d line items", len(snapshot))
        return SubmissionOutcome("submitted", result.get("message") or "", status_code=result.get("status_code"))

    def _on_clear_due(self) -> None:
        """
        D1 elapsed with the panel still open. The cart is emptied unconditionally,
        including items added while the confirmation showed; only a manual close()
        compares the cart against the snapshot.
        """
        if self._phase is not QuotePhase.SUBMITTED:
            return
        self._phase = QuotePhase.CLEARING_CART
        if self._snapshot is not None and self._cart.items != self._snapshot.items:
            logger.info("Cart changed during confirmation; clearing it with the sent request")
        self._cart.clear()
        # due D2 after the clear deadline, not after the poll that noticed it
        self._arena.schedule(
            self._session_id,
            self._close_delay_ms,
            self._on_close_due,
            name="close_panel",
            after=self._clear_timer,
        )
        self._clear_timer = None

    def _on_close_due(self) -> None:
        if self._phase is not QuotePhase.CLEARING_CART:
            return
        self._finish_close()

    def _emit_close(self) -> None:
        if self._on_close is None:
            return
        try:
            self._on_close()
        except Exception as e:
            logger.exception("Panel close callback failed: %s", e)

    def _finish_close(self) -> None:
        self._phase = QuotePhase.CLOSED
        self._emit_close()
        self._snapshot = None
        self._error = None
        self._clear_timer = None
        self._phase = QuotePhase.IDLE

    def tick(self) -> int:
        """Fire this session's due timers. Returns how many fired."""
        return self._arena.run_due(self._session_id)

    def close(self) -> None:
        """
        User-initiated panel close. Cancels pending timers; if the cart has not
        been cleared yet it is cleared only when still equal to the snapshot.
        """
        self._arena.cancel_session(self._session_id)
        self._clear_timer = None
        if self._phase is QuotePhase.SUBMITTED and self._snapshot is not None:
            if self._cart.items == self._snapshot.items:
                self._cart.clear()
            else:
                logger.info("Cart changed since submission; leaving it as is")
        if self._phase is QuotePhase.SUBMITTING:
            self._emit_close()
            return
        self._finish_close()

    def dispose(self) -> None:
        """Teardown: drop pending timers without touching the cart."""
        self._arena.cancel_session(self._session_id)
