"""Streamlit UI for the quote cart: cart button, panel views and timer polling.

The panel holds no cart logic of its own. What it shows is decided by
`select_view`, a pure function of cart size and controller phase.
"""

from __future__ import annotations

from enum import Enum

import streamlit as st

from medquote.domains.cart.models import ContactInfo
from medquote.orchestration.quote_controller import QuotePhase, QuoteSubmissionController
from medquote.services.cart_store import CartStore
from medquote.utils.config import timer_poll_seconds
from medquote.utils.logger import get_logger

logger = get_logger()

PROCESS_STEPS = (
    ("📝", "Submit your request"),
    ("📄", "We'll send you paperwork"),
    ("💳", "Confirm your order"),
    ("🚚", "Receive your medicine"),
)


class PanelView(str, Enum):
    EMPTY = "empty"
    ACTIVE = "active"
    SUBMITTING = "submitting"
    CONFIRMATION = "confirmation"


def select_view(cart_size: int, phase: QuotePhase) -> PanelView:
    """Pick the panel view. The confirmation wins over an emptied cart."""
    if phase in (QuotePhase.SUBMITTED, QuotePhase.CLEARING_CART):
        return PanelView.CONFIRMATION
    if phase is QuotePhase.SUBMITTING:
        return PanelView.SUBMITTING
    if cart_size == 0:
        return PanelView.EMPTY
    return PanelView.ACTIVE


def open_cart() -> None:
    st.session_state.is_cart_open = True


def render_cart_button(cart: CartStore, key: str = "cart_button", st=st) -> None:
    st.button(
        f"🛒 Quote cart ({cart.total_units})",
        key=key,
        on_click=open_cart,
        use_container_width=True,
    )


def render_process_steps(current_step: int = 1, st=st) -> None:
    st.markdown("##### How It Works")
    cols = st.columns(len(PROCESS_STEPS))
    for i, (col, (icon, title)) in enumerate(zip(cols, PROCESS_STEPS), start=1):
        with col:
            if i <= current_step:
                st.markdown(f"{icon} **{title}**")
            else:
                st.caption(f"{icon} {title}")


def _render_confirmation(controller: QuoteSubmissionController, st=st) -> None:
    st.success("✅ **Request Sent!**")
    st.write("Thank you for your request. We'll get back to you shortly with more details.")
    st.markdown("**Your Request:**")
    snapshot = controller.snapshot
    for item in snapshot or ():
        col1, col2 = st.columns([3, 1])
        col1.write(item.name)
        col2.write(f"{item.quantity} units")


def _render_empty(controller: QuoteSubmissionController, st=st) -> None:
    st.info("**Your cart is empty**")
    st.caption("Search for medicines and add them to your cart to request a quote.")
    st.button("Browse Medicines", key="cart_browse", on_click=controller.close)


def _render_line_items(cart: CartStore, disabled: bool, st=st) -> None:
    st.markdown(f"**Cart Items ({len(cart)})**")
    for item in cart.items:
        col1, col2, col3, col4 = st.columns([6, 1, 1, 1])
        with col1:
            st.markdown(f"**{item.name}**")
            if item.active_ingredient:
                st.caption(item.active_ingredient)
            if item.manufacturer:
                st.caption(item.manufacturer)
        col2.button(
            "➖",
            key=f"cart_dec_{item.id}",
            on_click=cart.update_quantity,
            args=(item.id, item.quantity - 1),
            disabled=disabled,
        )
        col3.markdown(f"**{item.quantity}**")
        col4.button(
            "➕",
            key=f"cart_inc_{item.id}",
            on_click=cart.update_quantity,
            args=(item.id, item.quantity + 1),
            disabled=disabled,
        )
        st.divider()


def _render_contact_form(controller: QuoteSubmissionController, st=st) -> None:
    st.markdown("**Your Information**")
    disabled = controller.is_submitting
    with st.form("quote_form", clear_on_submit=False):
        name = st.text_input("Full Name", key="quote_name", disabled=disabled)
        email = st.text_input("Email", key="quote_email", disabled=disabled)
        phone = st.text_input("Phone", key="quote_phone", disabled=disabled)
        message = st.text_area("Message (Optional)", key="quote_message", height=90, disabled=disabled)
        submitted = st.form_submit_button(
            "Sending..." if disabled else "Send Quote Request",
            disabled=disabled,
            use_container_width=True,
        )

    if not submitted:
        if controller.error:
            st.error(controller.error)
        return

    contact = ContactInfo.from_form({"name": name, "email": email, "phone": phone, "message": message})
    with st.spinner("Sending..."):
        outcome = controller.submit(contact)
    if outcome.ok:
        st.rerun()
    elif outcome.status == "invalid":
        for field_name, problem in outcome.errors.items():
            st.warning(f"**{field_name.title()}:** {problem}")
    elif outcome.status == "failed":
        st.error(controller.error or outcome.message)
        with st.expander("Error details (debug)"):
            st.code(outcome.message, language="text")


def render_timer_poller(controller: QuoteSubmissionController, interval: float | None = None) -> None:
    """Poll the controller's timers while any are pending; rerun the app when one fires."""
    if not controller.has_pending_timers:
        return

    @st.fragment(run_every=interval or timer_poll_seconds())
    def _poll() -> None:
        if controller.tick():
            st.rerun()

    _poll()


def render_cart_panel(cart: CartStore, controller: QuoteSubmissionController, st=st) -> None:
    """Render the quote panel. Caller decides whether the panel is open."""
    col1, col2 = st.columns([5, 1])
    with col1:
        st.subheader("🛒 Quote Request")
    with col2:
        st.button("✖", key="cart_close", on_click=controller.close, help="Close panel")

    render_process_steps(current_step=1, st=st)

    view = select_view(len(cart), controller.phase)
    if view is PanelView.CONFIRMATION:
        _render_confirmation(controller, st=st)
    elif view is PanelView.EMPTY:
        _render_empty(controller, st=st)
    else:
        _render_line_items(cart, disabled=view is PanelView.SUBMITTING, st=st)
        _render_contact_form(controller, st=st)
