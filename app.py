"""
Medicine quote cart: Streamlit UI entry point.
"""

import streamlit as st

# Load .env first so the endpoint and storage settings are in place
from medquote.utils.config import load_config, log_file, log_level
load_config()

from medquote.infrastructure.data.repositories.medicine_repository import MedicineRepository
from medquote.orchestration.quote_controller import QuoteSubmissionController
from medquote.services.cart_store import CartStore, client_cart_key
from medquote.utils.logger import setup_logger, get_logger
from medquote.ui.client_identity import resolve_client_id
from medquote.ui.cart_panel import render_cart_button, render_cart_panel, render_timer_poller
from medquote.ui.medicine_detail import render_medicine_detail, render_search

setup_logger("medquote", level=log_level(), log_file=log_file())
log = get_logger()

st.set_page_config(page_title="Medicine Quote Request", layout="wide")
st.title("Medicine Quote Request")


@st.cache_resource
def get_medicine_repository():
    return MedicineRepository()


def _close_panel() -> None:
    st.session_state.is_cart_open = False


repo = get_medicine_repository()

# One cart owner and one controller per browser session; the cart is
# stored under a key that belongs to this browser only
if "client_id" not in st.session_state:
    st.session_state.client_id = resolve_client_id(st.query_params)
if "cart" not in st.session_state:
    st.session_state.cart = CartStore(key=client_cart_key(st.session_state.client_id))
if "quote_controller" not in st.session_state:
    st.session_state.quote_controller = QuoteSubmissionController(
        st.session_state.cart,
        on_close=_close_panel,
    )
    log.info("Quote session started: %s", st.session_state.quote_controller.session_id)
if "is_cart_open" not in st.session_state:
    st.session_state.is_cart_open = False
if "selected_medicine_id" not in st.session_state:
    st.session_state.selected_medicine_id = None

cart: CartStore = st.session_state.cart
controller: QuoteSubmissionController = st.session_state.quote_controller

# Timers may have come due between reruns
controller.tick()

with st.sidebar:
    render_cart_button(cart)
    if st.session_state.is_cart_open:
        st.divider()
        render_cart_panel(cart, controller)

render_timer_poller(controller)

selected = st.session_state.selected_medicine_id
medicine = repo.get(selected) if selected is not None else None
if medicine is not None:
    render_medicine_detail(medicine, cart, repo)
else:
    if selected is not None:
        st.warning("Medicine not found.")
    render_search(repo)
