"""Streamlit catalog search and medicine detail views."""

from __future__ import annotations

from typing import Any

import streamlit as st

from medquote.infrastructure.data.repositories.medicine_repository import MedicineRepository
from medquote.services.cart_store import CartStore
from medquote.ui.cart_panel import open_cart


def select_medicine(medicine_id: int | None) -> None:
    st.session_state.selected_medicine_id = medicine_id


def add_to_cart(cart: CartStore, medicine: dict[str, Any]) -> None:
    cart.add_item(medicine["id"], medicine)
    open_cart()


def render_search(repo: MedicineRepository, st=st) -> None:
    st.subheader("🔎 Search Medicines")
    query = st.text_input("Medicine name, active ingredient or manufacturer", key="catalog_query")
    results = repo.search(query)
    if not results:
        st.info("No medicines match your search.")
        return
    for m in results:
        col1, col2 = st.columns([4, 1])
        with col1:
            st.markdown(f"**{m.get('name')}**")
            st.caption(f"{m.get('activeIngredient') or '-'} · {m.get('manufacturer') or 'Not specified'}")
        col2.button("Details", key=f"details_{m['id']}", on_click=select_medicine, args=(m["id"],))


def render_medicine_detail(
    medicine: dict[str, Any],
    cart: CartStore,
    repo: MedicineRepository,
    st=st,
) -> None:
    st.button("← Back to search", key="detail_back", on_click=select_medicine, args=(None,))
    st.header(medicine.get("name") or "Medicine")

    st.markdown("#### Medicine Information")
    st.markdown(f"**Active Ingredient:** {medicine.get('activeIngredient') or '-'}")
    if medicine.get("activeIngredientDescription"):
        st.caption(medicine["activeIngredientDescription"])
    st.markdown(f"**Packaging:** {medicine.get('packaging') or '-'}")
    st.markdown(f"**Manufacturer:** {medicine.get('manufacturer') or '-'}")
    st.markdown(f"**Country of Origin:** {medicine.get('country') or '-'}")
    st.caption("Pricing is provided on request. Add the medicine to your cart and send a quote request.")

    st.button(
        "🛒 Add to Cart",
        key=f"add_{medicine['id']}",
        on_click=add_to_cart,
        args=(cart, medicine),
        type="primary",
    )

    similar = repo.similar(medicine)
    if similar:
        st.markdown("#### Similar Medicines")
        cols = st.columns(len(similar))
        for col, m in zip(cols, similar):
            with col:
                st.markdown(f"**{m.get('name')}**")
                st.caption(m.get("manufacturer") or "Not specified")
                st.button("View", key=f"similar_{m['id']}", on_click=select_medicine, args=(m["id"],))
