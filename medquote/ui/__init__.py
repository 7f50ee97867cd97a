"""Streamlit views: cart panel, medicine detail and client identity."""
