"""Streamlit entry point and sidebar widgets."""
