"""Streamlit deadline tracker for IB students."""

__version__ = "0.1.0"
