"""Streamlit frontend for the task management backend."""

__version__ = "0.1.0"
