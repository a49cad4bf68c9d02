"""Streamlit UI entry point for Streamlit Cloud deployment.

It simply imports and runs the main application.
"""

from sachcheck.interfaces.streamlit.app import create_app

create_app()
