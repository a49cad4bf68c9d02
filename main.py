"""Main entry point for SachCheck.

This file serves as the entry point for the Streamlit UI:
    streamlit run main.py
For CLI usage, use: sachcheck <statement>
"""

from sachcheck.interfaces.streamlit.app import create_app

create_app()
