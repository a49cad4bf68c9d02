"""SachCheck - multilingual fact-checking with voice input."""

__version__ = "0.1.0"
