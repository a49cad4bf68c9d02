"""Configuration layer."""

from .logging_setup import init_logging, instrument_client
from .settings import Settings, get_settings

__all__ = ["Settings", "get_settings", "init_logging", "instrument_client"]
