"""Core configuration, logging and text utilities."""

from .config import AppSettings, get_settings
from .logging import setup_logging

__all__ = ["AppSettings", "get_settings", "setup_logging"]
