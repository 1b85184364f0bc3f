"""Core configuration, logging and factory components."""

from docsmith.core.config import Settings, get_settings
from docsmith.core.factory import ComponentFactory
from docsmith.core.logging_config import setup_logging

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
    "setup_logging",
]
