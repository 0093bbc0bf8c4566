"""Core configuration and factory components."""

from fileflow.core.config import Settings, get_settings
from fileflow.core.factory import ComponentFactory

__all__ = [
    "Settings",
    "get_settings",
    "ComponentFactory",
]
