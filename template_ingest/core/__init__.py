"""Core configuration components."""

from template_ingest.core.config import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
