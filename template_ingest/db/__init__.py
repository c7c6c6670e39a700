"""Database models and session management."""

from template_ingest.db.models import TemplateRecord
from template_ingest.db.session import (
    AsyncSession,
    close_db,
    get_engine,
    get_session_maker,
    init_db,
)

__all__ = [
    # Models
    "TemplateRecord",
    # Session
    "AsyncSession",
    "get_engine",
    "get_session_maker",
    "init_db",
    "close_db",
]
