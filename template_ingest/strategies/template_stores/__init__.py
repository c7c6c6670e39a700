"""Template store strategies."""

from template_ingest.strategies.template_stores.database import DatabaseTemplateStore
from template_ingest.strategies.template_stores.filesystem import FileSystemTemplateStore

__all__ = [
    "DatabaseTemplateStore",
    "FileSystemTemplateStore",
]
