"""Abstract base classes and errors for template ingestion strategies."""

from template_ingest.interfaces.template import (
    BaseTagExtractor,
    BaseTemplateStore,
    InvalidTemplateInputError,
    MalformedDocumentError,
    PersistenceError,
    TemplateIngestionError,
)

__all__ = [
    "BaseTagExtractor",
    "BaseTemplateStore",
    "TemplateIngestionError",
    "InvalidTemplateInputError",
    "MalformedDocumentError",
    "PersistenceError",
]
