"""Template engine strategies.

Implements placeholder tag extraction, token reconciliation, version
assignment and the ingestion pipeline that composes them.
"""

from template_ingest.strategies.template_engine.extractor import ContentControlTagExtractor
from template_ingest.strategies.template_engine.ingestor import TemplateIngestor
from template_ingest.strategies.template_engine.models import (
    ExpectedToken,
    IngestionResult,
    TemplateMetadata,
    UploadMetadata,
    ValidationResult,
    WorkflowState,
)

__all__ = [
    "ContentControlTagExtractor",
    "TemplateIngestor",
    "ExpectedToken",
    "IngestionResult",
    "TemplateMetadata",
    "UploadMetadata",
    "ValidationResult",
    "WorkflowState",
]
