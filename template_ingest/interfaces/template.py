"""Template ingestion interfaces.

Defines abstract base classes for the tag extraction and template storage
strategies, plus the error types raised across the ingestion pipeline.
"""

from abc import ABC, abstractmethod
from typing import Any


class TemplateIngestionError(Exception):
    """Base exception for template ingestion failures.

    Attributes:
        message: Human-readable description of the failure.
        stage: Pipeline stage that failed (input, extraction, persistence).
        context: Structured detail for logs and API error bodies.
    """

    stage = "ingestion"

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to a dictionary for logging/API responses."""
        return {
            "error_type": self.__class__.__name__,
            "stage": self.stage,
            "message": self.message,
            "context": self.context,
        }


class InvalidTemplateInputError(TemplateIngestionError):
    """Raised when the caller's payload cannot be turned into a document body."""

    stage = "input"


class MalformedDocumentError(TemplateIngestionError):
    """Raised when the document package or its XML cannot be parsed."""

    stage = "extraction"


class PersistenceError(TemplateIngestionError):
    """Raised when the template body or its metadata cannot be stored."""

    stage = "persistence"


class BaseTagExtractor(ABC):
    """Abstract base class for placeholder tag extraction strategies.

    Opens a document package and returns the identifiers of its
    placeholder fields in document order.
    """

    @abstractmethod
    async def extract(self, content: bytes) -> list[str]:
        """Extract placeholder tags from a document body.

        Args:
            content: Raw bytes of the document package.

        Returns:
            Ordered, de-duplicated list of tag identifiers.

        Raises:
            MalformedDocumentError: If the package cannot be opened or parsed.
        """

    @property
    @abstractmethod
    def supported_extensions(self) -> set[str]:
        """Return supported file extensions."""


class BaseTemplateStore(ABC):
    """Abstract base class for template storage strategies.

    A stored template is a document body plus a metadata record. Both
    become readable together or not at all.
    """

    @abstractmethod
    def ensure_storage(self) -> None:
        """Provision the storage location. Safe to call repeatedly."""

    @abstractmethod
    async def persist(self, metadata: Any, content: bytes) -> Any:
        """Store a template body and its metadata record.

        Args:
            metadata: TemplateMetadata describing the template.
            content: Raw bytes of the document body.

        Returns:
            The persisted TemplateMetadata.

        Raises:
            PersistenceError: If either write fails. No partial record
                remains readable afterwards.
        """

    @abstractmethod
    async def get(self, template_id: str, version: str | None = None) -> Any | None:
        """Load the metadata record for a template.

        Args:
            template_id: The template identifier.
            version: Optional version label; any version when omitted.

        Returns:
            TemplateMetadata, or None if no complete record exists.
        """

    @abstractmethod
    async def read_content(self, template_id: str, version: str | None = None) -> bytes | None:
        """Load the stored document body for a template.

        Returns:
            The document bytes, or None if no complete record exists.
        """
