"""Template ingestion orchestrator.

Runs one upload through the pipeline:

    extract tags -> reconcile with expected tokens
        -> unknown tags: report, persist nothing
        -> clean: assign identity -> persist -> report

Each stage runs once; failures are terminal for the request.
"""

import logging
from collections.abc import Sequence

from template_ingest.interfaces.template import (
    BaseTagExtractor,
    BaseTemplateStore,
    InvalidTemplateInputError,
)
from template_ingest.strategies.template_engine.models import (
    ExpectedToken,
    IngestionResult,
    TemplateMetadata,
    UploadMetadata,
    ValidationResult,
    WorkflowState,
)
from template_ingest.strategies.template_engine.reconciler import find_unknown_tags
from template_ingest.strategies.template_engine.versioning import assign_initial_version

logger = logging.getLogger(__name__)


def unknown_tags_message(unknown_tags: Sequence[str]) -> str:
    return "Unknown tokens found in document: " + ", ".join(unknown_tags)


class TemplateIngestor:
    """Validates uploaded templates and stores the ones that pass.

    Holds no per-request state, so one instance can serve concurrent
    requests.
    """

    def __init__(
        self,
        extractor: BaseTagExtractor,
        store: BaseTemplateStore,
        default_uploader: str,
    ) -> None:
        """Initialize the ingestor.

        Args:
            extractor: Strategy that finds placeholder tags in a document.
            store: Strategy that persists accepted templates.
            default_uploader: uploadedBy value when the caller sends no metadata.
        """
        self._extractor = extractor
        self._store = store
        self._default_uploader = default_uploader

    @property
    def store(self) -> BaseTemplateStore:
        return self._store

    async def validate(self, content: bytes) -> ValidationResult:
        """Extract the tags of a document without reconciling or storing it.

        Raises:
            InvalidTemplateInputError: If no document body was supplied.
            MalformedDocumentError: If the document cannot be parsed.
        """
        if not isinstance(content, (bytes, bytearray)) or not content:
            raise InvalidTemplateInputError("Invalid request: missing file")

        tags = await self._extractor.extract(bytes(content))
        return ValidationResult(is_valid=True, tags_in_document=tags)

    async def ingest(
        self,
        content: bytes,
        expected_tokens: Sequence[ExpectedToken] | None = None,
        metadata: UploadMetadata | None = None,
    ) -> IngestionResult:
        """Validate a template and store it if every tag is declared.

        Args:
            content: Raw bytes of the .docx package.
            expected_tokens: Tokens the caller declares. None or empty
                accepts any tag.
            metadata: Uploader and tenant of the template.

        Returns:
            IngestionResult; ``success`` is False when the document holds
            undeclared tags.

        Raises:
            InvalidTemplateInputError: If no document body was supplied.
            MalformedDocumentError: If the document cannot be parsed.
            PersistenceError: If the template cannot be stored.
        """
        validation = await self.validate(content)
        logger.info(f"Tags in document: {validation.tags_in_document}")

        unknown_tags = find_unknown_tags(validation.tags_in_document, expected_tokens)
        if unknown_tags:
            logger.warning(f"Rejecting template with unknown tags: {unknown_tags}")
            return IngestionResult(
                success=False,
                message=unknown_tags_message(unknown_tags),
                validation=validation,
                unknown_tags=unknown_tags,
            )

        assignment = assign_initial_version()
        logger.info(f"Allocated template {assignment.template_id} v{assignment.version}")

        record = TemplateMetadata(
            template_id=assignment.template_id,
            version=assignment.version,
            uploaded_by=(metadata.uploaded_by if metadata else None) or self._default_uploader,
            tenant=metadata.tenant if metadata else None,
            workflow_state=WorkflowState.DRAFT,
        )
        stored = await self._store.persist(record, bytes(content))

        return IngestionResult(
            success=True,
            template_id=stored.template_id,
            version=stored.version,
            workflow_state=stored.workflow_state,
            validation=validation,
        )
