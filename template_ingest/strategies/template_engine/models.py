"""Template engine domain models.

Pydantic models shared by the ingestion pipeline, the template stores
and the API layer. Field names are snake_case in Python and camelCase
on the wire.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class WorkflowState(str, Enum):
    """Approval lifecycle state of a stored template.

    Ingestion only ever produces DRAFT.
    """

    DRAFT = "Draft"


class CamelModel(BaseModel):
    """Base model that serializes with camelCase aliases."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExpectedToken(CamelModel):
    """A placeholder the caller expects to find in the template."""

    tag: str | None = Field(default=None, description="Placeholder identifier")
    title: str | None = Field(default=None, description="Display title (pass-through)")
    type: str | None = Field(default=None, description="Value type (pass-through)")


class UploadMetadata(CamelModel):
    """Caller-supplied upload metadata."""

    uploaded_by: str | None = None
    tenant: str | None = None


class ValidationResult(CamelModel):
    """What extraction found in the document.

    ``is_valid`` reports that extraction ran to completion. Undeclared tags
    are reported separately on IngestionResult.
    """

    is_valid: bool = False
    tags_in_document: list[str] = Field(default_factory=list)


class TemplateMetadata(CamelModel):
    """The persisted metadata record of a template version."""

    template_id: str
    version: str
    uploaded_by: str
    tenant: str | None = None
    uploaded_on: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    workflow_state: WorkflowState = WorkflowState.DRAFT


class IngestionResult(CamelModel):
    """Outcome of one ingestion request."""

    success: bool
    template_id: str | None = None
    version: str | None = None
    workflow_state: WorkflowState | None = None
    message: str | None = None
    validation: ValidationResult
    unknown_tags: list[str] = Field(default_factory=list)
