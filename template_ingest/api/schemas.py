"""API request and response schemas.

Pydantic v2 models for API serialization/deserialization. Payloads use
camelCase field names; snake_case is accepted on input as well.
"""

from typing import Any

from pydantic import BaseModel, Field

from template_ingest.strategies.template_engine.models import (
    CamelModel,
    ExpectedToken,
    IngestionResult,
    TemplateMetadata,
    UploadMetadata,
)


# =============================================================================
# Template Schemas
# =============================================================================


class UploadTemplateRequest(CamelModel):
    """Request body for template upload."""

    file_base64: str | None = Field(default=None, description="Base64-encoded .docx body")
    file_name: str | None = Field(default=None, description="Original file name")
    tokens: list[ExpectedToken] | None = Field(
        default=None,
        description="Tokens expected in the document; omit to accept any tag",
    )
    metadata: UploadMetadata | None = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "fileBase64": "UEsDBBQABgAIAAAAIQ...",
                "fileName": "engagement_letter.docx",
                "tokens": [
                    {"tag": "client_name", "title": "Client name", "type": "text"},
                    {"tag": "date", "title": "Letter date", "type": "date"},
                ],
                "metadata": {"uploadedBy": "jdoe", "tenant": "acme"},
            }
        }
    }


class UploadTemplateResponse(IngestionResult):
    """Response for template upload."""


class TemplateMetadataResponse(TemplateMetadata):
    """Response for template metadata queries."""


# =============================================================================
# Error Schemas
# =============================================================================


class ErrorResponse(BaseModel):
    """Standard error response."""

    detail: str = Field(description="Error message")
    error_code: str | None = Field(default=None, description="Application-specific error code")
    extra: dict[str, Any] | None = Field(default=None, description="Additional error context")
