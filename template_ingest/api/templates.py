"""Template management API routes.

Handles template upload with token validation, metadata lookup and download.
"""

import base64
import binascii
import logging

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from fastapi.responses import JSONResponse, Response

from template_ingest.api.deps import get_ingestor, get_template_store
from template_ingest.api.schemas import (
    ErrorResponse,
    TemplateMetadataResponse,
    UploadTemplateRequest,
    UploadTemplateResponse,
)
from template_ingest.interfaces.template import (
    BaseTemplateStore,
    InvalidTemplateInputError,
    MalformedDocumentError,
    PersistenceError,
    TemplateIngestionError,
)
from template_ingest.strategies.template_engine import TemplateIngestor

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEMPLATE_ID_PATTERN = r"^[0-9a-f]{32}$"

router = APIRouter(prefix="/api/templates", tags=["templates"])


# =============================================================================
# Helper Functions
# =============================================================================


def _decode_file(file_base64: str | None) -> bytes:
    """Decode the base64 document body of an upload request.

    Raises:
        InvalidTemplateInputError: If the body is missing or not valid base64.
    """
    if not file_base64 or not file_base64.strip():
        raise InvalidTemplateInputError("Invalid request: missing file")

    try:
        return base64.b64decode(file_base64, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidTemplateInputError(f"Invalid base64: {e}") from e


def _error_response(status_code: int, error_code: str, exc: TemplateIngestionError) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(
            detail=exc.message,
            error_code=error_code,
            extra=exc.to_dict(),
        ).model_dump(),
    )


# =============================================================================
# Endpoints
# =============================================================================


@router.post(
    "/upload",
    response_model=UploadTemplateResponse,
    status_code=status.HTTP_200_OK,
    responses={
        400: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def upload_template(
    request: UploadTemplateRequest,
    ingestor: TemplateIngestor = Depends(get_ingestor),
):
    """Upload a Word template and store it if its tags are all declared.

    The document's content controls are compared against ``tokens``. If the
    document contains tags the caller did not declare, nothing is stored and
    ``success`` is false with the unknown tags listed. Otherwise the template
    is stored as version 1.0 in the Draft workflow state.

    Args:
        request: Upload payload with base64 body, expected tokens and metadata.
        ingestor: Template ingestion pipeline.

    Returns:
        UploadTemplateResponse, or an ErrorResponse for bad input (400),
        unreadable documents (422) and storage failures (500).
    """
    logger.info(
        f"Template upload received: file={request.file_name}, "
        f"tokens={len(request.tokens) if request.tokens is not None else 'none'}"
    )

    try:
        content = _decode_file(request.file_base64)
        result = await ingestor.ingest(content, request.tokens, request.metadata)
        return UploadTemplateResponse.model_validate(result.model_dump())

    except InvalidTemplateInputError as e:
        logger.warning(f"Rejected upload: {e.message}")
        return _error_response(status.HTTP_400_BAD_REQUEST, "INVALID_INPUT", e)
    except MalformedDocumentError as e:
        logger.warning(f"Rejected malformed document: {e.message}")
        return _error_response(
            status.HTTP_422_UNPROCESSABLE_ENTITY, "MALFORMED_DOCUMENT", e
        )
    except PersistenceError as e:
        logger.error(f"Template storage failed: {e.message}")
        return _error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "PERSISTENCE_ERROR", e
        )


@router.get(
    "/{template_id}",
    response_model=TemplateMetadataResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_template(
    template_id: str = Path(..., pattern=TEMPLATE_ID_PATTERN),
    version: str | None = Query(default=None, description="Version label, e.g. 1.0"),
    store: BaseTemplateStore = Depends(get_template_store),
) -> TemplateMetadataResponse:
    """Return the stored metadata record of a template.

    Raises:
        HTTPException: If no complete record exists.
    """
    metadata = await store.get(template_id, version)
    if metadata is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found",
        )
    return TemplateMetadataResponse.model_validate(metadata.model_dump())


@router.get(
    "/{template_id}/download",
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
async def download_template(
    template_id: str = Path(..., pattern=TEMPLATE_ID_PATTERN),
    version: str | None = Query(default=None, description="Version label, e.g. 1.0"),
    store: BaseTemplateStore = Depends(get_template_store),
) -> Response:
    """Download the stored document body of a template.

    Raises:
        HTTPException: If no complete record exists.
    """
    metadata = await store.get(template_id, version)
    content = await store.read_content(template_id, version) if metadata else None
    if metadata is None or content is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Template not found",
        )

    filename = f"{metadata.template_id}_v{metadata.version}.docx"
    return Response(
        content=content,
        media_type=DOCX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
