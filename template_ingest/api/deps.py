"""FastAPI dependencies for dependency injection.

Components are built once in the application lifespan and kept on
``app.state``; these dependencies hand them to routes.
"""

import logging

from fastapi import HTTPException, Request, status

from template_ingest.interfaces.template import BaseTemplateStore
from template_ingest.strategies.template_engine import TemplateIngestor

logger = logging.getLogger(__name__)


async def get_ingestor(request: Request) -> TemplateIngestor:
    """Dependency for getting the template ingestor.

    Raises:
        HTTPException: If the application has not finished starting up.
    """
    ingestor: TemplateIngestor | None = getattr(request.app.state, "ingestor", None)
    if ingestor is None:
        logger.error("Template ingestor requested before application startup")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Service is starting up",
        )
    return ingestor


async def get_template_store(request: Request) -> BaseTemplateStore:
    """Dependency for getting the template store."""
    ingestor = await get_ingestor(request)
    return ingestor.store
