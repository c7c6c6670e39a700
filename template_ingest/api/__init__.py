"""FastAPI routers and dependencies."""

from template_ingest.api.deps import get_ingestor, get_template_store
from template_ingest.api.templates import router as templates_router

__all__ = [
    "get_ingestor",
    "get_template_store",
    "templates_router",
]
