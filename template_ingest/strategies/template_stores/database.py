"""Database template store strategy.

Document bodies are written to disk exactly as the filesystem store does;
metadata records are rows in the ``template_records`` table. The row is
committed only after the body is in place, so the committed row is the
visibility marker for a stored template.
"""

import asyncio
import logging
from pathlib import Path

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from sqlmodel import select

from template_ingest.db.models import TemplateRecord
from template_ingest.interfaces.template import BaseTemplateStore, PersistenceError
from template_ingest.strategies.template_engine.models import TemplateMetadata
from template_ingest.strategies.template_stores.filesystem import (
    atomic_write_bytes,
    body_filename,
    discard_file,
)

logger = logging.getLogger(__name__)


class DatabaseTemplateStore(BaseTemplateStore):
    """Stores template bodies on disk and metadata records in SQL."""

    def __init__(
        self,
        storage_dir: Path,
        session_maker: async_sessionmaker[AsyncSession],
    ) -> None:
        """Initialize the store.

        Args:
            storage_dir: Root directory for document bodies.
            session_maker: Async session factory bound to the metadata database.
        """
        self._storage_dir = Path(storage_dir)
        self._session_maker = session_maker
        logger.info(f"DatabaseTemplateStore initialized: storage_dir={self._storage_dir}")

    def ensure_storage(self) -> None:
        self._storage_dir.mkdir(parents=True, exist_ok=True)

    def body_path(self, template_id: str, version: str) -> Path:
        return self._storage_dir / body_filename(template_id, version)

    async def persist(self, metadata: TemplateMetadata, content: bytes) -> TemplateMetadata:
        body_path = self.body_path(metadata.template_id, metadata.version)
        context = {"template_id": metadata.template_id, "version": metadata.version}
        if body_path.exists():
            raise PersistenceError("Template already exists", context=context)

        loop = asyncio.get_running_loop()
        try:
            self.ensure_storage()
            await loop.run_in_executor(None, atomic_write_bytes, body_path, content)
        except OSError as e:
            logger.error(f"Failed to write template body {body_path}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to write template body: {e}", context=context) from e

        # Connection errors from the driver are not always wrapped by SQLAlchemy.
        try:
            async with self._session_maker() as session:
                session.add(TemplateRecord.from_metadata(metadata, str(body_path)))
                await session.commit()
        except Exception as e:
            logger.error(
                f"Failed to commit metadata for template {metadata.template_id}: {e}",
                exc_info=True,
            )
            discard_file(body_path)
            raise PersistenceError(
                f"Failed to write template metadata: {e}", context=context
            ) from e

        logger.info(
            f"Template stored: {metadata.template_id} v{metadata.version} "
            f"({len(content)} bytes)"
        )
        return metadata

    async def _load_record(self, template_id: str, version: str | None) -> TemplateRecord | None:
        query = select(TemplateRecord).where(TemplateRecord.template_id == template_id)
        if version is not None:
            query = query.where(TemplateRecord.version == version)

        async with self._session_maker() as session:
            result = await session.execute(query)
            record = result.scalar_one_or_none()

        if record is None:
            return None
        if not Path(record.file_path).is_file():
            logger.warning(f"Metadata without body for template {template_id}")
            return None
        return record

    async def get(self, template_id: str, version: str | None = None) -> TemplateMetadata | None:
        record = await self._load_record(template_id, version)
        return record.to_metadata() if record else None

    async def read_content(self, template_id: str, version: str | None = None) -> bytes | None:
        record = await self._load_record(template_id, version)
        if record is None:
            return None
        try:
            return await asyncio.get_running_loop().run_in_executor(
                None, Path(record.file_path).read_bytes
            )
        except FileNotFoundError:
            return None
