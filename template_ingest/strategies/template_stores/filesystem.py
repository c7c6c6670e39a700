"""Filesystem template store strategy.

Stores each template as two files under the storage root:

    {template_id}_v{version}.docx   document body
    {template_id}.json              metadata record

The metadata file is written last and acts as the commit marker: a
template is only readable once its metadata exists and its body is in
place.
"""

import asyncio
import logging
import os
import tempfile
from pathlib import Path

from pydantic import ValidationError

from template_ingest.interfaces.template import BaseTemplateStore, PersistenceError
from template_ingest.strategies.template_engine.models import TemplateMetadata

logger = logging.getLogger(__name__)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    """Write bytes to ``path`` through a synced temp file in the same directory."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        mode="wb",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as handle:
        temp_path = Path(handle.name)
        try:
            handle.write(data)
            handle.flush()
            os.fsync(handle.fileno())
        except Exception:
            handle.close()
            temp_path.unlink(missing_ok=True)
            raise
    try:
        temp_path.replace(path)
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def body_filename(template_id: str, version: str) -> str:
    """Return the file name of a stored document body."""
    return f"{template_id}_v{version}.docx"


def discard_file(path: Path) -> None:
    """Remove a file written by a failed persist, logging any failure."""
    try:
        path.unlink(missing_ok=True)
    except OSError as e:
        logger.error(f"Could not remove orphaned template body {path}: {e}")


class FileSystemTemplateStore(BaseTemplateStore):
    """Stores template bodies and JSON metadata records on local disk."""

    def __init__(self, storage_dir: Path) -> None:
        """Initialize the store.

        Args:
            storage_dir: Root directory for bodies and metadata.
        """
        self._storage_dir = Path(storage_dir)
        logger.info(f"FileSystemTemplateStore initialized: storage_dir={self._storage_dir}")

    @property
    def storage_dir(self) -> Path:
        return self._storage_dir

    def ensure_storage(self) -> None:
        self._storage_dir.mkdir(parents=True, exist_ok=True)

    def body_path(self, template_id: str, version: str) -> Path:
        return self._storage_dir / body_filename(template_id, version)

    def metadata_path(self, template_id: str) -> Path:
        return self._storage_dir / f"{template_id}.json"

    async def persist(self, metadata: TemplateMetadata, content: bytes) -> TemplateMetadata:
        body_path = self.body_path(metadata.template_id, metadata.version)
        context = {"template_id": metadata.template_id, "version": metadata.version}
        if body_path.exists() or self.metadata_path(metadata.template_id).exists():
            raise PersistenceError("Template already exists", context=context)

        loop = asyncio.get_running_loop()
        try:
            self.ensure_storage()
            await loop.run_in_executor(None, atomic_write_bytes, body_path, content)
        except OSError as e:
            logger.error(f"Failed to write template body {body_path}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to write template body: {e}", context=context) from e

        try:
            await loop.run_in_executor(None, self._write_metadata, metadata)
        except Exception as e:
            logger.error(
                f"Failed to write metadata for template {metadata.template_id}: {e}",
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

    def _write_metadata(self, metadata: TemplateMetadata) -> None:
        payload = metadata.model_dump_json(by_alias=True, indent=2)
        atomic_write_bytes(self.metadata_path(metadata.template_id), payload.encode("utf-8"))

    async def get(self, template_id: str, version: str | None = None) -> TemplateMetadata | None:
        path = self.metadata_path(template_id)
        if not path.is_file():
            return None

        try:
            metadata = TemplateMetadata.model_validate_json(path.read_bytes())
        except (OSError, ValidationError) as e:
            logger.warning(f"Unreadable metadata for template {template_id}: {e}")
            return None

        if version is not None and metadata.version != version:
            return None

        if not self.body_path(metadata.template_id, metadata.version).is_file():
            logger.warning(f"Metadata without body for template {template_id}")
            return None

        return metadata

    async def read_content(self, template_id: str, version: str | None = None) -> bytes | None:
        metadata = await self.get(template_id, version)
        if metadata is None:
            return None
        body_path = self.body_path(metadata.template_id, metadata.version)
        try:
            return await asyncio.get_running_loop().run_in_executor(None, body_path.read_bytes)
        except FileNotFoundError:
            return None
