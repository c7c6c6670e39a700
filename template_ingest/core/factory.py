"""Component Factory for strategy instantiation.

The Factory Pattern allows the application to instantiate
different strategy implementations at runtime based on
configuration or environment variables.
"""

import logging

from template_ingest.core.config import Settings, get_settings
from template_ingest.interfaces.template import BaseTagExtractor, BaseTemplateStore
from template_ingest.strategies.template_engine import ContentControlTagExtractor, TemplateIngestor
from template_ingest.strategies.template_stores import (
    DatabaseTemplateStore,
    FileSystemTemplateStore,
)

logger = logging.getLogger(__name__)


class ComponentFactory:
    """Factory for creating component instances based on configuration.

    Example:
        ```python
        settings = get_settings()
        factory = ComponentFactory(settings)

        ingestor = factory.get_ingestor()
        result = await ingestor.ingest(content, expected_tokens)
        ```
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the factory with optional settings.

        Args:
            settings: Application settings. If None, uses global settings.
        """
        self._settings = settings or get_settings()
        self._extractor_cache: BaseTagExtractor | None = None
        self._store_cache: BaseTemplateStore | None = None

    def get_tag_extractor(self) -> BaseTagExtractor:
        """Get the tag extractor instance."""
        if self._extractor_cache is None:
            self._extractor_cache = ContentControlTagExtractor()
        return self._extractor_cache

    def get_template_store(self, store_type: str | None = None) -> BaseTemplateStore:
        """Get a template store instance based on the specified type.

        Args:
            store_type: The store type to instantiate. If None, uses settings.

        Returns:
            A BaseTemplateStore implementation instance.

        Raises:
            ValueError: If the store type is unknown.
        """
        if self._store_cache is None or store_type is not None:
            store_type = store_type or self._settings.template_store_type

            logger.info(f"Instantiating template store: {store_type}")

            match store_type:
                case "filesystem":
                    self._store_cache = FileSystemTemplateStore(
                        storage_dir=self._settings.template_storage_dir,
                    )
                case "database":
                    from template_ingest.db.session import get_session_maker

                    self._store_cache = DatabaseTemplateStore(
                        storage_dir=self._settings.template_storage_dir,
                        session_maker=get_session_maker(self._settings),
                    )
                case _:
                    raise ValueError(
                        f"Unknown template store type: {store_type}. "
                        f"Valid options: 'filesystem', 'database'"
                    )

        return self._store_cache

    def get_ingestor(self) -> TemplateIngestor:
        """Get a template ingestor wired to the configured strategies."""
        return TemplateIngestor(
            extractor=self.get_tag_extractor(),
            store=self.get_template_store(),
            default_uploader=self._settings.default_uploader,
        )
