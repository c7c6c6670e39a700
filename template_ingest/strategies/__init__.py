"""Concrete strategy implementations.

- template_engine: tag extraction, reconciliation, versioning, ingestion
- template_stores: filesystem and database template stores
"""
