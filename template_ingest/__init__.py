"""Template ingestion and token validation service."""
