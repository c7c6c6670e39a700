"""Version assignment for newly ingested templates.

Every ingestion starts a new template lineage: a fresh random identifier
at the initial version. Uploading a new version of an existing lineage
is not supported.
"""

import uuid
from dataclasses import dataclass

INITIAL_VERSION = "1.0"


@dataclass(frozen=True)
class VersionAssignment:
    """Identity allocated to a template before it is persisted.

    Attributes:
        template_id: 32-character hex identifier from a random UUID4.
        version: Version label within the lineage.
    """

    template_id: str
    version: str


def generate_template_id() -> str:
    """Generate a new template identifier."""
    return uuid.uuid4().hex


def assign_initial_version() -> VersionAssignment:
    """Allocate the identity of a brand-new template lineage."""
    return VersionAssignment(template_id=generate_template_id(), version=INITIAL_VERSION)
