"""Database models using SQLModel.

Defines the metadata table backing the database template store.
"""

import datetime

from sqlalchemy import Column, DateTime, Enum as SQLEnum, String
from sqlmodel import Field, SQLModel

from template_ingest.strategies.template_engine.models import TemplateMetadata, WorkflowState


class TemplateRecord(SQLModel, table=True):
    """Metadata record of a stored template version.

    The document body lives on disk at ``file_path``; the row is only
    committed once the body is in place.
    """

    __tablename__ = "template_records"

    template_id: str = Field(sa_column=Column(String(64), primary_key=True))
    version: str = Field(max_length=32)
    uploaded_by: str = Field(max_length=255)
    tenant: str | None = Field(default=None, max_length=255, index=True)
    uploaded_on: datetime.datetime = Field(
        sa_column=Column(DateTime(timezone=True), nullable=False),
    )
    workflow_state: WorkflowState = Field(
        default=WorkflowState.DRAFT,
        sa_column=Column(
            SQLEnum(WorkflowState, values_callable=lambda e: [m.value for m in e]),
            nullable=False,
        ),
    )
    file_path: str = Field(max_length=1024)

    @classmethod
    def from_metadata(cls, metadata: TemplateMetadata, file_path: str) -> "TemplateRecord":
        return cls(
            template_id=metadata.template_id,
            version=metadata.version,
            uploaded_by=metadata.uploaded_by,
            tenant=metadata.tenant,
            uploaded_on=metadata.uploaded_on,
            workflow_state=metadata.workflow_state,
            file_path=file_path,
        )

    def to_metadata(self) -> TemplateMetadata:
        uploaded_on = self.uploaded_on
        # SQLite drops tzinfo on the way back
        if uploaded_on.tzinfo is None:
            uploaded_on = uploaded_on.replace(tzinfo=datetime.timezone.utc)
        return TemplateMetadata(
            template_id=self.template_id,
            version=self.version,
            uploaded_by=self.uploaded_by,
            tenant=self.tenant,
            uploaded_on=uploaded_on,
            workflow_state=self.workflow_state,
        )
