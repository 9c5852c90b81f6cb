"""
SQLModel persistence model for DNS resources.

One row per domain. The row is keyed by the prefixed storage key and holds the
codec envelope in a JSON column (JSONB on PostgreSQL), so the relational
backend stores exactly the same document as every other backend.
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime
from sqlalchemy.dialects.postgresql import JSONB
from sqlmodel import Field, SQLModel


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DNSResource(SQLModel, table=True):
    __tablename__ = "dns_resources"

    storage_key: str = Field(primary_key=True, description="Prefixed storage key, e.g. 'domains:example.com.'")
    domain: str = Field(index=True)
    payload: dict = Field(sa_column=Column(JSON().with_variant(JSONB(), "postgresql"), nullable=False))
    updated_at: datetime = Field(default_factory=_utcnow, sa_column=Column(DateTime(timezone=True), nullable=False))
