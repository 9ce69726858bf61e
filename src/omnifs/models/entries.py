"""Entry model for the database backend.

Provides the ``EntryBase`` non-table base class.  Subclass with
``table=True`` and a custom ``__tablename__`` to use a different table
name per backend.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, LargeBinary, UniqueConstraint
from sqlmodel import Field, SQLModel


class EntryBase(SQLModel):
    """Base fields for a stored file or directory."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), primary_key=True)
    namespace: str = Field(index=True)
    path: str = Field(index=True)
    parent_path: str = Field(default="", index=True)
    name: str = Field(default="")
    is_directory: bool = Field(default=False)
    content: bytes | None = Field(default=None, sa_type=LargeBinary)
    size_bytes: int = Field(default=0)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )
    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_type=DateTime(timezone=True),
    )


class Entry(EntryBase, table=True):
    """Default entry table: ``omnifs_entries``."""

    __tablename__ = "omnifs_entries"
    __table_args__ = (UniqueConstraint("namespace", "path"),)
