"""
Tenant Notes Backend — Note SQLAlchemy Model
============================================

What:  ORM model representing the `notes` table.
How:   Inherits from the shared DeclarativeBase; Alembic reads this for migrations.
Who:   Accessed only through TenantNoteRepository, which always filters on
       tenant_id.

Table Design Rationale:
    - tenant_id: required owner; every read and write is scoped by it
    - owner_id: the creating user, nullable and SET NULL on user deletion so
      notes outlive the people who wrote them
    - created_at: listing is "most recent first", so it is indexed together
      with tenant_id

Query Patterns:
    - List a tenant's notes: WHERE tenant_id = :t ORDER BY created_at DESC
    - Get/update/delete: WHERE id = :id AND tenant_id = :t
    - Plan admission: SELECT count(id) WHERE tenant_id = :t
"""

from typing import Optional

from sqlalchemy import ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from tenant_notes.database import Base
from tenant_notes.models.mixins import IdMixin, TimestampMixin


class Note(IdMixin, TimestampMixin, Base):
    """A note belonging to one tenant."""

    __tablename__ = "notes"

    title: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
    )
    owner_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        ForeignKey("users.id", ondelete="SET NULL", onupdate="CASCADE"),
        nullable=True,
        default=None,
    )

    __table_args__ = (
        Index("idx_notes_tenant_id", "tenant_id"),
        Index("idx_notes_owner_id", "owner_id"),
        Index("idx_notes_tenant_created_at", "tenant_id", "created_at"),
    )

    def __repr__(self) -> str:
        return f"<Note(id={self.id}, tenant_id={self.tenant_id}, created_at='{self.created_at}')>"
