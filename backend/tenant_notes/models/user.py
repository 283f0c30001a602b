"""
Tenant Notes Backend — User SQLAlchemy Model
============================================

What:  ORM model for the `users` table.
Who:   Read by the login service; referenced by notes through `owner_id`.

Constraints:
    - email is globally unique (login looks users up by email alone)
    - tenant_id is required; deleting a tenant is RESTRICTed while users exist
    - password holds a bcrypt hash, never the plain text
"""

import enum

from sqlalchemy import Enum, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from tenant_notes.database import Base
from tenant_notes.models.mixins import IdMixin, TimestampMixin


class Role(str, enum.Enum):
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class User(IdMixin, TimestampMixin, Base):
    """A person who logs in and acts within exactly one tenant."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[Role] = mapped_column(
        Enum(Role, name="role"),
        nullable=False,
        default=Role.MEMBER,
    )
    tenant_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("tenants.id", ondelete="RESTRICT", onupdate="CASCADE"),
        nullable=False,
    )

    __table_args__ = (
        Index("idx_users_tenant_id", "tenant_id"),
    )

    def __repr__(self) -> str:
        # password deliberately omitted
        return f"<User(id={self.id}, email='{self.email}', role={self.role.value})>"
