"""
Tenant Notes Backend — Tenant SQLAlchemy Model
==============================================

What:  ORM model for the `tenants` table.
Who:   Read by the plan admission check and the upgrade service.
When:  Rows are provisioned outside this service; the API only reads them
       and flips `plan` from FREE to PRO.

Table Design:
    - slug: unique, human-readable identifier used in upgrade URLs
    - plan: FREE or PRO; only the FREE → PRO transition exists
"""

import enum

from sqlalchemy import Enum, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from tenant_notes.database import Base
from tenant_notes.models.mixins import IdMixin, TimestampMixin


class Plan(str, enum.Enum):
    FREE = "FREE"
    PRO = "PRO"


class Tenant(IdMixin, TimestampMixin, Base):
    """An organisation that owns users and notes."""

    __tablename__ = "tenants"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    plan: Mapped[Plan] = mapped_column(
        Enum(Plan, name="plan"),
        nullable=False,
        default=Plan.FREE,
    )

    __table_args__ = (
        Index("idx_tenants_slug", "slug"),
    )

    def __repr__(self) -> str:
        return f"<Tenant(id={self.id}, slug='{self.slug}', plan={self.plan.value})>"
