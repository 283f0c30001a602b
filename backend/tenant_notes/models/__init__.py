"""
ORM models. Importing this package registers every table with `Base.metadata`,
which Alembic and the test fixtures rely on.
"""

from tenant_notes.models.note import Note
from tenant_notes.models.tenant import Plan, Tenant
from tenant_notes.models.user import Role, User

__all__ = ["Note", "Plan", "Role", "Tenant", "User"]
