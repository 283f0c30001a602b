"""
Tenant Notes Backend — Note Schemas
===================================

What:  Request bodies for creating/updating notes and the note response shape.
Why:   `tenant_id` and `owner_id` never appear in request bodies. They are
       always taken from the caller's token, so a client cannot plant a note
       in another tenant.
"""

from datetime import datetime
from typing import Optional

from pydantic import Field

from tenant_notes.schemas.common import CamelModel


class NoteCreate(CamelModel):
    title: Optional[str] = Field(default=None, description="Note title (required)")
    content: Optional[str] = Field(default=None, description="Note body (required)")


class NoteUpdate(CamelModel):
    """Fields that are present overwrite the stored values; absent ones are kept."""
    title: Optional[str] = Field(default=None)
    content: Optional[str] = Field(default=None)


class NoteResponse(CamelModel):
    id: str = Field(description="Opaque note identifier")
    title: str
    content: str
    tenant_id: str
    owner_id: Optional[str] = Field(default=None, description="Creating user; null once that user is deleted")
    created_at: datetime
    updated_at: datetime
