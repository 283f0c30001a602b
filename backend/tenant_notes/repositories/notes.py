"""
Tenant Notes Backend — Tenant-Scoped Note Repository
====================================================

What:  Every note query the application runs.
Why:   Tenant isolation is enforced here, in one place. The repository is
       constructed with a tenant id and every statement it emits carries
       `notes.tenant_id = :tenant_id`. There is no method that looks a note
       up by id alone.
Who:   NoteService, one repository per request, built from the caller's token.

Query plans:
    list_recent: WHERE tenant_id = :t ORDER BY created_at DESC
                 → idx_notes_tenant_created_at
    get:         WHERE id = :id AND tenant_id = :t
                 → primary key, tenant checked on the row
    count:       SELECT count(id) WHERE tenant_id = :t
                 → idx_notes_tenant_id
"""

from typing import List, Optional

from sqlalchemy import Select, desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.models.note import Note


class TenantNoteRepository:

    def __init__(self, session: AsyncSession, tenant_id: str):
        self.session = session
        self.tenant_id = tenant_id

    def _scoped(self) -> Select:
        return select(Note).where(Note.tenant_id == self.tenant_id)

    async def list_recent(self) -> List[Note]:
        """All of the tenant's notes, most recent first."""
        result = await self.session.execute(
            self._scoped().order_by(desc(Note.created_at))
        )
        return list(result.scalars().all())

    async def get(self, note_id: str) -> Optional[Note]:
        """The note with this id, only if it belongs to the tenant."""
        result = await self.session.execute(
            self._scoped().where(Note.id == note_id)
        )
        return result.scalar_one_or_none()

    async def count(self) -> int:
        """Live note count, used by the plan admission check."""
        result = await self.session.execute(
            select(func.count(Note.id)).where(Note.tenant_id == self.tenant_id)
        )
        return result.scalar() or 0

    async def add(self, *, title: str, content: str, owner_id: Optional[str]) -> Note:
        """Insert a note owned by this tenant. The tenant id is never caller-supplied."""
        note = Note(
            title=title,
            content=content,
            tenant_id=self.tenant_id,
            owner_id=owner_id,
        )
        self.session.add(note)
        await self.session.flush()
        await self.session.refresh(note)
        return note

    async def update(
        self,
        note: Note,
        *,
        title: Optional[str] = None,
        content: Optional[str] = None,
    ) -> Note:
        """Overwrite whichever of title/content is given."""
        if note.tenant_id != self.tenant_id:
            raise ValueError("note does not belong to this repository's tenant")
        if title is not None:
            note.title = title
        if content is not None:
            note.content = content
        await self.session.flush()
        await self.session.refresh(note)
        return note

    async def delete(self, note: Note) -> None:
        if note.tenant_id != self.tenant_id:
            raise ValueError("note does not belong to this repository's tenant")
        await self.session.delete(note)
        await self.session.flush()
