"""
Tenant Notes Backend — Note Service (Business Logic)
====================================================

What:  Create, list, read, update and delete notes within the caller's tenant.
Why:   Keeps plan enforcement and tenant scoping out of the route handlers.
How:   Builds a TenantNoteRepository from the caller's Identity for each call.
       The tenant id always comes from the verified token, never from the
       request body or path.

Creation Flow (POST /notes):
    ┌───────────┐    ┌──────────────┐    ┌──────────────┐    ┌──────────┐
    │ Validate  │───▶│ Lock tenant  │───▶│ Plan check   │───▶│ Insert   │
    │ title/body│    │ (FOR UPDATE) │    │ (count rows) │    │ note     │
    └───────────┘    └──────────────┘    └──────────────┘    └──────────┘

    The tenant row lock is held until the request transaction commits, so
    concurrent creations for the same tenant are serialized and a FREE
    tenant cannot end up over its limit.

Error Handling Strategy:
    Application exceptions propagate unchanged. SQLAlchemy errors are logged
    with detail and re-raised as DatabaseError, which the global handler
    turns into a generic 500.
"""

import logging
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.auth.tokens import Identity
from tenant_notes.config import settings
from tenant_notes.exceptions import DatabaseError, NotFoundError, ValidationError
from tenant_notes.models.note import Note
from tenant_notes.repositories.notes import TenantNoteRepository
from tenant_notes.repositories.tenants import TenantRepository
from tenant_notes.schemas.note import NoteResponse
from tenant_notes.services.plans import check_note_admission

logger = logging.getLogger(__name__)


class NoteService:
    """
    Stateless; receives the session and identity on every call.

    Ownership (owner_id) is recorded on creation but not checked on update
    or delete: any member of the tenant may edit any of its notes.
    """

    def __init__(self, free_plan_note_limit: Optional[int] = None):
        self._free_plan_note_limit = free_plan_note_limit

    @property
    def free_plan_note_limit(self) -> int:
        if self._free_plan_note_limit is not None:
            return self._free_plan_note_limit
        return settings.free_plan_note_limit

    async def create_note(
        self,
        db: AsyncSession,
        identity: Identity,
        title: Optional[str],
        content: Optional[str],
    ) -> NoteResponse:
        """
        Create a note after the plan admission check.

        Raises:
            ValidationError: title or content missing (→ 400)
            NotFoundError: the token's tenant no longer exists (→ 404)
            QuotaExceededError: FREE plan limit reached (→ 402)
            DatabaseError: query failed (→ 500)
        """
        if not title or not content:
            raise ValidationError("Title and content are required")

        try:
            tenant = await TenantRepository(db).get_for_update(identity.tenant_id)
            if tenant is None:
                raise NotFoundError("Tenant not found", resource="tenant", resource_id=identity.tenant_id)

            notes = TenantNoteRepository(db, tenant.id)
            check_note_admission(tenant, await notes.count(), self.free_plan_note_limit)

            note = await notes.add(title=title, content=content, owner_id=identity.user_id)
        except SQLAlchemyError as e:
            logger.error("Database error creating note for tenant %s: %s", identity.tenant_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "create_note"})

        logger.info("Note %s created in tenant %s by user %s", note.id, note.tenant_id, identity.user_id)
        return NoteResponse.model_validate(note)

    async def list_notes(self, db: AsyncSession, identity: Identity) -> List[NoteResponse]:
        try:
            notes = await TenantNoteRepository(db, identity.tenant_id).list_recent()
        except SQLAlchemyError as e:
            logger.error("Database error listing notes for tenant %s: %s", identity.tenant_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "list_notes"})
        return [NoteResponse.model_validate(note) for note in notes]

    async def get_note(self, db: AsyncSession, identity: Identity, note_id: str) -> NoteResponse:
        """
        Raises:
            NotFoundError: no note with this id in the caller's tenant,
                including notes that exist in a different tenant.
        """
        note = await self._resolve(db, identity, note_id)
        return NoteResponse.model_validate(note)

    async def update_note(
        self,
        db: AsyncSession,
        identity: Identity,
        note_id: str,
        title: Optional[str],
        content: Optional[str],
    ) -> NoteResponse:
        note = await self._resolve(db, identity, note_id)
        try:
            note = await TenantNoteRepository(db, identity.tenant_id).update(
                note, title=title, content=content
            )
        except SQLAlchemyError as e:
            logger.error("Database error updating note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "update_note", "note_id": note_id})
        return NoteResponse.model_validate(note)

    async def delete_note(self, db: AsyncSession, identity: Identity, note_id: str) -> None:
        note = await self._resolve(db, identity, note_id)
        try:
            await TenantNoteRepository(db, identity.tenant_id).delete(note)
        except SQLAlchemyError as e:
            logger.error("Database error deleting note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "delete_note", "note_id": note_id})
        logger.info("Note %s deleted from tenant %s by user %s", note_id, identity.tenant_id, identity.user_id)

    async def _resolve(self, db: AsyncSession, identity: Identity, note_id: str) -> Note:
        """Fetch by (id, tenant_id) or raise NotFoundError."""
        try:
            note = await TenantNoteRepository(db, identity.tenant_id).get(note_id)
        except SQLAlchemyError as e:
            logger.error("Database error fetching note %s: %s", note_id, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "get_note", "note_id": note_id})
        if note is None:
            raise NotFoundError("Not found", resource="note", resource_id=note_id)
        return note


note_service = NoteService()
