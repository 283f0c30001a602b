"""
Tenant Notes Backend — Notes Route Handlers
===========================================

What:  CRUD endpoints for notes under /notes.
Why:   Every endpoint requires a bearer token; the caller's tenant comes
       from that token and scopes every operation.
How:   Resolves Identity via get_current_identity, delegates to NoteService.

Status codes:
    POST   /notes        201 Created  (400, 401, 402, 404, 500)
    GET    /notes        200          (401, 500)
    GET    /notes/{id}   200          (401, 404, 500)
    PUT    /notes/{id}   200          (401, 404, 500)
    DELETE /notes/{id}   204          (401, 404, 500)
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.auth.dependencies import get_current_identity
from tenant_notes.auth.tokens import Identity
from tenant_notes.database import get_db_session
from tenant_notes.schemas.common import ErrorResponse
from tenant_notes.schemas.note import NoteCreate, NoteResponse, NoteUpdate
from tenant_notes.services.note_service import note_service

router = APIRouter(
    prefix="/notes",
    tags=["Notes"],
    responses={
        401: {"description": "Missing, invalid or expired token", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=NoteResponse,
    responses={
        400: {"description": "Title or content missing", "model": ErrorResponse},
        402: {"description": "FREE plan note limit reached", "model": ErrorResponse},
        404: {"description": "Caller's tenant no longer exists", "model": ErrorResponse},
    },
    summary="Create a note in the caller's tenant",
)
async def create_note(
    body: NoteCreate,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.create_note(
        db=db,
        identity=identity,
        title=body.title,
        content=body.content,
    )


@router.get(
    "",
    response_model=List[NoteResponse],
    summary="List the caller's tenant notes, most recent first",
)
async def list_notes(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> List[NoteResponse]:
    return await note_service.list_notes(db=db, identity=identity)


@router.get(
    "/{note_id}",
    response_model=NoteResponse,
    responses={404: {"description": "Note not found in the caller's tenant", "model": ErrorResponse}},
    summary="Get a single note by id",
)
async def get_note(
    note_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    return await note_service.get_note(db=db, identity=identity, note_id=note_id)


@router.put(
    "/{note_id}",
    response_model=NoteResponse,
    responses={404: {"description": "Note not found in the caller's tenant", "model": ErrorResponse}},
    summary="Update a note's title and/or content",
)
async def update_note(
    note_id: str,
    body: Optional[NoteUpdate] = None,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> NoteResponse:
    # No body is an empty update; the note is still resolved in the tenant
    body = body or NoteUpdate()
    return await note_service.update_note(
        db=db,
        identity=identity,
        note_id=note_id,
        title=body.title,
        content=body.content,
    )


@router.delete(
    "/{note_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={404: {"description": "Note not found in the caller's tenant", "model": ErrorResponse}},
    summary="Delete a note",
)
async def delete_note(
    note_id: str,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db_session),
) -> Response:
    await note_service.delete_note(db=db, identity=identity, note_id=note_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
