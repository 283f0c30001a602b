"""
Tenant Notes Backend — Login Route
==================================

What:  POST /login exchanges email + password for a bearer token.
Who:   Unauthenticated clients.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.auth.tokens import TokenCodec, get_token_codec
from tenant_notes.database import get_db_session
from tenant_notes.schemas.auth import LoginRequest, LoginResponse
from tenant_notes.schemas.common import ErrorResponse
from tenant_notes.services.auth_service import auth_service

router = APIRouter(tags=["Auth"])


@router.post(
    "/login",
    response_model=LoginResponse,
    responses={
        400: {"description": "Email or password missing", "model": ErrorResponse},
        401: {"description": "Invalid credentials", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Log in and receive a bearer token",
)
async def login(
    body: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
    codec: TokenCodec = Depends(get_token_codec),
) -> LoginResponse:
    return await auth_service.login(db=db, codec=codec, email=body.email, password=body.password)
