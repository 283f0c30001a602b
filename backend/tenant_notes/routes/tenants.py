"""
Tenant Notes Backend — Tenant Routes
====================================

What:  POST /tenants/{slug}/upgrade moves a tenant from FREE to PRO.
Who:   ADMIN users, for their own tenant only.

Gate order: bearer token (401) → ADMIN role (403) → slug lookup (404)
→ same-tenant check (403).
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.auth.dependencies import requires_role
from tenant_notes.auth.tokens import Identity
from tenant_notes.database import get_db_session
from tenant_notes.models.user import Role
from tenant_notes.schemas.common import ErrorResponse
from tenant_notes.schemas.tenant import UpgradeResponse
from tenant_notes.services.tenant_service import tenant_service

router = APIRouter(prefix="/tenants", tags=["Tenants"])


@router.post(
    "/{slug}/upgrade",
    response_model=UpgradeResponse,
    responses={
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        403: {"description": "Not an ADMIN, or not the caller's tenant", "model": ErrorResponse},
        404: {"description": "Tenant not found", "model": ErrorResponse},
        500: {"description": "Server error", "model": ErrorResponse},
    },
    summary="Upgrade the caller's tenant to the PRO plan",
    description="Idempotent: upgrading a tenant that is already PRO succeeds with message 'Already PRO'.",
)
async def upgrade_tenant(
    slug: str,
    identity: Identity = Depends(requires_role(Role.ADMIN)),
    db: AsyncSession = Depends(get_db_session),
) -> UpgradeResponse:
    return await tenant_service.upgrade(db=db, identity=identity, slug=slug)
