"""
Tenant Notes Backend — Tenant Service (Plan Upgrade)
====================================================

What:  Upgrades a tenant from FREE to PRO.
Who:   Called by POST /tenants/{slug}/upgrade, after the ADMIN role gate.

Rules:
    - The tenant is looked up by slug (404 if unknown)
    - An admin may only upgrade their own tenant: the resolved tenant id must
      equal the token's tenant id (403 otherwise)
    - Upgrading a PRO tenant is a successful no-op ("Already PRO")
    - There is no downgrade
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.auth.tokens import Identity
from tenant_notes.exceptions import AuthorizationError, DatabaseError, NotFoundError
from tenant_notes.models.tenant import Plan
from tenant_notes.repositories.tenants import TenantRepository
from tenant_notes.schemas.tenant import TenantResponse, UpgradeResponse

logger = logging.getLogger(__name__)


class TenantService:

    async def upgrade(self, db: AsyncSession, identity: Identity, slug: str) -> UpgradeResponse:
        """
        Raises:
            NotFoundError: no tenant with this slug (→ 404)
            AuthorizationError: slug belongs to another tenant (→ 403)
            DatabaseError: query failed (→ 500)
        """
        try:
            tenant = await TenantRepository(db).get_by_slug(slug)
            if tenant is None:
                raise NotFoundError("Tenant not found", resource="tenant", resource_id=slug)

            if tenant.id != identity.tenant_id:
                logger.warning(
                    "User %s (tenant %s) attempted to upgrade tenant %s",
                    identity.user_id,
                    identity.tenant_id,
                    tenant.id,
                )
                raise AuthorizationError("Cannot upgrade another tenant")

            if tenant.plan == Plan.PRO:
                return UpgradeResponse(message="Already PRO", tenant=TenantResponse.model_validate(tenant))

            tenant.plan = Plan.PRO
            await db.flush()
            await db.refresh(tenant)
        except SQLAlchemyError as e:
            logger.error("Database error upgrading tenant %s: %s", slug, str(e), exc_info=True)
            raise DatabaseError(context={"operation": "upgrade", "slug": slug})

        logger.info("Tenant %s upgraded to PRO by user %s", tenant.id, identity.user_id)
        return UpgradeResponse(message="Upgraded to PRO", tenant=TenantResponse.model_validate(tenant))


tenant_service = TenantService()
