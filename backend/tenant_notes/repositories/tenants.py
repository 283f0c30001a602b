"""Tenant lookups."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.models.tenant import Tenant


class TenantRepository:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_update(self, tenant_id: str) -> Optional[Tenant]:
        """
        Load the tenant and lock its row until the transaction ends.

        Note creation holds this lock across count-then-insert, so two
        concurrent creations for one tenant cannot both pass the plan check.
        SQLite has no row locks and ignores FOR UPDATE.
        """
        result = await self.session.execute(
            select(Tenant).where(Tenant.id == tenant_id).with_for_update()
        )
        return result.scalar_one_or_none()

    async def get_by_slug(self, slug: str) -> Optional[Tenant]:
        result = await self.session.execute(select(Tenant).where(Tenant.slug == slug))
        return result.scalar_one_or_none()
