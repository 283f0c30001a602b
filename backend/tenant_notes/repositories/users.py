"""User lookups."""

from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.models.user import User


class UserRepository:

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_email(self, email: str) -> Optional[User]:
        # Exact match; emails are unique across all tenants
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()
