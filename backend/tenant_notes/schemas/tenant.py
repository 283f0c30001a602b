"""Tenant response and upgrade result schemas."""

from datetime import datetime

from tenant_notes.models.tenant import Plan
from tenant_notes.schemas.common import CamelModel


class TenantResponse(CamelModel):
    id: str
    name: str
    slug: str
    plan: Plan
    created_at: datetime
    updated_at: datetime


class UpgradeResponse(CamelModel):
    message: str
    tenant: TenantResponse
