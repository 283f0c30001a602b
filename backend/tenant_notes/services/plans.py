"""
Plan admission check.

FREE tenants may hold at most `limit` live notes; PRO tenants are
unlimited. The count is of live rows, so deleting a note frees a slot.
"""

import logging

from tenant_notes.exceptions import QuotaExceededError
from tenant_notes.models.tenant import Plan, Tenant

logger = logging.getLogger(__name__)


def check_note_admission(tenant: Tenant, note_count: int, limit: int) -> None:
    """Raise QuotaExceededError if `tenant` may not create another note."""
    if tenant.plan != Plan.FREE:
        return
    if note_count >= limit:
        logger.info(
            "Plan limit reached for tenant %s: %d/%d notes",
            tenant.id,
            note_count,
            limit,
        )
        raise QuotaExceededError(limit=limit, context={"tenant_id": tenant.id})
