"""
FastAPI dependencies wiring the auth and role gates into routes.

Usage:
    @router.get("/notes")
    async def list_notes(identity: Identity = Depends(get_current_identity)): ...

    @router.post("/tenants/{slug}/upgrade")
    async def upgrade(identity: Identity = Depends(requires_role(Role.ADMIN))): ...
"""

from typing import Callable, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tenant_notes.auth.gates import authenticate, require_role
from tenant_notes.auth.tokens import Identity, TokenCodec, get_token_codec
from tenant_notes.models.user import Role

# auto_error=False: a missing or non-Bearer header must produce our own 401
# body, not FastAPI's default 403.
bearer = HTTPBearer(auto_error=False)


def get_current_identity(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    codec: TokenCodec = Depends(get_token_codec),
) -> Identity:
    token = credentials.credentials if credentials else None
    return authenticate(token, codec)


def requires_role(role: Role) -> Callable[..., Identity]:
    """Dependency factory: the auth gate followed by an exact role match."""

    def role_checker(identity: Identity = Depends(get_current_identity)) -> Identity:
        require_role(identity, role)
        return identity

    return role_checker
