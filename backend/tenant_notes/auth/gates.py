"""
Auth gate and role gate as plain functions.

They know nothing about HTTP, so they can be composed and unit-tested
directly; `tenant_notes.auth.dependencies` adapts them to FastAPI.

    authenticate(token, codec)      -> Identity     (401 on failure)
    require_role(identity, role)    -> None         (401 / 403 on failure)
"""

from typing import Optional

from tenant_notes.auth.tokens import Identity, TokenCodec
from tenant_notes.exceptions import AuthenticationError, AuthorizationError
from tenant_notes.models.user import Role


def authenticate(token: Optional[str], codec: TokenCodec) -> Identity:
    if not token:
        raise AuthenticationError("Missing token")
    return codec.verify(token)


def require_role(identity: Optional[Identity], role: Role) -> None:
    # No identity means the auth gate did not run first
    if identity is None:
        raise AuthenticationError("Unauthorized")
    if identity.role != role:
        raise AuthorizationError(
            "Forbidden",
            context={"required_role": role.value, "actual_role": identity.role.value},
        )
