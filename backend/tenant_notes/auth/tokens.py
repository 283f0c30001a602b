"""
Tenant Notes Backend — Bearer Token Codec
=========================================

What:  Issues and verifies the signed, stateless session tokens.
Why:   The token is the trust boundary. Authenticated requests never touch
       the database to find out who the caller is.
How:   HS256 JWT via python-jose. Payload carries exactly the three claims the
       handlers need plus iat/exp:

           {"userId": "...", "tenantId": "...", "role": "ADMIN", "iat": ..., "exp": ...}

Lifecycle:
    One TokenCodec is built from settings the first time it is requested
    (during startup) and reused for every request. Resolving the secret at
    that point is what makes a missing JWT_SECRET fail at boot rather than
    on the first login.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any, Dict

from jose import JWTError, jwt

from tenant_notes.config import Settings, settings
from tenant_notes.exceptions import AuthenticationError
from tenant_notes.models.user import Role


@dataclass(frozen=True)
class Identity:
    """Who is calling, as asserted by a verified token."""
    user_id: str
    tenant_id: str
    role: Role


@dataclass(frozen=True)
class TokenCodec:
    secret: str
    algorithm: str = "HS256"
    expires_in: timedelta = timedelta(days=7)

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenCodec":
        return cls(
            secret=config.resolve_jwt_secret(),
            algorithm=config.jwt_algorithm,
            expires_in=timedelta(days=config.jwt_expires_days),
        )

    def issue(self, identity: Identity) -> str:
        """Sign a token carrying the identity's three claims."""
        now = datetime.now(timezone.utc)
        payload: Dict[str, Any] = {
            "userId": identity.user_id,
            "tenantId": identity.tenant_id,
            "role": identity.role.value,
            "iat": int(now.timestamp()),
            "exp": int((now + self.expires_in).timestamp()),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def verify(self, token: str) -> Identity:
        """
        Verify signature and expiry, then decode the claims.

        Raises:
            AuthenticationError: bad signature, expired, malformed, or a
            required claim is missing or unrecognized.
        """
        try:
            payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        except JWTError as e:
            # Reason stays server-side
            raise AuthenticationError("Invalid token", context={"reason": str(e)})

        user_id = payload.get("userId")
        tenant_id = payload.get("tenantId")
        role = payload.get("role")
        if not user_id or not tenant_id or not role:
            raise AuthenticationError("Invalid token", context={"reason": "missing claims"})
        try:
            parsed_role = Role(role)
        except ValueError:
            raise AuthenticationError("Invalid token", context={"reason": "unknown role"})

        return Identity(user_id=str(user_id), tenant_id=str(tenant_id), role=parsed_role)


@lru_cache(maxsize=1)
def get_token_codec() -> TokenCodec:
    """Process-wide codec; also a FastAPI dependency so tests can override it."""
    return TokenCodec.from_settings(settings)
