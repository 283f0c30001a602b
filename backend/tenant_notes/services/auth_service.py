"""
Tenant Notes Backend — Auth Service (Login)
===========================================

What:  Exchanges email + password for a bearer token.
Who:   Called by POST /login.

Failure modes:
    - Missing email or password            → ValidationError (400)
    - Unknown email                        → AuthenticationError (401)
    - Wrong password                       → AuthenticationError (401)
    - Database failure                     → DatabaseError (500)

    The two 401 cases share one message ("Invalid credentials") so the
    response never tells a caller whether an email is registered.
"""

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from starlette.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_notes.auth.passwords import verify_password
from tenant_notes.auth.tokens import Identity, TokenCodec
from tenant_notes.exceptions import AuthenticationError, DatabaseError, ValidationError
from tenant_notes.repositories.users import UserRepository
from tenant_notes.schemas.auth import LoginResponse, UserPublic

logger = logging.getLogger(__name__)

INVALID_CREDENTIALS = "Invalid credentials"


class AuthService:

    async def login(
        self,
        db: AsyncSession,
        codec: TokenCodec,
        email: Optional[str],
        password: Optional[str],
    ) -> LoginResponse:
        """
        Verify credentials and issue a token.

        Returns:
            LoginResponse with the signed token and the sanitized user view
            (id, email, role, tenantId). The password hash is not included.
        """
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            user = await UserRepository(db).get_by_email(email)
        except SQLAlchemyError as e:
            logger.error("Database error during login: %s", str(e), exc_info=True)
            raise DatabaseError(context={"operation": "login"})

        if user is None:
            logger.info("Login failed: unknown email")
            raise AuthenticationError(INVALID_CREDENTIALS)

        # bcrypt is CPU-bound; keep it off the event loop
        if not await run_in_threadpool(verify_password, password, user.password):
            logger.info("Login failed: wrong password for user %s", user.id)
            raise AuthenticationError(INVALID_CREDENTIALS)

        identity = Identity(user_id=user.id, tenant_id=user.tenant_id, role=user.role)
        token = codec.issue(identity)
        logger.info("User %s logged in (tenant=%s, role=%s)", user.id, user.tenant_id, user.role.value)

        return LoginResponse(token=token, user=UserPublic.model_validate(user))


auth_service = AuthService()
