"""Login request and response schemas."""

from typing import Optional

from pydantic import Field

from tenant_notes.models.user import Role
from tenant_notes.schemas.common import CamelModel


class LoginRequest(CamelModel):
    # Optional so missing fields reach the service and become a 400,
    # not FastAPI's default 422.
    email: Optional[str] = Field(default=None, description="Account email")
    password: Optional[str] = Field(default=None, description="Plain-text password")


class UserPublic(CamelModel):
    """
    What:  The sanitized user view returned by login.
    Why:   Built from an explicit field list so the password hash can never
           leak through a response, even if the ORM model grows new columns.
    """
    id: str
    email: str
    role: Role
    tenant_id: str


class LoginResponse(CamelModel):
    token: str = Field(description="Bearer token, valid for 7 days by default")
    user: UserPublic
