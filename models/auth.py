from typing import List, Optional
from pydantic import BaseModel

from .enums import Role


# -----------------------------------------------------
# LOGIN REQUEST
# -----------------------------------------------------
class LoginRequest(BaseModel):
    email: str                # login identifier (admin email or a person's email)
    password: str             # admin password, or the person's tax code


# -----------------------------------------------------
# SESSION (authenticated principal)
# -----------------------------------------------------
class Session(BaseModel):
    id: int                   # 0 for the built-in admin, the person id otherwise
    name: str
    email: str
    role: Role
    person_id: Optional[int] = None
    token_id: Optional[str] = None


# -----------------------------------------------------
# TOKEN RESPONSE
# -----------------------------------------------------
class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int           # seconds until expiration
    session: Session


# -----------------------------------------------------
# CAPABILITIES (what the UI may show)
# -----------------------------------------------------
class Capabilities(BaseModel):
    role: Role
    views: List[str]
    permissions: List[str]
    is_admin: bool
    is_manager: bool
    is_staff: bool


# -----------------------------------------------------
# PROFILE (self-service)
# -----------------------------------------------------
class ProfileUpdate(BaseModel):
    nome: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None   # new login secret (stored as the tax code)


class ProfileUpdateResponse(BaseModel):
    session: Session
    reauthenticate: bool = False
