from enum import Enum
from typing import Optional
from pydantic import BaseModel
from clinic_client.schemas.base import DraftModel, WireModel


class Role(str, Enum):
    """Roles the UI knows how to render."""
    ADMIN = "ADMIN"
    DOCTOR = "DOCTOR"
    PATIENT = "PATIENT"


class Session(BaseModel):
    """Who is logged in, and with what role."""
    identity: str
    display_name: Optional[str] = None
    role: Role


class LoginRequest(WireModel):
    email: str
    password: str


class TokenResponse(WireModel):
    access_token: Optional[str] = None
    token_type: str = "bearer"


class RegisterRequest(DraftModel):
    email: str
    password: str
    role: Role
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class RegisterResponse(WireModel):
    id: str
    email: str
    role: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class UserInfo(WireModel):
    """Body of GET /auth/me."""
    email: Optional[str] = None
    role: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    name: Optional[str] = None

    @property
    def full_name(self) -> Optional[str]:
        if self.name:
            return self.name
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or None
