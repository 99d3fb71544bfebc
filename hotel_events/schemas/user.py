from typing import Optional, List
from pydantic import BaseModel, EmailStr, field_validator
from datetime import datetime

from hotel_events.models.user import RoleName


# Shared properties
class UserBase(BaseModel):
    username: str
    email: EmailStr
    first_name: str
    last_name: str
    phone: Optional[str] = None


# Properties to receive via API on creation (POST /auth/register)
class UserCreate(UserBase):
    password: str


# Staff account creation by a manager (POST /manager/users)
class StaffUserCreate(UserCreate):
    role: RoleName = RoleName.GUEST


# Properties to receive via API on update (PATCH /me)
class UserUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone: Optional[str] = None


class PasswordChange(BaseModel):
    new_password: str


class RoleAssignment(BaseModel):
    role: RoleName


class User(UserBase):
    id: int
    is_active: bool
    roles: List[str] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("roles", mode="before")
    @classmethod
    def role_names(cls, v):
        return [getattr(r, "name", r) for r in v]

    class Config:
        from_attributes = True


# Compact user for nested responses
class UserSummary(BaseModel):
    id: int
    username: str
    first_name: str
    last_name: str

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str
    user: User


class TokenPayload(BaseModel):
    sub: Optional[str] = None
