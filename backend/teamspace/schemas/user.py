"""User 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, EmailStr, Field, field_validator
from typing import List, Literal, Optional
from datetime import datetime

UserRole = Literal["admin", "member", "viewer"]
UserStatus = Literal["active", "away", "offline"]


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=72)
    department: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=100)

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return str(v).lower()


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)

    @field_validator("email")
    @classmethod
    def lower_email(cls, v):
        return str(v).lower()


class UserOut(BaseModel):
    user_id: int
    name: str
    email: str
    role: str
    status: str
    department: Optional[str] = None
    location: Optional[str] = None
    phone: Optional[str] = None
    is_active: bool
    last_active: Optional[datetime] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserOut


class UserUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=2, max_length=50)
    department: Optional[str] = Field(None, max_length=50)
    location: Optional[str] = Field(None, max_length=100)
    phone: Optional[str] = Field(None, max_length=20)
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None
    is_active: Optional[bool] = None

    @field_validator("name", mode="before")
    @classmethod
    def strip_name(cls, v):
        return v.strip() if isinstance(v, str) else v


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserProjectOut(BaseModel):
    project_id: int
    name: str
    codename: str
    status: str
    color: str
    role: Optional[str] = None


class UserDetailOut(UserOut):
    projects: List[UserProjectOut] = []
