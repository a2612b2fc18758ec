from datetime import datetime
from typing import Optional
from pydantic import BaseModel, EmailStr, Field
from sustainable_cities.modules.auth.models import UserRole
from uuid import UUID

class UserBase(BaseModel):
    email: EmailStr
    name: str = Field(min_length=1)

class UserCreate(UserBase):
    password: str = Field(min_length=6)

class WorkerSignup(UserCreate):
    invite_code: str = Field(min_length=1)

class UserUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)

class UserRead(UserBase):
    id: UUID
    role: UserRole
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class Token(BaseModel):
    access_token: str
    token_type: str
    expires_in: int
    role: UserRole

class TokenData(BaseModel):
    id: Optional[UUID] = None

class RouteAccessRead(BaseModel):
    path: str
    allowed: bool
    redirect_to: Optional[str] = None
