from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, EmailStr, Field
from typing import Optional

class InviteCreate(BaseModel):
    email: Optional[EmailStr] = None
    expires_in_days: Optional[int] = Field(default=None, ge=1, le=90)

class InviteRead(BaseModel):
    id: UUID
    code: str
    email: Optional[str] = None
    created_by: UUID
    is_used: bool
    used_by: Optional[UUID] = None
    created_at: Optional[datetime] = None
    expires_at: datetime

    class Config:
        from_attributes = True

class InviteCheck(BaseModel):
    code: str = Field(min_length=1)
    email: EmailStr

class InviteCheckResult(BaseModel):
    valid: bool
    restricted_to_email: bool
    expires_at: datetime
