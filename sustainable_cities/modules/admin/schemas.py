from pydantic import BaseModel, EmailStr, Field
from uuid import UUID
from datetime import datetime
from typing import Optional, Dict, Any

from sustainable_cities.modules.auth.models import UserRole

class AdminStats(BaseModel):
    total_users: int
    users_by_role: Dict[str, int]
    reports_by_status: Dict[str, int]
    threads_by_status: Dict[str, int]
    pending_reports: int
    pending_threads: int

class AuditLogRead(BaseModel):
    id: UUID
    user_id: Optional[UUID]
    action: str
    target_type: Optional[str]
    target_id: Optional[str]
    created_at: Optional[datetime]
    metadata_json: Optional[Dict[str, Any]]

    class Config:
        from_attributes = True

class UserCreateAdmin(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=6)
    role: UserRole = UserRole.CITIZEN

class UserRoleUpdate(BaseModel):
    role: UserRole

class UserStatusUpdate(BaseModel):
    is_active: bool
