from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field
from typing import List, Optional
from sustainable_cities.modules.reports.models import ReportStatus, ReportType

class ReportCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    location: str = Field(min_length=1)
    type: ReportType = ReportType.OTHER
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

class ReportReject(BaseModel):
    comment: Optional[str] = None

class ReportResolve(BaseModel):
    resolution_details: Optional[str] = None
    resolution_images: List[str] = []

class ReportRead(BaseModel):
    id: UUID
    title: str
    description: str
    location: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    type: ReportType
    status: ReportStatus
    created_by: UUID
    assigned_to: Optional[UUID] = None
    resolution_details: Optional[str] = None
    resolution_images: Optional[List[str]] = None
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
