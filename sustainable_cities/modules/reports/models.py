import uuid
import enum
from sqlalchemy import Column, String, Enum, ForeignKey, Text, DateTime, Float, JSON, func
from sqlalchemy.dialects.postgresql import UUID
from sustainable_cities.core.db import Base

class ReportStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    IN_PROGRESS = "In Progress"
    RESOLVED = "Resolved"
    COMPLETED = "Completed"
    REJECTED = "Rejected"

class ReportType(str, enum.Enum):
    POLLUTION = "Pollution"
    WASTE_MANAGEMENT = "Waste Management"
    BROKEN_INFRASTRUCTURE = "Broken Infrastructure"
    WATER_LEAKAGE = "Water Leakage"
    GREEN_SPACE_ISSUE = "Green Space Issue"
    OTHER = "Other"

class Report(Base):
    __tablename__ = "reports"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    location = Column(String, nullable=False)
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    type = Column(Enum(ReportType), default=ReportType.OTHER, nullable=False)

    status = Column(Enum(ReportStatus), default=ReportStatus.PENDING, nullable=False, index=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    # Set by the claiming worker, never cleared afterwards
    assigned_to = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True, index=True)

    resolution_details = Column(Text, nullable=True)
    resolution_images = Column(JSON, nullable=True)
    comment = Column(Text, nullable=True) # Rejection reason

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
