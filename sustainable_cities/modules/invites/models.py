import uuid
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, func
from sqlalchemy.dialects.postgresql import UUID
from sustainable_cities.core.db import Base

class WorkerInvite(Base):
    __tablename__ = "worker_invites"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    code = Column(String, unique=True, index=True, nullable=False)
    email = Column(String, nullable=True) # Restricts the invite to one address
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    is_used = Column(Boolean, default=False, nullable=False)
    used_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    expires_at = Column(DateTime(timezone=True), nullable=False)
