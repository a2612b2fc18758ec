import uuid
from sqlalchemy import Column, String, Boolean, DateTime, func, Enum
from sqlalchemy.dialects.postgresql import UUID
from sustainable_cities.core.db import Base
import enum

class UserRole(str, enum.Enum):
    CITIZEN = "citizen"
    WORKER = "worker"
    ADMIN = "admin"

    @classmethod
    def _missing_(cls, value):
        # Older clients call citizens "client"
        if isinstance(value, str) and value.lower() == "client":
            return cls.CITIZEN
        return None

class User(Base):
    __tablename__ = "users"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    name = Column(String, nullable=False)
    role = Column(Enum(UserRole), default=UserRole.CITIZEN, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
