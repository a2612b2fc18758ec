import uuid
import enum
from sqlalchemy import Column, String, Enum, ForeignKey, Text, DateTime, Integer, JSON, CheckConstraint, func
from sqlalchemy.dialects.postgresql import UUID
from sustainable_cities.core.db import Base

class ThreadStatus(str, enum.Enum):
    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"

class ForumThread(Base):
    __tablename__ = "forum_threads"
    __table_args__ = (
        CheckConstraint("comment_count >= 0", name="ck_forum_threads_comment_count_non_negative"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String, nullable=False)
    body = Column(Text, nullable=False)
    tags = Column(JSON, nullable=False, default=list)
    status = Column(Enum(ThreadStatus), default=ThreadStatus.PENDING, nullable=False, index=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    comment_count = Column(Integer, default=0, nullable=False)
    comment = Column(Text, nullable=True) # Moderator rejection reason

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

class ForumComment(Base):
    __tablename__ = "forum_comments"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    thread_id = Column(UUID(as_uuid=True), ForeignKey("forum_threads.id", ondelete="CASCADE"), nullable=False, index=True)
    content = Column(Text, nullable=False)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
