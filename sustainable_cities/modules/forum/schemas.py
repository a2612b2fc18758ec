from datetime import datetime
from uuid import UUID
from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from sustainable_cities.modules.forum.models import ThreadStatus

class ThreadCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    body: str = Field(min_length=1)
    tags: List[str] = []

    @field_validator("tags")
    @classmethod
    def normalize_tags(cls, value: List[str]) -> List[str]:
        # Tags are a set: trimmed, lowercased, de-duplicated, order kept
        seen = []
        for tag in value:
            tag = tag.strip().lower()
            if tag and tag not in seen:
                seen.append(tag)
        return seen

class ThreadReject(BaseModel):
    comment: Optional[str] = None

class ThreadRead(BaseModel):
    id: UUID
    title: str
    body: str
    tags: List[str] = []
    status: ThreadStatus
    created_by: UUID
    comment_count: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True

class CommentCreate(BaseModel):
    content: str = Field(min_length=1)

class CommentRead(BaseModel):
    id: UUID
    thread_id: UUID
    content: str
    created_by: UUID
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
