from pydantic import BaseModel, computed_field, field_validator
from typing import Optional
from datetime import datetime

# --- Announcements ---
class AuthorName(BaseModel):
    full_name: Optional[str] = None


class Announcement(BaseModel):
    id: str
    author_id: str
    title: str
    content: str
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    profiles: Optional[AuthorName] = None  # author, via profiles(full_name)

    @computed_field
    @property
    def edited(self) -> bool:
        return bool(self.updated_at and self.created_at and self.updated_at != self.created_at)


class AnnouncementCreate(BaseModel):
    title: str
    content: str

    @field_validator("title", "content")
    @classmethod
    def required(cls, v: str, info) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} must not be empty")
        return v
