import re
from pydantic import BaseModel, field_validator
from typing import Optional, Union
from datetime import datetime

# --- Profiles (auth.users.id -> profiles.id) ---
class Profile(BaseModel):
    id: str  # auth.users.id
    email: Optional[str] = None
    full_name: str = ""
    graduation_year: Optional[int] = None
    degree: Optional[str] = None
    major: Optional[str] = None
    current_company: Optional[str] = None
    current_position: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    linkedin_url: Optional[str] = None
    is_mentor: bool = False
    is_admin: bool = False
    profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("full_name", mode="before")
    @classmethod
    def none_name_is_blank(cls, v):
        return v or ""

    @field_validator("is_mentor", "is_admin", mode="before")
    @classmethod
    def none_flag_is_false(cls, v):
        return bool(v)


def parse_graduation_year(value) -> Optional[int]:
    """Turn form text such as "2021" or " 2021 " into an int; blank or junk becomes None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = re.match(r"\s*(\d+)", str(value))
    return int(match.group(1)) if match else None


class ProfileUpdate(BaseModel):
    full_name: str
    graduation_year: Optional[Union[int, str]] = None
    degree: Optional[str] = None
    major: Optional[str] = None
    current_company: Optional[str] = None
    current_position: Optional[str] = None
    location: Optional[str] = None
    bio: Optional[str] = None
    linkedin_url: Optional[str] = None
    is_mentor: bool = False
    profile_picture: Optional[str] = None

    @field_validator("full_name")
    @classmethod
    def name_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("full_name must not be empty")
        return v

    @field_validator("graduation_year", mode="before")
    @classmethod
    def parse_year(cls, v):
        return parse_graduation_year(v)


class Recipient(BaseModel):
    id: str
    full_name: str = ""
    email: Optional[str] = None

    @field_validator("full_name", mode="before")
    @classmethod
    def none_name_is_blank(cls, v):
        return v or ""
