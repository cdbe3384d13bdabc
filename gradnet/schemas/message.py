from pydantic import BaseModel, ConfigDict, field_validator
from typing import List, Optional
from datetime import datetime

# --- Messages ---
class MessageParty(BaseModel):
    id: str
    full_name: str = ""

    @field_validator("full_name", mode="before")
    @classmethod
    def none_name_is_blank(cls, v):
        return v or ""


class Message(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    sender_id: str
    recipient_id: str
    subject: str
    content: str
    is_read: bool = False
    created_at: datetime
    # filled by relationship expansion on select
    sender: Optional[MessageParty] = None
    recipient: Optional[MessageParty] = None


class MessageCreate(BaseModel):
    recipient_id: str
    subject: str
    content: str

    @field_validator("recipient_id", "subject", "content")
    @classmethod
    def required(cls, v: str, info) -> str:
        v = v.strip()
        if not v:
            raise ValueError(f"{info.field_name} must not be empty")
        return v


# --- Conversations (derived, never stored) ---
class Conversation(BaseModel):
    model_config = ConfigDict(frozen=True)

    counterpart_id: str
    counterpart: Optional[MessageParty] = None
    messages: List[Message]
    latest_message: Message
    unread_count: int = 0
