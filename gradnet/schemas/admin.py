from pydantic import BaseModel

# --- Admin dashboard ---
class AdminStats(BaseModel):
    total_users: int = 0
    total_messages: int = 0
    total_announcements: int = 0
    mentor_count: int = 0
    mentor_percentage: int = 0
    avg_messages_per_user: int = 0
