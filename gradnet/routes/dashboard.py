from fastapi import APIRouter, Depends, HTTPException

from gradnet.dependencies.auth import user_supabase_client
from gradnet.exceptions import StoreError
from gradnet.routes.announcements import recent_announcements
from gradnet.schemas.profile import Profile
from gradnet.services.store import MESSAGES, PROFILES, count_rows, select_rows

router = APIRouter()

@router.get("")
def get_dashboard(context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    user_id = context["user_id"]

    try:
        profile_rows = select_rows(supabase, PROFILES, filters={"id": user_id}, limit=1)
        announcements = recent_announcements(supabase, limit=3)
        unread_count = count_rows(supabase, MESSAGES, filters={"recipient_id": user_id, "is_read": False})
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to load dashboard. Please try again.")

    return {
        "profile": Profile(**profile_rows[0]) if profile_rows else None,
        "announcements": announcements,
        "unread_count": unread_count,
    }
