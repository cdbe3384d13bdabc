from fastapi import APIRouter, Depends, HTTPException
import logging

from gradnet.dependencies.auth import admin_supabase_client
from gradnet.exceptions import StoreError
from gradnet.routes.announcements import recent_announcements
from gradnet.services.admin_stats import compute_stats
from gradnet.services.store import ANNOUNCEMENTS, MESSAGES, PROFILES, count_rows, select_rows

logger = logging.getLogger(__name__)

router = APIRouter()

RECENT_LIMIT = 10

@router.get("/stats")
def get_admin_stats(context=Depends(admin_supabase_client)):
    supabase = context["supabase"]

    try:
        stats = compute_stats(
            total_users=count_rows(supabase, PROFILES),
            total_messages=count_rows(supabase, MESSAGES),
            total_announcements=count_rows(supabase, ANNOUNCEMENTS),
            mentor_count=count_rows(supabase, PROFILES, filters={"is_mentor": True}),
        )

        recent_users = select_rows(
            supabase,
            PROFILES,
            columns="id, full_name, email, created_at, graduation_year, is_mentor",
            order="created_at",
            desc=True,
            limit=RECENT_LIMIT,
        )
        announcements = recent_announcements(supabase, limit=RECENT_LIMIT)
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to load admin statistics. Please try again.")

    return {
        "stats": stats,
        "recent_users": recent_users,
        "announcements": announcements,
    }
