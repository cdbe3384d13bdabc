from fastapi import APIRouter, Depends, HTTPException, Query
import logging

from gradnet.dependencies.auth import user_supabase_client
from gradnet.exceptions import StoreError
from gradnet.schemas.profile import Profile
from gradnet.services.directory import MentorFilter, filter_profiles, graduation_years
from gradnet.services.store import PROFILES, select_rows

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("")
def get_directory(
    search: str = Query(""),
    graduation_year: str = Query("all", pattern=r"^(all|\d{4})$"),
    mentor: MentorFilter = Query(MentorFilter.ALL),
    context=Depends(user_supabase_client)
):
    supabase = context["supabase"]
    user_id = context["user_id"]

    try:
        rows = select_rows(supabase, PROFILES, order="full_name")
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to load the alumni directory. Please try again.")

    profiles = [Profile(**row) for row in rows]
    filtered = filter_profiles(profiles, user_id, term=search, graduation_year=graduation_year, mentor=mentor)

    return {
        "profiles": filtered,
        "graduation_years": graduation_years(profiles),
        "showing": len(filtered),
        "total": sum(1 for p in profiles if p.id != user_id),
    }
