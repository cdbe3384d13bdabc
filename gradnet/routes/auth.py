from fastapi import APIRouter, Depends, HTTPException
import logging

from gradnet.dependencies.auth import user_supabase_client
from gradnet.exceptions import StoreError
from gradnet.schemas.profile import Profile
from gradnet.services.store import PROFILES, select_rows

logger = logging.getLogger(__name__)

router = APIRouter()

@router.get("/me")
def get_me(context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    user = context["user"]

    try:
        rows = select_rows(supabase, PROFILES, filters={"id": context["user_id"]}, limit=1)
    except StoreError as e:
        # identity is still useful without the profile row
        logger.warning(f"Could not load profile for {context['user_id']}: {e.message}")
        rows = []

    return {
        "id": context["user_id"],
        "email": getattr(user, "email", None),
        "profile": Profile(**rows[0]) if rows else None,
    }

@router.post("/sign-out")
def sign_out(context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    try:
        supabase.auth.admin.sign_out(context["token"])
    except Exception as e:
        logger.error(f"Sign out failed for {context['user_id']}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to sign out. Please try again.")

    logger.info(f"Signed out user: {context['user_id']}")
    return {"message": "Signed out"}
