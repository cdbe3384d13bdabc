from fastapi import Depends, Header, HTTPException
from supabase import create_client
import time
import logging

from gradnet.config import supabase_settings
from gradnet.exceptions import StoreError
from gradnet.services.store import PROFILES, select_rows

logger = logging.getLogger(__name__)

async def user_supabase_client(authorization: str = Header(...)):
    if not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid token format")

    token = authorization.split(" ")[1]

    supabase_url, supabase_key = supabase_settings()

    if not supabase_url or not supabase_key:
        logger.error("Supabase URL or Key not found in environment variables")
        raise HTTPException(status_code=500, detail="Server configuration error")

    try:
        start_time = time.time()
        supabase = create_client(supabase_url, supabase_key)

        logger.info("Validating token with Supabase")
        user_res = supabase.auth.get_user(token)
        end_time = time.time()
        logger.info(f"Token validation completed in {end_time - start_time:.2f} seconds")
    except Exception as e:
        logger.error(f"Supabase token validation error: {str(e)}")
        if "timed out" in str(e).lower():
            raise HTTPException(
                status_code=504,
                detail="Connection to authentication service timed out. Please try again later."
            )
        raise HTTPException(status_code=401, detail=f"Authentication error: {str(e)}")

    if not user_res or not user_res.user:
        logger.warning("User not found after successful token validation")
        raise HTTPException(status_code=401, detail="User not found")

    # Run table queries as the signed-in user so row level security applies
    supabase.postgrest.auth(token)

    logger.info(f"Successfully authenticated user: {user_res.user.id}")
    return {
        "supabase": supabase,
        "user_id": user_res.user.id,
        "user": user_res.user,
        "token": token,
    }


def admin_supabase_client(context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    user_id = context["user_id"]

    try:
        rows = select_rows(supabase, PROFILES, columns="is_admin", filters={"id": user_id}, limit=1)
    except StoreError as e:
        logger.error(f"Admin check failed for {user_id}: {e.message}")
        raise HTTPException(status_code=500, detail="Failed to verify permissions. Please try again.")

    if not rows or not rows[0].get("is_admin"):
        logger.warning(f"Non-admin user {user_id} tried to reach an admin route")
        raise HTTPException(status_code=403, detail="Admin access required")

    return context
