from fastapi import APIRouter, Depends, File, HTTPException, UploadFile
from datetime import datetime, timezone
import logging
import uuid

from gradnet.config import avatar_bucket
from gradnet.dependencies.auth import user_supabase_client
from gradnet.exceptions import NotFoundError, StoreError
from gradnet.schemas.profile import Profile, ProfileUpdate
from gradnet.services.store import PROFILES, select_one, select_rows, update_row, upsert_row

logger = logging.getLogger(__name__)

router = APIRouter()

ALLOWED_IMAGE_TYPES = {"image/jpeg": "jpg", "image/png": "png", "image/gif": "gif", "image/webp": "webp"}
MAX_PICTURE_BYTES = 5 * 1024 * 1024

# -------- Own profile --------
@router.get("")
def get_my_profile(context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    try:
        rows = select_rows(supabase, PROFILES, filters={"id": context["user_id"]}, limit=1)
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to load profile. Please try again.")
    return Profile(**rows[0]) if rows else None

@router.put("")
def upsert_my_profile(profile: ProfileUpdate, context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    user_id = context["user_id"]
    user = context["user"]

    try:
        existing = select_rows(supabase, PROFILES, columns="email, profile_picture", filters={"id": user_id}, limit=1)

        profile_dict = profile.model_dump()
        profile_dict["id"] = user_id
        stored_email = existing[0].get("email") if existing else None
        profile_dict["email"] = stored_email or getattr(user, "email", None) or ""
        profile_dict["updated_at"] = datetime.now(timezone.utc).isoformat()
        if profile_dict["profile_picture"] is None:
            # keep the stored picture unless a new one is sent
            profile_dict.pop("profile_picture")

        row = upsert_row(supabase, PROFILES, profile_dict)
    except StoreError as e:
        logger.error(f"Error updating profile for {user_id}: {e.message}")
        raise HTTPException(status_code=500, detail="Failed to update profile. Please try again.")

    return Profile(**row)

# -------- Profile picture --------
@router.post("/picture")
async def upload_profile_picture(file: UploadFile = File(...), context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    user_id = context["user_id"]

    extension = ALLOWED_IMAGE_TYPES.get(file.content_type)
    if not extension:
        raise HTTPException(status_code=400, detail="File must be a JPEG, PNG, GIF or WebP image")

    contents = await file.read()
    if len(contents) > MAX_PICTURE_BYTES:
        raise HTTPException(status_code=400, detail="File must be 5MB or smaller")

    path = f"{user_id}/{uuid.uuid4()}.{extension}"
    bucket = avatar_bucket()

    try:
        logger.info(f"Uploading {len(contents)} bytes to {bucket}/{path}")
        storage = supabase.storage.from_(bucket)
        storage.upload(path, contents, {"content-type": file.content_type})
        url = storage.get_public_url(path)
    except Exception as e:
        logger.error(f"Error uploading profile picture for {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Failed to upload profile picture. Please try again.")

    try:
        update_row(supabase, PROFILES, user_id, {
            "profile_picture": url,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        })
    except NotFoundError:
        # No profile yet; the url is returned and saved with the first profile upsert
        logger.info(f"Uploaded picture for {user_id} before a profile exists")
    except StoreError as e:
        logger.error(f"Error saving profile picture url for {user_id}: {e.message}")
        raise HTTPException(status_code=500, detail="Failed to update profile. Please try again.")

    return {"url": url}

# -------- Someone else's profile --------
@router.get("/{profile_id}")
def get_profile(profile_id: str, context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    try:
        row = select_one(supabase, PROFILES, profile_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Profile not found")
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to load profile. Please try again.")
    return Profile(**row)
