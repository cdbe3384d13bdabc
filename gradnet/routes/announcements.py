from fastapi import APIRouter, Depends, HTTPException
from datetime import datetime, timezone
import logging

from gradnet.dependencies.auth import admin_supabase_client, user_supabase_client
from gradnet.exceptions import NotFoundError, StoreError
from gradnet.schemas.announcement import Announcement, AnnouncementCreate
from gradnet.services.store import ANNOUNCEMENTS, delete_row, insert_row, select_rows, update_row

logger = logging.getLogger(__name__)

router = APIRouter()

ANNOUNCEMENT_COLUMNS = "*, profiles(full_name)"


def recent_announcements(supabase, limit=None):
    rows = select_rows(supabase, ANNOUNCEMENTS, columns=ANNOUNCEMENT_COLUMNS, order="created_at", desc=True, limit=limit)
    return [Announcement(**row) for row in rows]

# -------- Read (everyone) --------
@router.get("")
def get_all_announcements(context=Depends(user_supabase_client)):
    try:
        return recent_announcements(context["supabase"])
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to load announcements. Please try again.")

# -------- Write (admins) --------
@router.post("")
def create_announcement(announcement: AnnouncementCreate, context=Depends(admin_supabase_client)):
    supabase = context["supabase"]
    user_id = context["user_id"]

    announcement_dict = announcement.model_dump()
    announcement_dict["author_id"] = user_id

    try:
        row = insert_row(supabase, ANNOUNCEMENTS, announcement_dict)
    except StoreError as e:
        logger.error(f"Error creating announcement: {e.message}")
        raise HTTPException(status_code=500, detail="Failed to create announcement. Please try again.")
    return Announcement(**row)

@router.put("/{announcement_id}")
def update_announcement(announcement_id: str, announcement: AnnouncementCreate, context=Depends(admin_supabase_client)):
    supabase = context["supabase"]

    patch = announcement.model_dump()
    patch["updated_at"] = datetime.now(timezone.utc).isoformat()

    try:
        row = update_row(supabase, ANNOUNCEMENTS, announcement_id, patch)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Announcement not found")
    except StoreError as e:
        logger.error(f"Error updating announcement {announcement_id}: {e.message}")
        raise HTTPException(status_code=500, detail="Failed to update announcement. Please try again.")
    return Announcement(**row)

@router.delete("/{announcement_id}")
def delete_announcement(announcement_id: str, context=Depends(admin_supabase_client)):
    supabase = context["supabase"]
    try:
        delete_row(supabase, ANNOUNCEMENTS, announcement_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Announcement not found")
    except StoreError as e:
        logger.error(f"Error deleting announcement {announcement_id}: {e.message}")
        raise HTTPException(status_code=500, detail="Failed to delete announcement. Please try again.")
    return {"message": "Deleted"}
