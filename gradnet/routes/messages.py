from fastapi import APIRouter, Depends, HTTPException, Query
import logging

from gradnet.config import self_message_policy
from gradnet.dependencies.auth import user_supabase_client
from gradnet.exceptions import NotFoundError, StoreError, ValidationError
from gradnet.schemas.message import Message, MessageCreate
from gradnet.schemas.profile import Recipient
from gradnet.services.store import MESSAGES, PROFILES, count_rows, insert_row, select_one, select_rows, update_row
from gradnet.services.threads import (
    aggregate_threads,
    check_recipient,
    find_conversation,
    inbox,
    reply_draft,
    search_conversations,
    search_messages,
    sent,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# sender and recipient names come from one relational select
MESSAGE_COLUMNS = """
    *,
    sender:profiles!messages_sender_id_fkey(id, full_name),
    recipient:profiles!messages_recipient_id_fkey(id, full_name)
"""


def load_messages(supabase, user_id: str):
    rows = select_rows(
        supabase,
        MESSAGES,
        columns=MESSAGE_COLUMNS,
        any_of=f"sender_id.eq.{user_id},recipient_id.eq.{user_id}",
        order="created_at",
        desc=True,
    )
    return [Message(**row) for row in rows]


def _load_or_fail(supabase, user_id: str):
    try:
        return load_messages(supabase, user_id)
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to load messages. Please try again.")

# -------- Conversations --------
@router.get("/conversations")
def get_conversations(search: str = Query(""), context=Depends(user_supabase_client)):
    user_id = context["user_id"]
    messages = _load_or_fail(context["supabase"], user_id)
    return search_conversations(aggregate_threads(messages, user_id), search)

@router.get("/conversations/{counterpart_id}")
def get_conversation(counterpart_id: str, context=Depends(user_supabase_client)):
    user_id = context["user_id"]
    messages = _load_or_fail(context["supabase"], user_id)
    try:
        return find_conversation(aggregate_threads(messages, user_id), counterpart_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Conversation not found")

# -------- Flat lists --------
@router.get("/inbox")
def get_inbox(search: str = Query(""), context=Depends(user_supabase_client)):
    user_id = context["user_id"]
    received = inbox(_load_or_fail(context["supabase"], user_id), user_id)
    return search_messages(received, user_id, search)

@router.get("/sent")
def get_sent(search: str = Query(""), context=Depends(user_supabase_client)):
    user_id = context["user_id"]
    outgoing = sent(_load_or_fail(context["supabase"], user_id), user_id)
    return search_messages(outgoing, user_id, search)

@router.get("/unread-count")
def get_unread_count(context=Depends(user_supabase_client)):
    try:
        count = count_rows(context["supabase"], MESSAGES, filters={"recipient_id": context["user_id"], "is_read": False})
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to load messages. Please try again.")
    return {"unread_count": count}

# Everyone the user can write to
@router.get("/recipients")
def get_recipients(context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    try:
        rows = select_rows(
            supabase,
            PROFILES,
            columns="id, full_name, email",
            exclude={"id": context["user_id"]},
            order="full_name",
        )
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to load recipients. Please try again.")
    return [Recipient(**row) for row in rows]

# -------- Send --------
@router.post("")
def send_message(message: MessageCreate, context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    user_id = context["user_id"]

    try:
        check_recipient(user_id, message.recipient_id, self_message_policy())
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=e.message)

    message_dict = message.model_dump()
    message_dict["sender_id"] = user_id
    message_dict["is_read"] = False

    try:
        row = insert_row(supabase, MESSAGES, message_dict)
    except StoreError as e:
        logger.error(f"Error sending message from {user_id}: {e.message}")
        raise HTTPException(status_code=500, detail="Failed to send message. Please try again.")

    return Message(**row)

# -------- Mark read --------
@router.put("/{message_id}/read")
def mark_as_read(message_id: str, context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    user_id = context["user_id"]

    try:
        existing = select_one(supabase, MESSAGES, message_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Message not found")
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to update message. Please try again.")

    if existing["recipient_id"] != user_id:
        raise HTTPException(status_code=403, detail="Only the recipient can mark a message as read")

    # Already read: nothing to write
    if existing.get("is_read"):
        return Message(**existing)

    try:
        row = update_row(supabase, MESSAGES, message_id, {"is_read": True})
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Message not found")
    except StoreError as e:
        logger.error(f"Error marking message {message_id} as read: {e.message}")
        raise HTTPException(status_code=500, detail="Failed to update message. Please try again.")

    return Message(**row)

# -------- Reply --------
@router.get("/{message_id}/reply")
def get_reply_draft(message_id: str, context=Depends(user_supabase_client)):
    supabase = context["supabase"]
    user_id = context["user_id"]

    try:
        existing = select_one(supabase, MESSAGES, message_id)
    except NotFoundError:
        raise HTTPException(status_code=404, detail="Message not found")
    except StoreError:
        raise HTTPException(status_code=500, detail="Failed to load message. Please try again.")

    try:
        return reply_draft(Message(**existing), user_id)
    except ValidationError as e:
        raise HTTPException(status_code=403, detail=e.message)
