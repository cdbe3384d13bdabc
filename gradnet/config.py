import os
from dotenv import load_dotenv

load_dotenv()

SELF_MESSAGE_POLICIES = ("reject", "ignore")


def supabase_settings():
    return os.getenv("SUPABASE_URL"), os.getenv("SUPABASE_KEY")


def frontend_url():
    return os.getenv("FRONTEND_URL", "http://localhost:3000")


def log_level():
    return os.getenv("LOG_LEVEL", "INFO").upper()


def avatar_bucket():
    return os.getenv("AVATAR_BUCKET", "avatars")


def self_message_policy():
    # "reject": sending to yourself fails validation
    # "ignore": the row is stored but never shown as a conversation
    policy = os.getenv("SELF_MESSAGES", "reject").lower()
    if policy not in SELF_MESSAGE_POLICIES:
        raise ValueError(f"SELF_MESSAGES must be one of {SELF_MESSAGE_POLICIES}, got '{policy}'")
    return policy


def validate_settings():
    """Fail at startup on settings that would otherwise break every request."""
    self_message_policy()
