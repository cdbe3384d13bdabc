import math

from gradnet.schemas.admin import AdminStats


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_stats(total_users: int, total_messages: int, total_announcements: int, mentor_count: int) -> AdminStats:
    # With no users yet both ratios read 0 instead of dividing by zero
    mentor_percentage = _round_half_up(100 * mentor_count / total_users) if total_users > 0 else 0
    avg_messages = _round_half_up(total_messages / total_users) if total_users > 0 else 0

    return AdminStats(
        total_users=total_users,
        total_messages=total_messages,
        total_announcements=total_announcements,
        mentor_count=mentor_count,
        mentor_percentage=mentor_percentage,
        avg_messages_per_user=avg_messages,
    )
