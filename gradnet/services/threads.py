import logging
from typing import Dict, Iterable, List

from gradnet.exceptions import NotFoundError, ValidationError
from gradnet.schemas.message import Conversation, Message

logger = logging.getLogger(__name__)

REPLY_PREFIX = "Re: "


def _newest_first(messages: Iterable[Message]) -> List[Message]:
    # id breaks created_at ties so the order is stable between calls
    return sorted(messages, key=lambda m: (m.created_at, m.id), reverse=True)


def counterpart_of(message: Message, viewer_id: str) -> str:
    return message.recipient_id if message.sender_id == viewer_id else message.sender_id


def aggregate_threads(messages: Iterable[Message], viewer_id: str) -> List[Conversation]:
    """
    Group the messages a user can see into one conversation per counterpart.

    Each conversation holds its messages newest first, the newest message, and
    how many of them are addressed to the viewer and still unread. Conversations
    are ordered by their newest message, most recent first. Self-addressed
    messages do not belong to any conversation and are left out.
    """
    groups: Dict[str, List[Message]] = {}

    for message in messages:
        if message.sender_id == message.recipient_id:
            logger.debug(f"Skipping self-addressed message {message.id}")
            continue
        counterpart_id = counterpart_of(message, viewer_id)
        groups.setdefault(counterpart_id, []).append(message)

    conversations = []
    for counterpart_id, group in groups.items():
        ordered = _newest_first(group)
        latest = ordered[0]
        counterpart = latest.recipient if latest.sender_id == viewer_id else latest.sender
        unread = sum(1 for m in ordered if m.recipient_id == viewer_id and not m.is_read)

        conversations.append(Conversation(
            counterpart_id=counterpart_id,
            counterpart=counterpart,
            messages=ordered,
            latest_message=latest,
            unread_count=unread,
        ))

    conversations.sort(
        key=lambda c: (c.latest_message.created_at, c.latest_message.id),
        reverse=True,
    )
    return conversations


def find_conversation(conversations: List[Conversation], counterpart_id: str) -> Conversation:
    for conversation in conversations:
        if conversation.counterpart_id == counterpart_id:
            return conversation
    raise NotFoundError("conversations", counterpart_id)


def search_conversations(conversations: List[Conversation], term: str) -> List[Conversation]:
    if not term:
        return conversations
    needle = term.lower()

    def matches(c: Conversation) -> bool:
        name = c.counterpart.full_name if c.counterpart else ""
        return (
            needle in name.lower()
            or needle in c.latest_message.subject.lower()
            or needle in c.latest_message.content.lower()
        )

    return [c for c in conversations if matches(c)]


def search_messages(messages: Iterable[Message], viewer_id: str, term: str) -> List[Message]:
    """Keep messages whose other party's name, subject or content contains the term."""
    messages = list(messages)
    if not term:
        return messages
    needle = term.lower()

    def matches(m: Message) -> bool:
        other = m.recipient if m.sender_id == viewer_id else m.sender
        name = other.full_name if other else ""
        return any(needle in text.lower() for text in (name, m.subject, m.content))

    return [m for m in messages if matches(m)]


def inbox(messages: Iterable[Message], viewer_id: str) -> List[Message]:
    return _newest_first(m for m in messages if m.recipient_id == viewer_id)


def sent(messages: Iterable[Message], viewer_id: str) -> List[Message]:
    return _newest_first(m for m in messages if m.sender_id == viewer_id)


def reply_subject(subject: str) -> str:
    return subject if subject.startswith(REPLY_PREFIX) else f"{REPLY_PREFIX}{subject}"


def reply_draft(message: Message, viewer_id: str) -> Dict[str, str]:
    """Pre-filled compose form answering a received message."""
    if message.recipient_id != viewer_id:
        raise ValidationError("Only messages you received can be replied to")
    return {
        "recipient_id": message.sender_id,
        "subject": reply_subject(message.subject),
        "content": "",
    }


def check_recipient(sender_id: str, recipient_id: str, policy: str = "reject"):
    if sender_id == recipient_id and policy == "reject":
        raise ValidationError("You cannot send a message to yourself")
