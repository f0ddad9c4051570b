from typing import Optional
from cloakroom.models.base import Document, now_ms


class Event(Document):
    id: str
    name: str
    starts_at: int
    ends_at: int
    created_at: int
    updated_at: Optional[int] = None


def is_event_active(event: Event, at: Optional[int] = None) -> bool:
    """starts_at <= at <= ends_at（両端を含む）の場合にアクティブ"""
    if at is None:
        at = now_ms()
    return event.starts_at <= at <= event.ends_at
