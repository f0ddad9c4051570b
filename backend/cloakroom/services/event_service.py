import logging
import secrets
from typing import List, Optional

from cloakroom.exceptions import NotFoundError, ValidationError
from cloakroom.models import Event, is_event_active, now_ms
from cloakroom.storage import Storage

logger = logging.getLogger(__name__)


def _validate_range(starts_at: int, ends_at: int):
    if ends_at < starts_at:
        raise ValidationError("endsAt must be >= startsAt")


class EventService:

    @staticmethod
    def list(storage: Storage, active_only: bool = False, now: Optional[int] = None) -> List[Event]:
        events = storage.events.list(sort_by="starts_at")
        if active_only:
            now = now_ms() if now is None else now
            events = [e for e in events if is_event_active(e, now)]
        return events

    @staticmethod
    def get(storage: Storage, event_id: str) -> Event:
        event = storage.events.get(event_id)
        if event is None:
            raise NotFoundError()
        return event

    @staticmethod
    def create(
        storage: Storage,
        name: str,
        starts_at: Optional[int] = None,
        ends_at: Optional[int] = None,
        event_id: Optional[str] = None,
        now: Optional[int] = None,
    ) -> Event:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Missing name")
        now = now_ms() if now is None else now
        starts_at = now if starts_at is None else starts_at
        ends_at = starts_at if ends_at is None else ends_at
        _validate_range(starts_at, ends_at)

        if not (event_id and event_id.startswith("event_")):
            event_id = f"event_{now}_{secrets.token_hex(3)}"
        if storage.events.get(event_id) is not None:
            raise ValidationError("Event id already exists")

        event = Event(id=event_id, name=name, starts_at=starts_at, ends_at=ends_at, created_at=now, updated_at=now)
        storage.events.save(event)
        logger.info("Created event %s (%s - %s)", event.id, starts_at, ends_at)
        return event

    @staticmethod
    def update(
        storage: Storage,
        event_id: str,
        name: Optional[str] = None,
        starts_at: Optional[int] = None,
        ends_at: Optional[int] = None,
        now: Optional[int] = None,
    ) -> Event:
        event = EventService.get(storage, event_id)
        changes = {"updated_at": now_ms() if now is None else now}
        if name and name.strip():
            changes["name"] = name.strip()
        if starts_at is not None:
            changes["starts_at"] = starts_at
        if ends_at is not None:
            changes["ends_at"] = ends_at
        updated = event.model_copy(update=changes)
        _validate_range(updated.starts_at, updated.ends_at)
        storage.events.save(updated)
        return updated

    @staticmethod
    def delete(storage: Storage, event_id: str) -> Event:
        event = EventService.get(storage, event_id)
        storage.events.delete(event_id)
        return event
