from fastapi import APIRouter, Depends, Query, Request

from cloakroom.exceptions import ValidationError
from cloakroom.schemas import EventCreate, EventUpdate
from cloakroom.services.event_service import EventService
from cloakroom.storage import Storage, get_storage
from cloakroom.utils.audit_logger import log_event
from cloakroom.utils.session_auth import require_admin

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("")
async def list_events(active: bool = Query(False), storage: Storage = Depends(get_storage)):
    """イベント一覧（開始時刻順）。active=1 で現在アクティブなもののみ"""
    return {"items": [e.public() for e in EventService.list(storage, active_only=active)]}


@router.post("", status_code=201)
async def create_event(request: Request, data: EventCreate, current_user=Depends(require_admin),
                       storage: Storage = Depends(get_storage)):
    """イベントを作成"""
    event = EventService.create(storage, data.name, data.starts_at, data.ends_at, event_id=data.id)
    log_event("event_created", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"event_id": event.id}, success=True, status_code=201)
    return event.public()


@router.patch("")
async def update_event(request: Request, data: EventUpdate, current_user=Depends(require_admin),
                       storage: Storage = Depends(get_storage)):
    """イベントの名称・期間を更新"""
    if not data.id:
        raise ValidationError("Missing id")
    event = EventService.update(storage, data.id, data.name, data.starts_at, data.ends_at)
    log_event("event_updated", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"event_id": event.id}, success=True, status_code=200)
    return event.public()


@router.delete("")
async def delete_event(request: Request, id: str = Query(None), current_user=Depends(require_admin),
                       storage: Storage = Depends(get_storage)):
    """イベントを削除"""
    if not id:
        raise ValidationError("Missing id")
    removed = EventService.delete(storage, id)
    log_event("event_deleted", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"event_id": id}, success=True, status_code=200)
    return {"ok": True, "removed": removed.public()}
