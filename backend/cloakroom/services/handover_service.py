"""
ハンドオーバー（預かり票）サービス

スタッフは割り当てられたイベントがアクティブな間だけ作成・参照できる。
管理者は制限なし。
"""

import logging
from typing import List, Optional

from cloakroom.config import LIST_LIMIT
from cloakroom.exceptions import NotFoundError, PermissionDenied, ValidationError
from cloakroom.models import Event, HandoverReport, Role, is_event_active, now_ms
from cloakroom.storage import Storage

logger = logging.getLogger(__name__)


def assigned_active_event(storage: Storage, staff, now: Optional[int] = None) -> Optional[Event]:
    """スタッフに割り当てられた、現在アクティブなイベント。無ければ None"""
    if not staff.is_authorized or not staff.authorized_event_id:
        return None
    event = storage.events.get(staff.authorized_event_id)
    # イベント自体が見つからない場合は拒否
    if event is None or not is_event_active(event, now):
        return None
    return event


def can_access_handover(storage: Storage, identity, report: HandoverReport, now: Optional[int] = None) -> bool:
    if identity.role is Role.ADMIN:
        return True
    event = assigned_active_event(storage, identity, now)
    if event is None:
        return False
    if report.event_id:
        return report.event_id == event.id
    return event.starts_at <= report.created_at <= event.ends_at


class HandoverService:

    @staticmethod
    def create(storage: Storage, identity, data: dict, now: Optional[int] = None) -> HandoverReport:
        if not data.get("id") or not data.get("coat_number") or not data.get("full_name"):
            raise ValidationError("Missing fields")
        now = now_ms() if now is None else now

        fields = {k: v for k, v in data.items() if v is not None}
        if identity.role is Role.STAFF:
            event = assigned_active_event(storage, identity, now)
            if event is None:
                raise PermissionDenied("No active event assigned")
            fields.update(event_id=event.id, event_name=event.name, staff=fields.get("staff") or identity.full_name)
        elif fields.get("event_id"):
            event = storage.events.get(fields["event_id"])
            if event is None:
                raise ValidationError("Unknown event")
            fields["event_name"] = event.name

        existing = storage.handovers.get(fields["id"])
        if existing is not None and not can_access_handover(storage, identity, existing, now):
            raise PermissionDenied("Forbidden")

        report = HandoverReport(**{**fields, "created_at": now})
        storage.handovers.save(report)
        logger.info("Handover %s stored by %s %s", report.id, identity.role.value, identity.id)
        return report

    @staticmethod
    def list(storage: Storage, identity, q: str = "", event_id: Optional[str] = None,
             now: Optional[int] = None) -> List[HandoverReport]:
        q = (q or "").strip()
        repo = storage.handovers
        if q:
            items = repo.search(q, ["coat_number", "full_name"], sort_by="created_at", descending=True)
        else:
            items = repo.list(sort_by="created_at", descending=True)
        if event_id:
            items = [r for r in items if r.event_id == event_id]
        if identity.role is Role.STAFF:
            items = [r for r in items if can_access_handover(storage, identity, r, now)]
        return items[:LIST_LIMIT]

    @staticmethod
    def get(storage: Storage, identity, handover_id: str, now: Optional[int] = None) -> HandoverReport:
        report = storage.handovers.get(handover_id)
        # 権限が無い場合も存在を明かさない
        if report is None or not can_access_handover(storage, identity, report, now):
            raise NotFoundError()
        return report

    @staticmethod
    def delete(storage: Storage, handover_id: str) -> bool:
        return storage.handovers.delete(handover_id)
