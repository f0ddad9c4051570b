from fastapi import APIRouter, Depends, Query

from cloakroom.exceptions import ValidationError
from cloakroom.schemas import HandoverCreate
from cloakroom.services.handover_service import HandoverService
from cloakroom.storage import Storage, get_storage
from cloakroom.utils.session_auth import get_current_identity, require_admin

router = APIRouter(prefix="/api/handover", tags=["handover"])


@router.get("")
async def list_handovers(q: str = Query(""), event_id: str = Query(None, alias="eventId"),
                         current_user=Depends(get_current_identity), storage: Storage = Depends(get_storage)):
    """ハンドオーバー一覧（新しい順、コート番号・氏名で検索）"""
    items = HandoverService.list(storage, current_user, q, event_id)
    return {"items": [r.public() for r in items]}


@router.post("", status_code=201)
async def create_handover(data: HandoverCreate, current_user=Depends(get_current_identity),
                          storage: Storage = Depends(get_storage)):
    """ハンドオーバーを登録"""
    report = HandoverService.create(storage, current_user, data.model_dump(exclude_unset=True))
    return report.public()


@router.get("/{handover_id}")
async def get_handover(handover_id: str, current_user=Depends(get_current_identity),
                       storage: Storage = Depends(get_storage)):
    return HandoverService.get(storage, current_user, handover_id).public()


@router.delete("")
async def delete_handover(id: str = Query(None), current_user=Depends(require_admin),
                          storage: Storage = Depends(get_storage)):
    """ハンドオーバーを削除"""
    if not id:
        raise ValidationError("Missing id")
    HandoverService.delete(storage, id)
    return {"ok": True}
