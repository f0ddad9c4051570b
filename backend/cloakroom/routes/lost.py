from fastapi import APIRouter, Depends, Query, Request

from cloakroom.exceptions import ValidationError
from cloakroom.schemas import LostClaimCreate, LostClaimUpdate
from cloakroom.services.lost_service import LostClaimService
from cloakroom.storage import Storage, get_storage
from cloakroom.utils.audit_logger import log_event
from cloakroom.utils.session_auth import get_current_identity, require_admin

router = APIRouter(prefix="/api/lost", tags=["lost"])


@router.get("")
async def list_claims(q: str = Query(""), current_user=Depends(get_current_identity),
                      storage: Storage = Depends(get_storage)):
    """遺失物の問い合わせ一覧（新しい順、氏名・メール・電話番号で検索）"""
    return {"items": [c.public() for c in LostClaimService.list(storage, q)]}


@router.post("", status_code=201)
async def create_claim(data: LostClaimCreate, storage: Storage = Depends(get_storage)):
    """問い合わせの受付（ログイン不要）"""
    return LostClaimService.create(storage, data.model_dump(exclude_unset=True)).public()


@router.patch("")
async def update_claim(request: Request, data: LostClaimUpdate, current_user=Depends(get_current_identity),
                       storage: Storage = Depends(get_storage)):
    """対応済みフラグの切り替え"""
    if not data.id:
        raise ValidationError("Missing id")
    claim = LostClaimService.set_resolved(storage, data.id, data.resolved)
    log_event("lost_claim_updated", request, user_id=current_user.id, email=current_user.email,
              user_type=current_user.role.value, details={"claim_id": claim.id, "resolved": claim.resolved},
              success=True, status_code=200)
    return claim.public()


@router.delete("")
async def delete_claim(request: Request, id: str = Query(None), current_user=Depends(require_admin),
                       storage: Storage = Depends(get_storage)):
    if not id:
        raise ValidationError("Missing id")
    LostClaimService.delete(storage, id)
    log_event("lost_claim_deleted", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"claim_id": id}, success=True, status_code=200)
    return {"ok": True}
