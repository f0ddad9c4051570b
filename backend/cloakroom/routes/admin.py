from fastapi import APIRouter, Depends, Query, Request

from cloakroom.exceptions import NotFoundError, ValidationError
from cloakroom.models import Role
from cloakroom.schemas import AccountCreate, AccountUpdate, StaffCreate, StaffUpdate
from cloakroom.services.account_service import UNSET, AccountService
from cloakroom.storage import Storage, get_storage
from cloakroom.utils.audit_logger import log_event
from cloakroom.utils.session_auth import require_admin

router = APIRouter(prefix="/api/admin", tags=["admin"])


# ---------------------- スタッフ ----------------------

@router.get("/staff")
async def list_staff(q: str = Query(""), current_user=Depends(require_admin), storage: Storage = Depends(get_storage)):
    """スタッフ一覧（新しい順）"""
    return {"items": [u.public() for u in AccountService.list(storage, Role.STAFF, q)]}


@router.post("/staff", status_code=201)
async def create_staff(request: Request, data: StaffCreate, current_user=Depends(require_admin),
                       storage: Storage = Depends(get_storage)):
    """スタッフを作成"""
    user = AccountService.create(
        storage, Role.STAFF, data.full_name, data.email, data.password,
        is_authorized=data.is_authorized, authorized_event_id=data.authorized_event_id,
    )
    log_event("staff_created", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"target": user.id}, success=True, status_code=201)
    return user.public()


@router.patch("/staff")
async def update_staff(request: Request, data: StaffUpdate, current_user=Depends(require_admin),
                       storage: Storage = Depends(get_storage)):
    """スタッフ情報を更新（authorizedEventId に空文字・null でイベント割り当て解除）"""
    if not data.id:
        raise ValidationError("Missing id")
    assigned = data.authorized_event_id if "authorized_event_id" in data.model_fields_set else UNSET
    user = AccountService.update(
        storage, Role.STAFF, data.id,
        full_name=data.full_name, email=data.email, password=data.password,
        is_authorized=data.is_authorized, authorized_event_id=assigned,
    )
    log_event("staff_updated", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"target": user.id, "fields": sorted(data.model_fields_set - {"id", "password"})},
              success=True, status_code=200)
    return user.public()


@router.delete("/staff")
async def delete_staff(request: Request, id: str = Query(None), current_user=Depends(require_admin),
                       storage: Storage = Depends(get_storage)):
    """スタッフを削除"""
    if not id:
        raise ValidationError("Missing id")
    AccountService.delete(storage, Role.STAFF, id)
    log_event("staff_deleted", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"target": id}, success=True, status_code=200)
    return {"ok": True}


# ---------------------- 管理者 ----------------------

@router.get("/admins")
async def list_admins(current_user=Depends(require_admin), storage: Storage = Depends(get_storage)):
    """管理者一覧（新しい順）"""
    return {"items": [u.public() for u in AccountService.list(storage, Role.ADMIN)]}


@router.post("/admins", status_code=201)
async def create_admin(request: Request, data: AccountCreate, current_user=Depends(require_admin),
                       storage: Storage = Depends(get_storage)):
    """管理者を作成"""
    user = AccountService.create(storage, Role.ADMIN, data.full_name, data.email, data.password)
    log_event("admin_created", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"target": user.id}, success=True, status_code=201)
    return user.public()


@router.patch("/admins")
async def update_admin(request: Request, data: AccountUpdate, current_user=Depends(require_admin),
                       storage: Storage = Depends(get_storage)):
    """管理者情報を更新"""
    if not data.id:
        raise ValidationError("Missing id")
    user = AccountService.update(
        storage, Role.ADMIN, data.id, full_name=data.full_name, email=data.email, password=data.password,
    )
    log_event("admin_updated", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"target": user.id}, success=True, status_code=200)
    return user.public()


@router.delete("/admins")
async def delete_admin(request: Request, id: str = Query(None), current_user=Depends(require_admin),
                       storage: Storage = Depends(get_storage)):
    """管理者を削除"""
    if not id:
        raise ValidationError("Missing id")
    # 管理者自身は削除不可
    if id == current_user.id:
        log_event("admin_delete_failure", request, user_id=current_user.id, email=current_user.email,
                  user_type="admin", details={"reason": "self_delete_attempt"}, status_code=400)
        raise ValidationError("You cannot delete your own account")
    if not AccountService.delete(storage, Role.ADMIN, id):
        raise NotFoundError()
    log_event("admin_deleted", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"target": id}, success=True, status_code=200)
    return {"ok": True}
