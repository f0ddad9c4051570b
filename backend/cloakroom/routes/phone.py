from fastapi import APIRouter, Depends

from cloakroom.config import EXPOSE_PHONE_CODE
from cloakroom.schemas import PhoneCodeConfirm, PhoneCodeRequest
from cloakroom.services.phone_service import PhoneVerificationService
from cloakroom.storage import Storage, get_storage

router = APIRouter(prefix="/api/phone", tags=["phone"])


@router.post("")
async def request_code(data: PhoneCodeRequest, storage: Storage = Depends(get_storage)):
    """確認コードを発行"""
    entry = PhoneVerificationService.request_code(storage, data.phone)
    body = {"ok": True, "phone": entry.phone, "expiresIn": (entry.expires_at - entry.created_at) // 1000}
    # SMS 送信の代わりに開発時のみコードを返す
    if EXPOSE_PHONE_CODE:
        body["code"] = entry.code
    return body


@router.patch("")
async def confirm_code(data: PhoneCodeConfirm, storage: Storage = Depends(get_storage)):
    """確認コードを照合"""
    phone = PhoneVerificationService.confirm_code(storage, data.phone, data.code)
    return {"ok": True, "phone": phone, "verified": True}
