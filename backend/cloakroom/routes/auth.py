import logging
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, Request, Response

from cloakroom.config import COOKIE_SECURE, EXPOSE_RESET_TOKEN, ROLE_COOKIE, SESSION_COOKIE
from cloakroom.exceptions import CloakroomError, RateLimitError, ValidationError
from cloakroom.models import Role
from cloakroom.schemas import LoginRequest, RegisterRequest, ResetConfirm, ResetRequest
from cloakroom.services.account_service import AccountService
from cloakroom.services.auth_service import AuthService, session_ttl_seconds
from cloakroom.storage import Storage, get_storage
from cloakroom.utils.audit_logger import client_info, log_event
from cloakroom.utils.rate_limiter import login_limiter
from cloakroom.utils.session_auth import get_optional_identity, get_session_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])


def _role_from(value) -> Role:
    return Role.ADMIN if value == "admin" else Role.STAFF


def identity_payload(identity) -> dict:
    data = identity.public()
    if identity.role is Role.ADMIN:
        data["isAuthorized"] = True
    return data


@router.post("/login")
async def login(request: Request, response: Response, data: LoginRequest, storage: Storage = Depends(get_storage)):
    """ログイン（セッション Cookie とロール Cookie を発行）"""
    ip_address, _ = client_info(request)
    if not data.email or not data.password:
        raise ValidationError("Missing credentials")
    role = _role_from(data.type)

    # ブルートフォース対策：IP単位で失敗回数を制限
    if login_limiter.is_blocked(ip_address):
        remaining = login_limiter.retry_after(ip_address)
        log_event("login_rate_limit_exceeded", request, email=data.email, user_type=role.value, status_code=429)
        raise RateLimitError(f"Too many login attempts. Try again in {remaining} seconds")

    try:
        user = AuthService.authenticate(storage, data.email, data.password, role)
    except CloakroomError as e:
        if e.status_code == 401:
            login_limiter.record(ip_address)
        log_event(
            "login_failure", request, email=data.email, user_type=role.value,
            status_code=e.status_code, details={"reason": e.message},
        )
        raise

    ttl = session_ttl_seconds(data.remember)
    session = AuthService.create_session(storage, user, ttl)
    response.set_cookie(
        SESSION_COOKIE, session.token, max_age=ttl, path="/", httponly=True, samesite="lax", secure=COOKIE_SECURE,
    )
    # エッジ判定用のロールヒント（クライアントから読める・認可には使わない）
    response.set_cookie(
        ROLE_COOKIE, role.value, max_age=ttl, path="/", httponly=False, samesite="lax", secure=COOKIE_SECURE,
    )
    log_event("login_success", request, user_id=user.id, email=user.email, user_type=role.value,
              success=True, status_code=200)
    return {"id": user.id, "fullName": user.full_name, "email": user.email, "type": role.value}


@router.post("/logout")
async def logout(request: Request, response: Response, storage: Storage = Depends(get_storage)):
    """ログアウト"""
    AuthService.destroy_session(storage, get_session_token(request))

    samesite, secure = "lax", COOKIE_SECURE
    origin = request.headers.get("origin")
    if origin:
        # クロスオリジン（モバイル・別ドメインのフロント）からの場合
        origin_host = urlparse(origin).hostname
        if origin_host and origin_host != request.url.hostname:
            samesite, secure = "none", True
    response.delete_cookie(SESSION_COOKIE, path="/", httponly=True, secure=secure, samesite=samesite)
    response.delete_cookie(ROLE_COOKIE, path="/", httponly=False, secure=secure, samesite=samesite)
    return {"ok": True}


@router.get("/me")
async def me(identity=Depends(get_optional_identity)):
    """ログイン中のアカウント"""
    if identity is None:
        return {"user": None}
    return {"user": identity_payload(identity)}


@router.post("/register", status_code=201)
async def register(request: Request, data: RegisterRequest, storage: Storage = Depends(get_storage)):
    """スタッフの新規登録"""
    user = AccountService.create(storage, Role.STAFF, data.full_name, data.email, data.password, is_authorized=True)
    log_event("staff_registered", request, user_id=user.id, email=user.email, user_type="staff",
              success=True, status_code=201)
    return {"id": user.id, "fullName": user.full_name, "email": user.email}


@router.post("/reset/request")
async def reset_request(request: Request, data: ResetRequest, storage: Storage = Depends(get_storage)):
    """パスワードリセットトークンの発行（アカウントの有無は応答で区別しない）"""
    if not data.email:
        raise ValidationError("Missing email")
    role = _role_from(data.type)
    record = AuthService.request_password_reset(storage, data.email, role)
    log_event("password_reset_requested", request, email=data.email, user_type=role.value,
              success=record is not None, status_code=200)
    body = {"ok": True}
    # メール送信の代わりに開発時のみトークンを返す
    if record is not None and EXPOSE_RESET_TOKEN:
        body["token"] = record.token
    return body


@router.post("/reset/confirm")
@router.post("/reset/perform")
async def reset_confirm(request: Request, data: ResetConfirm, storage: Storage = Depends(get_storage)):
    """リセットトークンを使ってパスワードを変更"""
    user = AuthService.redeem_password_reset(storage, data.token, data.password)
    log_event("password_reset", request, user_id=user.id, email=user.email, user_type=user.role.value,
              success=True, status_code=200)
    return {"ok": True}
