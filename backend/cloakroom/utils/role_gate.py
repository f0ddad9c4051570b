"""
/private 配下のロールゲート

ロール Cookie はヒントにすぎず、ここではストアを参照しない。
実際の認可はハンドラ側で session_auth により再検証する。
"""

import logging
from enum import Enum

from fastapi import Request
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from cloakroom.config import ROLE_COOKIE, SESSION_COOKIE

logger = logging.getLogger(__name__)

PROTECTED_PREFIX = "/private"
LOGIN_PATH = "/private/login"
NOT_ALLOWED_PATH = "/not-allowed"

# 認証不要のパス
PUBLIC_PATHS = {
    LOGIN_PATH,
    "/private/reset/request",
}
RESET_TOKEN_PREFIX = "/private/reset/"

ADMIN_PREFIX = "/private/admin"

# スタッフが到達できるエリア（ホームは完全一致、その他は配下も含む）
STAFF_HOME = "/private"
STAFF_AREAS = ("/private/handover", "/private/handovers")


class GateDecision(str, Enum):
    ALLOW = "allow"
    LOGIN = "login"
    FORBIDDEN = "forbidden"


def _under(path: str, prefix: str) -> bool:
    return path == prefix or path.startswith(prefix + "/")


def is_public_path(path: str) -> bool:
    if path in PUBLIC_PATHS:
        return True
    # /private/reset/<token>
    if path.startswith(RESET_TOKEN_PREFIX):
        rest = path[len(RESET_TOKEN_PREFIX):]
        return bool(rest) and "/" not in rest
    return False


def is_staff_allowed(path: str) -> bool:
    if path in (NOT_ALLOWED_PATH, STAFF_HOME):
        return True
    return any(_under(path, area) for area in STAFF_AREAS)


def decide(path: str, has_session: bool, role_hint: str = None) -> GateDecision:
    """パス・セッション Cookie の有無・ロールヒントからゲートの判定を返す"""
    path = path.rstrip("/") or "/"
    if not _under(path, PROTECTED_PREFIX):
        return GateDecision.ALLOW
    if is_public_path(path):
        return GateDecision.ALLOW
    if not has_session:
        return GateDecision.LOGIN
    if role_hint == "staff":
        if _under(path, ADMIN_PREFIX) or not is_staff_allowed(path):
            return GateDecision.FORBIDDEN
    return GateDecision.ALLOW


class RoleGateMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        decision = decide(
            path,
            has_session=bool(request.cookies.get(SESSION_COOKIE)),
            role_hint=request.cookies.get(ROLE_COOKIE),
        )
        if decision is GateDecision.LOGIN:
            return RedirectResponse(LOGIN_PATH, status_code=307)
        if decision is GateDecision.FORBIDDEN:
            logger.info("Role gate rewrote %s to %s", path, NOT_ALLOWED_PATH)
            # リダイレクトではなく内部的に書き換える
            request.scope["path"] = NOT_ALLOWED_PATH
            request.scope["raw_path"] = NOT_ALLOWED_PATH.encode()
        return await call_next(request)
