"""
セッション Cookie 認証ユーティリティ
保護されたハンドラはロールヒント Cookie ではなく、必ずここでセッションを再検証する。
"""

from typing import Optional

from fastapi import Depends, Request

from cloakroom.config import SESSION_COOKIE
from cloakroom.exceptions import AuthenticationError, PermissionDenied
from cloakroom.models import Identity, Role
from cloakroom.services.auth_service import AuthService
from cloakroom.storage import Storage, get_storage


def get_session_token(request: Request) -> Optional[str]:
    return request.cookies.get(SESSION_COOKIE)


async def get_optional_identity(request: Request, storage: Storage = Depends(get_storage)) -> Optional[Identity]:
    """Cookie のセッションを解決する。未ログインなら None"""
    return AuthService.resolve(storage, get_session_token(request))


async def get_current_identity(identity=Depends(get_optional_identity)) -> Identity:
    """ログイン必須。セッションが無効・期限切れの場合は 401"""
    if identity is None:
        raise AuthenticationError("Unauthorized")
    return identity


async def require_admin(current_user=Depends(get_current_identity)):
    """管理者ロールを要求する依存関係。管理者でなければ 403"""
    if current_user.role is not Role.ADMIN:
        raise PermissionDenied("Forbidden")
    return current_user
