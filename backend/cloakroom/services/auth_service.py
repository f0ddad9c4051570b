"""
認証サービス

ログイン認証、セッションの発行・解決・破棄、パスワードリセットを扱う。
セッションは作成時に有効期限が決まり、リクエストごとの延長は行わない。
"""

import logging
from typing import Optional

from cloakroom.config import REMEMBER_TTL_DAYS, RESET_TOKEN_TTL_MINUTES, SESSION_TTL_HOURS
from cloakroom.exceptions import AuthenticationError, NotFoundError, PermissionDenied, ValidationError
from cloakroom.models import Identity, PasswordResetToken, Role, Session, now_ms
from cloakroom.services.account_service import AccountService, normalize_email
from cloakroom.storage import Storage
from cloakroom.utils.security import (
    generate_reset_token, generate_token, hash_password, needs_rehash, verify_password,
)

logger = logging.getLogger(__name__)


def session_ttl_seconds(remember: bool = False) -> int:
    if remember:
        return REMEMBER_TTL_DAYS * 24 * 60 * 60
    return SESSION_TTL_HOURS * 60 * 60


class AuthService:

    @staticmethod
    def authenticate(storage: Storage, email: str, password: str, role: Role = Role.STAFF) -> Identity:
        """メールアドレスとパスワードを検証し、アカウントを返す"""
        email = normalize_email(email)
        repo = storage.identities(role)
        user = repo.find_one(email=email)
        if user is None:
            # ログイン種別の選択ミスならヒントを返す
            other = role.other
            if storage.identities(other).find_one(email=email) is not None:
                raise AuthenticationError(
                    f"Email exists as a {other.value} account. "
                    f"Switch the Login as option to '{other.value}'.",
                    extra={"hintWrongType": True, "expectedType": other.value},
                )
            raise AuthenticationError(f"{role.value.capitalize()} email not found")

        if not verify_password(password, user.password_hash):
            raise AuthenticationError("Invalid credentials")

        if role is Role.STAFF and not user.is_authorized:
            raise PermissionDenied("Staff account is not authorized")

        if needs_rehash(user.password_hash):
            user = user.model_copy(update={"password_hash": hash_password(password)})
            repo.save(user)
            logger.info("Upgraded password hash for %s %s", role.value, user.id)
        return user

    @staticmethod
    def create_session(storage: Storage, identity: Identity, ttl_seconds: int, now: Optional[int] = None) -> Session:
        now = now_ms() if now is None else now
        session = Session(
            token=generate_token(identity.id),
            staff_id=identity.id,
            user_type=identity.role,
            created_at=now,
            expires_at=now + ttl_seconds * 1000,
        )
        storage.sessions.save(session)
        return session

    @staticmethod
    def resolve(storage: Storage, token: Optional[str], now: Optional[int] = None) -> Optional[Identity]:
        """トークンからアカウントを解決する。期限切れ・未登録・アカウント削除済みはすべて None"""
        if not token:
            return None
        session = storage.sessions.get(token)
        if session is None or session.is_expired(now_ms() if now is None else now):
            return None
        return storage.identities(session.user_type).get(session.staff_id)

    @staticmethod
    def destroy_session(storage: Storage, token: Optional[str]) -> None:
        if token:
            storage.sessions.delete(token)

    @staticmethod
    def request_password_reset(
        storage: Storage, email: str, role: Role = Role.STAFF, now: Optional[int] = None
    ) -> Optional[PasswordResetToken]:
        """リセットトークンを発行する。該当アカウントが無ければ None（呼び出し側は成功として応答する）"""
        user = AccountService.find_by_email(storage, role, email)
        if user is None:
            logger.info("Password reset requested for unknown %s email", role.value)
            return None
        now = now_ms() if now is None else now
        record = PasswordResetToken(
            token=generate_reset_token(user.id),
            staff_id=user.id,
            user_type=role,
            created_at=now,
            expires_at=now + RESET_TOKEN_TTL_MINUTES * 60 * 1000,
        )
        storage.reset_tokens.save(record)
        return record

    @staticmethod
    def redeem_password_reset(storage: Storage, token: str, new_password: str, now: Optional[int] = None) -> Identity:
        """トークンを使用済みにしてパスワードを上書きする。1トークンにつき1回のみ"""
        if not token or not new_password:
            raise ValidationError("Missing fields")
        now = now_ms() if now is None else now
        record = storage.reset_tokens.get(token)
        if record is None or not record.is_redeemable(now):
            raise ValidationError("Invalid or expired token")

        repo = storage.identities(record.user_type)
        user = repo.get(record.staff_id)
        if user is None:
            raise NotFoundError("User not found")

        if not storage.reset_tokens.update_if(token, {"used": False}, {"used": True}):
            raise ValidationError("Invalid or expired token")

        user = user.model_copy(update={"password_hash": hash_password(new_password)})
        repo.save(user)
        return user
