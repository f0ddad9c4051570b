import logging
import secrets
from typing import List, Optional

from cloakroom.config import LIST_LIMIT
from cloakroom.exceptions import ConflictError, NotFoundError, ValidationError
from cloakroom.models import IDENTITY_MODELS, Identity, Role, now_ms
from cloakroom.storage import Storage
from cloakroom.utils.security import hash_password

logger = logging.getLogger(__name__)

# 未指定と明示的な None（クリア）を区別するための番兵
UNSET = object()


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def new_identity_id(role: Role) -> str:
    return f"{role.value}_{now_ms()}_{secrets.token_hex(3)}"


class AccountService:
    """スタッフ・管理者アカウントの管理"""

    @staticmethod
    def find_by_email(storage: Storage, role: Role, email: str) -> Optional[Identity]:
        return storage.identities(role).find_one(email=normalize_email(email))

    @staticmethod
    def _ensure_unique_email(storage: Storage, role: Role, email: str, exclude_id: Optional[str] = None):
        existing = storage.identities(role).find_one(email=email)
        if existing is not None and existing.id != exclude_id:
            raise ConflictError("Email already exists")

    @staticmethod
    def _save(storage: Storage, role: Role, user):
        try:
            return storage.identities(role).save(user)
        except ConflictError:
            # 事前チェック後に同じメールアドレスが登録された場合
            raise ConflictError("Email already exists")

    @staticmethod
    def create(
        storage: Storage,
        role: Role,
        full_name: str,
        email: str,
        password: str,
        is_authorized: bool = True,
        authorized_event_id: Optional[str] = None,
    ):
        full_name = (full_name or "").strip()
        email = normalize_email(email)
        if not full_name or not email or not password:
            raise ValidationError("Missing fields")
        AccountService._ensure_unique_email(storage, role, email)

        fields = dict(
            id=new_identity_id(role),
            full_name=full_name,
            email=email,
            password_hash=hash_password(password),
            created_at=now_ms(),
        )
        if role is Role.STAFF:
            fields.update(is_authorized=is_authorized, authorized_event_id=authorized_event_id or None)
        user = IDENTITY_MODELS[role](**fields)
        AccountService._save(storage, role, user)
        logger.info("Created %s account %s", role.value, user.id)
        return user

    @staticmethod
    def update(
        storage: Storage,
        role: Role,
        user_id: str,
        full_name: Optional[str] = None,
        email: Optional[str] = None,
        password: Optional[str] = None,
        is_authorized: Optional[bool] = None,
        authorized_event_id=UNSET,
    ):
        repo = storage.identities(role)
        user = repo.get(user_id)
        if user is None:
            raise NotFoundError()

        changes = {}
        if full_name:
            changes["full_name"] = full_name.strip()
        if email:
            changes["email"] = normalize_email(email)
            AccountService._ensure_unique_email(storage, role, changes["email"], exclude_id=user_id)
        if password:
            changes["password_hash"] = hash_password(password)
        if role is Role.STAFF:
            if is_authorized is not None:
                changes["is_authorized"] = is_authorized
            if authorized_event_id is not UNSET:
                # 空文字・None は割り当て解除
                changes["authorized_event_id"] = authorized_event_id or None

        updated = user.model_copy(update=changes)
        AccountService._save(storage, role, updated)
        return updated

    @staticmethod
    def delete(storage: Storage, role: Role, user_id: str) -> bool:
        return storage.identities(role).delete(user_id)

    @staticmethod
    def list(storage: Storage, role: Role, q: str = "") -> List[Identity]:
        repo = storage.identities(role)
        q = (q or "").strip()
        if q:
            return repo.search(q, ["full_name", "email"], sort_by="created_at", descending=True, limit=LIST_LIMIT)
        return repo.list(sort_by="created_at", descending=True, limit=LIST_LIMIT)
