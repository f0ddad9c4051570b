"""
電話番号の確認コード

コードは6桁・有効期限付き・1回限り。照合の試行回数を数え、上限に達したら破棄する。
SMS 送信は行わない（EXPOSE_PHONE_CODE 時のみレスポンスで返す）。
"""

import logging
import re
import secrets
from typing import Optional

from cloakroom.config import PHONE_CODE_MAX_ATTEMPTS, PHONE_CODE_TTL_MINUTES
from cloakroom.exceptions import AuthenticationError, GoneError, NotFoundError, RateLimitError, ValidationError
from cloakroom.models import PhoneCode, now_ms
from cloakroom.storage import Storage

logger = logging.getLogger(__name__)

PHONE_PATTERN = re.compile(r"^\+?[0-9]{8,15}$")


def normalize_phone(raw: str) -> str:
    """数字と + 以外を除き、先頭の 00 を + に置き換える"""
    phone = re.sub(r"[^+0-9]", "", raw or "")
    return re.sub(r"^00", "+", phone)


def generate_code() -> str:
    return str(100000 + secrets.randbelow(900000))


class PhoneVerificationService:

    @staticmethod
    def request_code(storage: Storage, phone: str, now: Optional[int] = None) -> PhoneCode:
        if not phone:
            raise ValidationError("Missing phone")
        phone = normalize_phone(phone)
        if not PHONE_PATTERN.match(phone):
            raise ValidationError("Invalid phone format")
        now = now_ms() if now is None else now
        # 同じ番号の古いコードは置き換える
        entry = PhoneCode(
            phone=phone,
            code=generate_code(),
            created_at=now,
            expires_at=now + PHONE_CODE_TTL_MINUTES * 60 * 1000,
        )
        storage.phone_codes.save(entry)
        return entry

    @staticmethod
    def confirm_code(storage: Storage, phone: str, code: str, now: Optional[int] = None) -> str:
        """コードが一致すれば正規化済みの電話番号を返す"""
        if not phone or not code:
            raise ValidationError("Missing phone or code")
        phone = normalize_phone(phone)
        repo = storage.phone_codes
        entry = repo.get(phone)
        if entry is None:
            raise NotFoundError("No code requested")

        now = now_ms() if now is None else now
        if entry.is_expired(now):
            repo.delete(phone)
            raise GoneError("Code expired")
        if entry.attempts >= PHONE_CODE_MAX_ATTEMPTS:
            repo.delete(phone)
            raise RateLimitError("Too many attempts")

        attempts = entry.attempts + 1
        repo.save(entry.model_copy(update={"attempts": attempts}))
        if not secrets.compare_digest(entry.code, code.strip()):
            raise AuthenticationError("Incorrect code", extra={"attempts": attempts})

        repo.delete(phone)
        logger.info("Phone number verified after %d attempt(s)", attempts)
        return phone
