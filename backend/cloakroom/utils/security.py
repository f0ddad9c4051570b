"""
パスワードハッシュとトークン生成

bcrypt が現行方式。旧データの無塩 SHA-256（16進64文字）と、
"bcrypt$" を前置した旧形式の bcrypt も検証できる。どちらもログイン成功時に
needs_rehash が True を返し、現行形式で保存し直される。
"""

import secrets
import time

from passlib.context import CryptContext

from cloakroom.config import BCRYPT_ROUNDS

# 旧アプリが bcrypt ハッシュの前に付けていた識別子
LEGACY_BCRYPT_PREFIX = "bcrypt$"

pwd_context = CryptContext(
    schemes=["bcrypt", "hex_sha256"],
    deprecated=["hex_sha256"],
    bcrypt__rounds=BCRYPT_ROUNDS,
)


def _strip_legacy_prefix(hashed_password: str) -> str:
    if hashed_password.startswith(LEGACY_BCRYPT_PREFIX):
        return hashed_password[len(LEGACY_BCRYPT_PREFIX):]
    return hashed_password


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not hashed_password:
        return False
    try:
        return pwd_context.verify(plain_password, _strip_legacy_prefix(hashed_password))
    except (ValueError, TypeError):
        # 識別できない形式のハッシュ
        return False


def needs_rehash(hashed_password: str) -> bool:
    if hashed_password.startswith(LEGACY_BCRYPT_PREFIX):
        return True
    try:
        return pwd_context.needs_update(hashed_password)
    except (ValueError, TypeError):
        return True


def generate_token(owner_id: str) -> str:
    """<owner_id>_<ランダム>_<エポックミリ秒>"""
    return f"{owner_id}_{secrets.token_urlsafe(24)}_{int(time.time() * 1000)}"


def generate_reset_token(owner_id: str) -> str:
    return f"reset_{generate_token(owner_id)}"
