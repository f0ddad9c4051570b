import hashlib
import re

from cloakroom.utils.security import (
    LEGACY_BCRYPT_PREFIX, generate_reset_token, generate_token, hash_password, needs_rehash, verify_password,
)


def test_hash_and_verify():
    digest = hash_password("s3cret-pass")
    assert digest != "s3cret-pass"
    assert verify_password("s3cret-pass", digest)
    assert not verify_password("wrong", digest)
    assert not needs_rehash(digest)


def test_hash_is_salted():
    assert hash_password("same") != hash_password("same")


def test_legacy_sha256_digest_verifies_and_needs_rehash():
    legacy = hashlib.sha256(b"old-password").hexdigest()
    assert verify_password("old-password", legacy)
    assert not verify_password("other", legacy)
    assert needs_rehash(legacy)


def test_verify_malformed_digest_returns_false():
    assert not verify_password("anything", "")
    assert not verify_password("anything", "not-a-hash")


def test_generate_token_contains_owner_and_timestamp():
    token = generate_token("staff_1")
    assert re.fullmatch(r"staff_1_[A-Za-z0-9_\-]+_\d{13}", token)
    assert generate_token("staff_1") != token


def test_reset_token_prefix():
    assert generate_reset_token("staff_1").startswith("reset_staff_1_")


def test_prefixed_bcrypt_digest_verifies_and_needs_rehash():
    stored = LEGACY_BCRYPT_PREFIX + hash_password("orig-pass")
    assert verify_password("orig-pass", stored)
    assert not verify_password("wrong", stored)
    assert needs_rehash(stored)
