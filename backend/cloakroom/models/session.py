from cloakroom.models.base import Document
from cloakroom.models.identity import Role


class Session(Document):
    token: str
    # 管理者セッションでも互換性のため staff_id に ID を保存する
    staff_id: str
    user_type: Role = Role.STAFF
    created_at: int
    expires_at: int

    def is_expired(self, now: int) -> bool:
        return self.expires_at < now


class PasswordResetToken(Document):
    token: str
    staff_id: str
    user_type: Role = Role.STAFF
    created_at: int
    expires_at: int
    used: bool = False

    def is_redeemable(self, now: int) -> bool:
        return not self.used and self.expires_at >= now
