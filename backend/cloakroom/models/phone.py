from cloakroom.models.base import Document


class PhoneCode(Document):
    # 電話番号（正規化済み）ごとに最新の1件だけを保持する
    phone: str
    code: str
    attempts: int = 0
    created_at: int
    expires_at: int

    def is_expired(self, now: int) -> bool:
        return self.expires_at < now
