from enum import Enum
from typing import Annotated, Literal, Optional, Union
from pydantic import Field
from cloakroom.models.base import Document


class Role(str, Enum):
    STAFF = "staff"
    ADMIN = "admin"

    @property
    def other(self) -> "Role":
        return Role.ADMIN if self is Role.STAFF else Role.STAFF


class BaseIdentity(Document):
    id: str
    full_name: str
    email: str
    password_hash: str
    created_at: int

    def public(self, exclude=None) -> dict:
        return super().public(exclude={"password_hash"} | set(exclude or ()))


class StaffUser(BaseIdentity):
    type: Literal["staff"] = "staff"
    # サインイン・ハンドオーバー操作の可否
    is_authorized: bool = True
    # 操作を許可されたイベント（同時に1つのみ）
    authorized_event_id: Optional[str] = None

    @property
    def role(self) -> Role:
        return Role.STAFF


class AdminUser(BaseIdentity):
    type: Literal["admin"] = "admin"

    @property
    def role(self) -> Role:
        return Role.ADMIN


Identity = Annotated[Union[StaffUser, AdminUser], Field(discriminator="type")]

IDENTITY_MODELS = {Role.STAFF: StaffUser, Role.ADMIN: AdminUser}
