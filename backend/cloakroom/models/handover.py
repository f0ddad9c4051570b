from typing import List, Optional
from pydantic import Field
from cloakroom.models.base import Document


class HandoverReport(Document):
    id: str
    coat_number: str
    full_name: str
    # 作成時にアクティブだったイベント（名称は印刷用のスナップショット）
    event_id: Optional[str] = None
    event_name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    staff: Optional[str] = None
    notes: Optional[str] = None
    cloth_type: Optional[str] = None
    language: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    created_at: int
