from typing import List, Optional
from pydantic import Field
from cloakroom.models.base import Document


class LostClaim(Document):
    """来場者からの遺失物の問い合わせ（返送先住所つき）"""
    id: str
    full_name: str
    address_line1: str
    address_line2: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    created_at: int
    resolved: bool = False
    resolved_at: Optional[int] = None
