from typing import List, Optional
from pydantic import Field
from cloakroom.models.base import Document


class ProductVariant(Document):
    id: str
    name: str
    # 商品の基本価格への加減算
    price_delta: Optional[float] = None
    # 未指定なら商品の在庫を使う
    stock: Optional[int] = None
    active: bool = True


class Product(Document):
    id: str
    name: str
    description: Optional[str] = None
    photos: List[str] = Field(default_factory=list)
    main_photo_index: int = 0
    stock: int = 0
    price: Optional[float] = None
    sku: Optional[str] = None
    variants: List[ProductVariant] = Field(default_factory=list)
    active: bool = True
    # アーカイブ済みは active でも公開一覧に出さない
    archived: bool = False
    is_featured: bool = False
    created_at: int
    updated_at: int

    @property
    def is_public(self) -> bool:
        return self.active and not self.archived
