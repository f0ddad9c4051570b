"""
商品カタログ

公開一覧・詳細は active かつ未アーカイブのものだけ。管理者は all=1 で全件を見られる。
"""

import logging
import math
import secrets
from typing import List, Optional, Tuple

from cloakroom.config import PRODUCT_PAGE_SIZE, PRODUCT_PAGE_SIZE_MAX
from cloakroom.exceptions import NotFoundError, ValidationError
from cloakroom.models import Product, ProductVariant, now_ms
from cloakroom.storage import Storage

logger = logging.getLogger(__name__)


def _non_negative_int(value) -> Optional[int]:
    if value is None or not math.isfinite(value):
        return None
    return max(0, math.floor(value))


def _price(value) -> Optional[float]:
    if value is None or not math.isfinite(value):
        return None
    return max(0.0, float(value))


def _clean_variants(variants: List[dict]) -> List[ProductVariant]:
    cleaned = []
    for v in variants:
        name = (v.get("name") or "").strip()
        if not name:
            continue
        price_delta = v.get("price_delta")
        cleaned.append(ProductVariant(
            id=v.get("id") or f"var_{secrets.token_hex(3)}",
            name=name,
            price_delta=price_delta if price_delta is not None and math.isfinite(price_delta) else None,
            stock=_non_negative_int(v.get("stock")),
            active=v.get("active") is not False,
        ))
    return cleaned


def _main_photo_index(photos: List[str], index: Optional[int]) -> int:
    if not photos or index is None or not 0 <= index < len(photos):
        return 0
    return index


def page_bounds(page: Optional[int], limit: Optional[int]) -> Tuple[int, int]:
    page = max(1, page or 1)
    limit = min(PRODUCT_PAGE_SIZE_MAX, max(1, limit or PRODUCT_PAGE_SIZE))
    return page, limit


class ProductService:

    @staticmethod
    def list(storage: Storage, q: str = "", page: int = 1, limit: int = PRODUCT_PAGE_SIZE,
             include_hidden: bool = False) -> Tuple[List[Product], bool]:
        """1ページ分の商品と、次のページがあるかどうか"""
        q = (q or "").strip()
        repo = storage.products
        if q:
            items = repo.search(q, ["name", "description"], sort_by="created_at", descending=True)
        else:
            items = repo.list(sort_by="created_at", descending=True)
        if not include_hidden:
            items = [p for p in items if p.is_public]
        start = (page - 1) * limit
        return items[start:start + limit], len(items) > page * limit

    @staticmethod
    def get(storage: Storage, product_id: str, include_hidden: bool = False) -> Product:
        product = storage.products.get(product_id)
        if product is None or (not include_hidden and not product.is_public):
            raise NotFoundError()
        return product

    @staticmethod
    def create(storage: Storage, data: dict, now: Optional[int] = None) -> Product:
        name = (data.get("name") or "").strip()
        if not name:
            raise ValidationError("Name is required")
        now = now_ms() if now is None else now
        photos = [p for p in data.get("photos") or [] if p]
        product = Product(
            id=f"prod_{now}_{secrets.token_hex(3)}",
            name=name,
            description=(data.get("description") or "").strip() or None,
            photos=photos,
            main_photo_index=_main_photo_index(photos, data.get("main_photo_index")),
            stock=_non_negative_int(data.get("stock")) or 0,
            price=_price(data.get("price")),
            sku=(data.get("sku") or "").strip() or None,
            variants=_clean_variants(data.get("variants") or []),
            active=data.get("active") is not False,
            archived=data.get("archived") is True,
            is_featured=data.get("is_featured") is True,
            created_at=now,
            updated_at=now,
        )
        storage.products.save(product)
        logger.info("Created product %s", product.id)
        return product

    @staticmethod
    def update(storage: Storage, product_id: str, data: dict, now: Optional[int] = None) -> Product:
        product = storage.products.get(product_id)
        if product is None:
            raise NotFoundError()

        changes = {"updated_at": now_ms() if now is None else now}
        if data.get("name") is not None:
            changes["name"] = data["name"].strip()
        if data.get("description") is not None:
            changes["description"] = data["description"].strip()
        if data.get("photos") is not None:
            changes["photos"] = [p for p in data["photos"] if p]
        if data.get("stock") is not None:
            changes["stock"] = _non_negative_int(data["stock"]) or 0
        if data.get("price") is not None:
            changes["price"] = _price(data["price"])
        if data.get("sku") is not None:
            changes["sku"] = data["sku"].strip()
        if data.get("variants") is not None:
            changes["variants"] = _clean_variants(data["variants"])
        for flag in ("active", "archived", "is_featured"):
            if data.get(flag) is not None:
                changes[flag] = data[flag]

        photos = changes.get("photos", product.photos)
        index = data.get("main_photo_index")
        if index is None:
            index = product.main_photo_index
        changes["main_photo_index"] = _main_photo_index(photos, index)

        if "name" in changes and not changes["name"]:
            raise ValidationError("Name is required")
        updated = product.model_copy(update=changes)
        storage.products.save(updated)
        return updated

    @staticmethod
    def delete(storage: Storage, product_id: str) -> bool:
        return storage.products.delete(product_id)
