from fastapi import APIRouter, Depends, Query, Request

from cloakroom.exceptions import ValidationError
from cloakroom.models import Role
from cloakroom.schemas import ProductCreate, ProductUpdate
from cloakroom.services.product_service import ProductService, page_bounds
from cloakroom.storage import Storage, get_storage
from cloakroom.utils.audit_logger import log_event
from cloakroom.utils.session_auth import get_optional_identity, require_admin

router = APIRouter(prefix="/api/products", tags=["products"])


def _is_admin(identity) -> bool:
    return identity is not None and identity.role is Role.ADMIN


@router.get("")
async def list_products(q: str = Query(""), page: int = Query(1), limit: int = Query(None),
                        include_all: bool = Query(False, alias="all"),
                        identity=Depends(get_optional_identity), storage: Storage = Depends(get_storage)):
    """商品一覧（新しい順）。管理者は all=1 で非公開・アーカイブ済みも含める"""
    page, limit = page_bounds(page, limit)
    items, has_more = ProductService.list(storage, q, page, limit, include_hidden=include_all and _is_admin(identity))
    return {"items": [p.public() for p in items], "page": page, "limit": limit, "hasMore": has_more}


@router.get("/{product_id}")
async def get_product(product_id: str, identity=Depends(get_optional_identity),
                      storage: Storage = Depends(get_storage)):
    return ProductService.get(storage, product_id.strip(), include_hidden=_is_admin(identity)).public()


@router.post("", status_code=201)
async def create_product(request: Request, data: ProductCreate, current_user=Depends(require_admin),
                         storage: Storage = Depends(get_storage)):
    """商品を作成"""
    product = ProductService.create(storage, data.model_dump(exclude_unset=True))
    log_event("product_created", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"product_id": product.id}, success=True, status_code=201)
    return product.public()


@router.patch("")
async def update_product(request: Request, data: ProductUpdate, current_user=Depends(require_admin),
                         storage: Storage = Depends(get_storage)):
    """商品を更新（指定されたフィールドのみ）"""
    product_id = (data.id or "").strip()
    if not product_id:
        raise ValidationError("Missing id")
    product = ProductService.update(storage, product_id, data.model_dump(exclude_unset=True))
    log_event("product_updated", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"product_id": product.id}, success=True, status_code=200)
    return product.public()


@router.delete("")
async def delete_product(request: Request, id: str = Query(None), current_user=Depends(require_admin),
                         storage: Storage = Depends(get_storage)):
    """商品を削除"""
    product_id = (id or "").strip()
    if not product_id:
        raise ValidationError("Missing id")
    ProductService.delete(storage, product_id)
    log_event("product_deleted", request, user_id=current_user.id, email=current_user.email, user_type="admin",
              details={"product_id": product_id}, success=True, status_code=200)
    return {"ok": True}
