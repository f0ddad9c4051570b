from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class RequestBody(BaseModel):
    """リクエストボディの基底クラス（camelCase・snake_case どちらでも受け付ける）"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# 認証
class LoginRequest(RequestBody):
    email: Optional[str] = None
    password: Optional[str] = None
    remember: bool = False
    type: Optional[str] = None


class RegisterRequest(RequestBody):
    full_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class ResetRequest(RequestBody):
    email: Optional[str] = None
    type: Optional[str] = None


class ResetConfirm(RequestBody):
    token: Optional[str] = None
    password: Optional[str] = None


# アカウント管理
class AccountCreate(RequestBody):
    full_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class AccountUpdate(RequestBody):
    id: Optional[str] = None
    full_name: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class StaffCreate(AccountCreate):
    is_authorized: bool = True
    authorized_event_id: Optional[str] = None


class StaffUpdate(AccountUpdate):
    is_authorized: Optional[bool] = None
    authorized_event_id: Optional[str] = None


# イベント
class EventCreate(RequestBody):
    id: Optional[str] = None
    name: Optional[str] = None
    starts_at: Optional[int] = None
    ends_at: Optional[int] = None


class EventUpdate(RequestBody):
    id: Optional[str] = None
    name: Optional[str] = None
    starts_at: Optional[int] = None
    ends_at: Optional[int] = None


# ハンドオーバー
class HandoverCreate(RequestBody):
    id: Optional[str] = None
    coat_number: Optional[str] = None
    full_name: Optional[str] = None
    event_id: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    staff: Optional[str] = None
    notes: Optional[str] = None
    cloth_type: Optional[str] = None
    language: Optional[str] = None
    photos: Optional[List[str]] = None


# 遺失物
class LostClaimCreate(RequestBody):
    id: Optional[str] = None
    full_name: Optional[str] = None
    address_line1: Optional[str] = None
    address_line2: Optional[str] = None
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    photos: Optional[List[str]] = None


class LostClaimUpdate(RequestBody):
    id: Optional[str] = None
    resolved: Optional[bool] = None


# 電話番号の確認
class PhoneCodeRequest(RequestBody):
    phone: Optional[str] = None


class PhoneCodeConfirm(RequestBody):
    phone: Optional[str] = None
    code: Optional[str] = None


# 商品
class ProductVariantIn(RequestBody):
    id: Optional[str] = None
    name: Optional[str] = None
    price_delta: Optional[float] = None
    stock: Optional[float] = None
    active: Optional[bool] = None


class ProductCreate(RequestBody):
    name: Optional[str] = None
    description: Optional[str] = None
    photos: Optional[List[str]] = None
    main_photo_index: Optional[int] = None
    stock: Optional[float] = None
    price: Optional[float] = None
    sku: Optional[str] = None
    variants: Optional[List[ProductVariantIn]] = None
    active: Optional[bool] = None
    archived: Optional[bool] = None
    is_featured: Optional[bool] = None


class ProductUpdate(ProductCreate):
    id: Optional[str] = None
