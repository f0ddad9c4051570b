from sqlalchemy import Column, Integer, BigInteger, String, Boolean, Float, JSON
from cloakroom.database import Base

# pk はエンジン側の主キー。アプリケーションは id / token で参照する。


class StaffTable(Base):
    __tablename__ = "staff"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    is_authorized = Column(Boolean, default=True)
    authorized_event_id = Column(String, nullable=True)
    created_at = Column(BigInteger, nullable=False)


class AdminTable(Base):
    __tablename__ = "admins"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)
    created_at = Column(BigInteger, nullable=False)


class SessionTable(Base):
    __tablename__ = "sessions"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String, unique=True, index=True, nullable=False)
    staff_id = Column(String, index=True, nullable=False)
    user_type = Column(String, default="staff")
    created_at = Column(BigInteger, nullable=False)
    expires_at = Column(BigInteger, nullable=False)


class PasswordResetTokenTable(Base):
    __tablename__ = "password_reset_tokens"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    token = Column(String, unique=True, index=True, nullable=False)
    staff_id = Column(String, index=True, nullable=False)
    user_type = Column(String, default="staff")
    created_at = Column(BigInteger, nullable=False)
    expires_at = Column(BigInteger, nullable=False)
    used = Column(Boolean, default=False)


class EventTable(Base):
    __tablename__ = "events"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    starts_at = Column(BigInteger, index=True, nullable=False)
    ends_at = Column(BigInteger, nullable=False)
    created_at = Column(BigInteger, nullable=False)
    updated_at = Column(BigInteger, nullable=True)


class HandoverTable(Base):
    __tablename__ = "handovers"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    coat_number = Column(String, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    event_id = Column(String, index=True, nullable=True)
    event_name = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    staff = Column(String, nullable=True)
    notes = Column(String, nullable=True)
    cloth_type = Column(String, nullable=True)
    language = Column(String, nullable=True)
    photos = Column(JSON, default=list)
    created_at = Column(BigInteger, index=True, nullable=False)


class LostClaimTable(Base):
    __tablename__ = "lost_claims"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    full_name = Column(String, nullable=False)
    address_line1 = Column(String, nullable=False)
    address_line2 = Column(String, nullable=True)
    city = Column(String, nullable=True)
    postal_code = Column(String, nullable=True)
    country = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    email = Column(String, nullable=True)
    photos = Column(JSON, default=list)
    created_at = Column(BigInteger, index=True, nullable=False)
    resolved = Column(Boolean, default=False)
    resolved_at = Column(BigInteger, nullable=True)


class PhoneCodeTable(Base):
    __tablename__ = "phone_codes"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    phone = Column(String, unique=True, index=True, nullable=False)
    code = Column(String, nullable=False)
    attempts = Column(Integer, default=0)
    created_at = Column(BigInteger, nullable=False)
    expires_at = Column(BigInteger, nullable=False)


class ProductTable(Base):
    __tablename__ = "products"

    pk = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    description = Column(String, nullable=True)
    photos = Column(JSON, default=list)
    main_photo_index = Column(Integer, default=0)
    stock = Column(Integer, default=0)
    price = Column(Float, nullable=True)
    sku = Column(String, nullable=True)
    variants = Column(JSON, default=list)
    active = Column(Boolean, default=True)
    archived = Column(Boolean, default=False)
    is_featured = Column(Boolean, default=False)
    created_at = Column(BigInteger, index=True, nullable=False)
    updated_at = Column(BigInteger, nullable=False)
