import logging
from dataclasses import dataclass

from fastapi import Request

from cloakroom.models import (
    AdminUser, Event, HandoverReport, LostClaim, PasswordResetToken, PhoneCode, Product, Role, Session,
    StaffUser,
)
from cloakroom.storage.base import Repository
from cloakroom.storage.memory import MemoryRepository
from cloakroom.storage.sql import SQLRepository

logger = logging.getLogger(__name__)


@dataclass
class Storage:
    backend: str
    staff: Repository[StaffUser]
    admins: Repository[AdminUser]
    sessions: Repository[Session]
    reset_tokens: Repository[PasswordResetToken]
    events: Repository[Event]
    handovers: Repository[HandoverReport]
    lost_claims: Repository[LostClaim]
    phone_codes: Repository[PhoneCode]
    products: Repository[Product]

    def identities(self, role: Role) -> Repository:
        """ロールに対応するアカウントのコレクション"""
        return self.admins if role is Role.ADMIN else self.staff


def memory_storage() -> Storage:
    return Storage(
        backend="memory",
        staff=MemoryRepository(StaffUser, unique=("email",)),
        admins=MemoryRepository(AdminUser, unique=("email",)),
        sessions=MemoryRepository(Session, key="token"),
        reset_tokens=MemoryRepository(PasswordResetToken, key="token"),
        events=MemoryRepository(Event),
        handovers=MemoryRepository(HandoverReport),
        lost_claims=MemoryRepository(LostClaim),
        phone_codes=MemoryRepository(PhoneCode, key="phone"),
        products=MemoryRepository(Product),
    )


def sql_storage(database_url: str) -> Storage:
    from cloakroom.database import Base, make_engine, make_session_factory
    from cloakroom.models import tables

    engine = make_engine(database_url)
    # テーブル作成
    Base.metadata.create_all(bind=engine)
    factory = make_session_factory(engine)
    return Storage(
        backend="sql",
        staff=SQLRepository(StaffUser, tables.StaffTable, factory, unique=("email",)),
        admins=SQLRepository(AdminUser, tables.AdminTable, factory, unique=("email",)),
        sessions=SQLRepository(Session, tables.SessionTable, factory, key="token"),
        reset_tokens=SQLRepository(PasswordResetToken, tables.PasswordResetTokenTable, factory, key="token"),
        events=SQLRepository(Event, tables.EventTable, factory),
        handovers=SQLRepository(HandoverReport, tables.HandoverTable, factory),
        lost_claims=SQLRepository(LostClaim, tables.LostClaimTable, factory),
        phone_codes=SQLRepository(PhoneCode, tables.PhoneCodeTable, factory, key="phone"),
        products=SQLRepository(Product, tables.ProductTable, factory),
    )


def build_storage(database_url: str) -> Storage:
    if not database_url:
        logger.warning("DATABASE_URL not set. Using in-memory store (data is lost on restart).")
        return memory_storage()
    return sql_storage(database_url)


def get_storage(request: Request) -> Storage:
    return request.app.state.storage
