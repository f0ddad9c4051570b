import logging
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import or_, select, update, delete, func
from sqlalchemy.exc import IntegrityError

from cloakroom.exceptions import ConflictError
from cloakroom.storage.base import Repository, T

logger = logging.getLogger(__name__)


class SQLRepository(Repository[T]):
    """SQLAlchemy のテーブル1つをドキュメントコレクションとして扱う"""

    def __init__(self, model, table, session_factory, key: str = "id", unique=()):
        # unique はテーブルの一意制約で担保する
        super().__init__(model, key, unique)
        self.table = table
        self.session_factory = session_factory
        self._columns = [c.name for c in table.__table__.columns if c.name != "pk"]

    def _row_to_doc(self, row) -> T:
        return self._load({name: getattr(row, name) for name in self._columns})

    def _query(self, stmt, sort_by, descending, limit):
        if sort_by:
            column = getattr(self.table, sort_by)
            stmt = stmt.order_by(column.desc() if descending else column.asc())
        if limit is not None:
            stmt = stmt.limit(limit)
        with self.session_factory() as db:
            return [self._row_to_doc(row) for row in db.scalars(stmt).all()]

    def find_one(self, **filters: Any) -> Optional[T]:
        with self.session_factory() as db:
            row = db.scalars(select(self.table).filter_by(**filters).limit(1)).first()
            return self._row_to_doc(row) if row is not None else None

    def list(self, sort_by=None, descending=False, limit=None, **filters: Any) -> List[T]:
        return self._query(select(self.table).filter_by(**filters), sort_by, descending, limit)

    def search(self, text: str, fields: Iterable[str], sort_by=None, descending=False, limit=None) -> List[T]:
        # % と _ は文字としてエスケープする
        conditions = [getattr(self.table, f).icontains(text, autoescape=True) for f in fields]
        return self._query(select(self.table).where(or_(*conditions)), sort_by, descending, limit)

    def save(self, doc: T) -> T:
        data = {k: v for k, v in self._dump(doc).items() if k in self._columns}
        key_column = getattr(self.table, self.key)
        with self.session_factory() as db:
            try:
                row = db.scalars(select(self.table).where(key_column == data[self.key])).first()
                if row is None:
                    db.add(self.table(**data))
                else:
                    for name, value in data.items():
                        setattr(row, name, value)
                db.commit()
            except IntegrityError as e:
                db.rollback()
                logger.info("Unique constraint violated on %s: %s", self.table.__tablename__, e.orig)
                raise ConflictError("Duplicate value") from e
            except Exception:
                db.rollback()
                raise
        return doc

    def update_if(self, key_value: str, expected: Dict[str, Any], changes: Dict[str, Any]) -> bool:
        stmt = update(self.table).where(getattr(self.table, self.key) == key_value)
        for name, value in expected.items():
            stmt = stmt.where(getattr(self.table, name) == value)
        with self.session_factory() as db:
            try:
                result = db.execute(stmt.values(**changes))
                db.commit()
            except Exception:
                db.rollback()
                raise
            return result.rowcount > 0

    def delete(self, key_value: str) -> bool:
        with self.session_factory() as db:
            try:
                result = db.execute(delete(self.table).where(getattr(self.table, self.key) == key_value))
                db.commit()
            except Exception:
                db.rollback()
                raise
            return result.rowcount > 0

    def count(self) -> int:
        with self.session_factory() as db:
            return db.scalar(select(func.count()).select_from(self.table))
