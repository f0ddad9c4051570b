"""
ドキュメントストアの共通インターフェース

コレクションごとに Repository を1つ持つ。キーはアプリケーション側の値（id / token）で、
エンジンが割り当てる主キーは外に出さない。書き込みは後勝ち（楽観ロックなし）。
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, Iterable, List, Optional, Type, TypeVar

from cloakroom.models.base import Document

T = TypeVar("T", bound=Document)


class Repository(ABC, Generic[T]):
    def __init__(self, model: Type[T], key: str = "id", unique: Iterable[str] = ()):
        self.model = model
        self.key = key
        # キー以外に一意であるべきフィールド（重複は ConflictError）
        self.unique = tuple(unique)

    def get(self, key_value: str) -> Optional[T]:
        return self.find_one(**{self.key: key_value})

    @abstractmethod
    def find_one(self, **filters: Any) -> Optional[T]:
        """等価条件に一致する最初のドキュメント"""

    @abstractmethod
    def list(
        self,
        sort_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
        **filters: Any,
    ) -> List[T]:
        """等価条件に一致するドキュメント一覧"""

    @abstractmethod
    def search(
        self,
        text: str,
        fields: Iterable[str],
        sort_by: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[T]:
        """指定フィールドのいずれかに text を含む（大文字小文字を区別しない）ドキュメント一覧"""

    @abstractmethod
    def save(self, doc: T) -> T:
        """キーで upsert する。unique フィールドが他のドキュメントと重複したら ConflictError"""

    @abstractmethod
    def update_if(self, key_value: str, expected: Dict[str, Any], changes: Dict[str, Any]) -> bool:
        """expected が現在値と一致する場合のみ changes を適用する。適用したら True"""

    @abstractmethod
    def delete(self, key_value: str) -> bool:
        """削除したら True。存在しなければ何もしない"""

    @abstractmethod
    def count(self) -> int:
        ...

    def _load(self, data: Dict[str, Any]) -> T:
        return self.model.model_validate(data)

    def _dump(self, doc: T) -> Dict[str, Any]:
        return doc.model_dump(mode="json")
