import copy
import threading
from typing import Any, Dict, Iterable, List, Optional

from cloakroom.exceptions import ConflictError
from cloakroom.storage.base import Repository, T


class MemoryRepository(Repository[T]):
    """プロセス内の辞書に保存するリポジトリ（再起動で消える・複数インスタンス非対応）"""

    def __init__(self, model, key: str = "id", unique=()):
        super().__init__(model, key, unique)
        self._docs: Dict[str, Dict[str, Any]] = {}
        self.lock = threading.Lock()

    @staticmethod
    def _matches(data: Dict[str, Any], filters: Dict[str, Any]) -> bool:
        return all(data.get(field) == value for field, value in filters.items())

    def _sorted(self, rows: List[Dict[str, Any]], sort_by, descending, limit) -> List[T]:
        if sort_by:
            rows = sorted(rows, key=lambda d: (d.get(sort_by) is None, d.get(sort_by)), reverse=descending)
        if limit is not None:
            rows = rows[:limit]
        return [self._load(copy.deepcopy(d)) for d in rows]

    def find_one(self, **filters: Any) -> Optional[T]:
        with self.lock:
            if set(filters) == {self.key}:
                data = self._docs.get(filters[self.key])
                return self._load(copy.deepcopy(data)) if data is not None else None
            for data in self._docs.values():
                if self._matches(data, filters):
                    return self._load(copy.deepcopy(data))
        return None

    def list(self, sort_by=None, descending=False, limit=None, **filters: Any) -> List[T]:
        with self.lock:
            rows = [d for d in self._docs.values() if self._matches(d, filters)]
        return self._sorted(rows, sort_by, descending, limit)

    def search(self, text: str, fields: Iterable[str], sort_by=None, descending=False, limit=None) -> List[T]:
        needle = text.lower()
        fields = list(fields)
        with self.lock:
            rows = [
                d for d in self._docs.values()
                if any(needle in str(d.get(f) or "").lower() for f in fields)
            ]
        return self._sorted(rows, sort_by, descending, limit)

    def save(self, doc: T) -> T:
        data = self._dump(doc)
        with self.lock:
            for field in self.unique:
                for other in self._docs.values():
                    if other[self.key] != data[self.key] and other.get(field) == data.get(field):
                        raise ConflictError("Duplicate value")
            self._docs[data[self.key]] = data
        return doc

    def update_if(self, key_value: str, expected: Dict[str, Any], changes: Dict[str, Any]) -> bool:
        with self.lock:
            data = self._docs.get(key_value)
            if data is None or not self._matches(data, expected):
                return False
            data.update(changes)
            return True

    def delete(self, key_value: str) -> bool:
        with self.lock:
            return self._docs.pop(key_value, None) is not None

    def count(self) -> int:
        with self.lock:
            return len(self._docs)
