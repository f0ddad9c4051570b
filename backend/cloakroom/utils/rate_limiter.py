"""
IP 単位のレート制限（スライディングウィンドウ）

ログインは失敗した試行だけを数える（record）。同じ NAT 配下のスタッフが
続けてログインしてもブロックされない。API 全体は is_allowed で全リクエストを数える。
"""

import threading
import time
from collections import defaultdict, deque


class RateLimiter:
    def __init__(self, max_attempts: int, window_seconds: int, clock=time.monotonic):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self.clock = clock
        self._hits = defaultdict(deque)
        self.lock = threading.Lock()

    def _prune(self, identifier: str, now: float) -> deque:
        hits = self._hits[identifier]
        while hits and hits[0] <= now - self.window_seconds:
            hits.popleft()
        return hits

    def is_blocked(self, identifier: str) -> bool:
        """試行を記録せずに上限到達かどうかを返す"""
        with self.lock:
            return len(self._prune(identifier, self.clock())) >= self.max_attempts

    def record(self, identifier: str) -> None:
        with self.lock:
            now = self.clock()
            self._prune(identifier, now).append(now)

    def is_allowed(self, identifier: str) -> bool:
        """上限未満なら試行を記録して True"""
        with self.lock:
            now = self.clock()
            hits = self._prune(identifier, now)
            if len(hits) >= self.max_attempts:
                return False
            hits.append(now)
            return True

    def retry_after(self, identifier: str) -> int:
        """ブロックが解除されるまでの秒数"""
        with self.lock:
            now = self.clock()
            hits = self._prune(identifier, now)
            if len(hits) < self.max_attempts:
                return 0
            return max(0, int(hits[0] + self.window_seconds - now))

    def reset(self, identifier: str = None) -> None:
        with self.lock:
            if identifier is None:
                self._hits.clear()
            else:
                self._hits.pop(identifier, None)


# 5分間に失敗5回まで
login_limiter = RateLimiter(max_attempts=5, window_seconds=300)
# 1分間に100リクエストまで
api_limiter = RateLimiter(max_attempts=100, window_seconds=60)
