"""
API 例外クラス

サービス層はこれらを送出し、main.py のハンドラが {"error": message, ...} に変換する。
"""

from typing import Any, Dict, Optional


class CloakroomError(Exception):
    status_code = 500

    def __init__(self, message: str, extra: Optional[Dict[str, Any]] = None):
        self.message = message
        self.extra = extra or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.message, **self.extra}


class ValidationError(CloakroomError):
    status_code = 400


class AuthenticationError(CloakroomError):
    status_code = 401


class PermissionDenied(CloakroomError):
    status_code = 403


class NotFoundError(CloakroomError):
    status_code = 404

    def __init__(self, message: str = "Not found", extra=None):
        super().__init__(message, extra)


class ConflictError(CloakroomError):
    status_code = 409


class GoneError(CloakroomError):
    status_code = 410


class RateLimitError(CloakroomError):
    status_code = 429
