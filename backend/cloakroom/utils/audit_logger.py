import logging
from typing import Any, Dict, Optional

from fastapi import Request

audit_logger = logging.getLogger("cloakroom.audit")


def client_info(request: Request):
    """IPアドレスとユーザーエージェント"""
    ip_address = request.client.host if request.client else "unknown"
    user_agent = request.headers.get("user-agent", "unknown")
    return ip_address, user_agent


def log_event(
    event_type: str,
    request: Optional[Request] = None,
    user_id: Optional[str] = None,
    email: Optional[str] = None,
    user_type: Optional[str] = None,
    details: Optional[Dict[str, Any]] = None,
    success: bool = False,
    status_code: Optional[int] = None,
):
    """認証・管理操作のイベントを監査ロガーに記録"""
    ip_address, user_agent = client_info(request) if request is not None else ("-", "-")
    record = {
        "event_type": event_type,
        "user_id": user_id,
        "email": email,
        "user_type": user_type,
        "ip_address": ip_address,
        "user_agent": user_agent,
        "resource": request.url.path if request is not None else None,
        "action": request.method if request is not None else None,
        "details": details or {},
        "success": success,
        "status_code": status_code,
    }
    level = logging.INFO if success else logging.WARNING
    audit_logger.log(level, "%s %s (%s)", event_type, email or user_id or "-", ip_address, extra={"audit": record})
