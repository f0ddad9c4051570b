import logging
import secrets
import string

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from cloakroom.config import (
    CORS_ORIGINS, DATABASE_URL, DEBUG, DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD, LOG_LEVEL, VERSION,
)
from cloakroom.exceptions import CloakroomError
from cloakroom.models import Role
from cloakroom.routes import admin, auth, events, handover, health, lost, pages, phone, products
from cloakroom.services.account_service import AccountService
from cloakroom.storage import Storage, build_storage
from cloakroom.utils.rate_limiter import api_limiter
from cloakroom.utils.role_gate import RoleGateMiddleware

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
logger = logging.getLogger(__name__)


def _random_password(length: int = 16) -> str:
    """英字+数字を必ず含むランダムパスワードを生成"""
    alphabet = string.ascii_letters + string.digits
    while True:
        pw = ''.join(secrets.choice(alphabet) for _ in range(length))
        if any(c.isalpha() for c in pw) and any(c.isdigit() for c in pw):
            return pw


def create_default_admin(storage: Storage):
    """管理者が1人もいない場合は初期管理者を作成"""
    if storage.admins.count() > 0:
        return None
    init_pw = DEFAULT_ADMIN_PASSWORD or _random_password()
    admin = AccountService.create(storage, Role.ADMIN, "Administrator", DEFAULT_ADMIN_EMAIL, init_pw)
    logger.warning("Created initial admin account %s", admin.email)
    if not DEFAULT_ADMIN_PASSWORD:
        logger.warning("Initial admin password: %s  <- change it after first login", init_pw)
    return admin


# HTTPセキュリティヘッダーミドルウェア
class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=(self)"
        if not DEBUG:
            response.headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"
        return response


# API全体レート制限ミドルウェア（IP単位: 1分間に100リクエストまで）
class APIRateLimitMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.url.path.startswith("/api/") and request.method != "OPTIONS":
            ip_address = request.client.host if request.client else "unknown"
            if not api_limiter.is_allowed(ip_address):
                remaining = api_limiter.retry_after(ip_address)
                return JSONResponse(
                    status_code=429,
                    content={"error": f"Too many requests. Try again in {remaining} seconds"},
                )
        return await call_next(request)


def register_error_handlers(app: FastAPI):
    @app.exception_handler(CloakroomError)
    async def cloakroom_error_handler(request: Request, exc: CloakroomError):
        if exc.status_code >= 500:
            logger.error("%s %s: %s", request.method, request.url.path, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.detail}, headers=exc.headers)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        fields = [".".join(str(p) for p in e.get("loc", ()) if p != "body") for e in errors]
        return JSONResponse(status_code=400, content={"error": "Invalid request", "fields": fields})

    @app.exception_handler(Exception)
    async def unexpected_error_handler(request: Request, exc: Exception):
        # 内部エラーの詳細はクライアントに返さない
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app(storage: Storage = None) -> FastAPI:
    # DEBUGモード時のみドキュメントエンドポイントを公開
    app = FastAPI(
        title="Cloakroom API",
        description="Cloakroom handovers, staff and events",
        version=VERSION,
        docs_url="/docs" if DEBUG else None,
        redoc_url="/redoc" if DEBUG else None,
        openapi_url="/openapi.json" if DEBUG else None,
    )
    app.state.storage = storage if storage is not None else build_storage(DATABASE_URL)
    create_default_admin(app.state.storage)

    # 登録の逆順に外側から実行される（CORS → セキュリティヘッダー → レート制限 → ロールゲート）
    app.add_middleware(RoleGateMiddleware)
    app.add_middleware(APIRateLimitMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS if CORS_ORIGINS else ["http://localhost:3000", "http://127.0.0.1:3000"],
        allow_credentials=True,
        allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    register_error_handlers(app)

    # ルート登録
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(admin.router)
    app.include_router(events.router)
    app.include_router(handover.router)
    app.include_router(lost.router)
    app.include_router(phone.router)
    app.include_router(products.router)
    app.include_router(pages.router)
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("cloakroom.main:app", host="0.0.0.0", port=8000, reload=DEBUG)
