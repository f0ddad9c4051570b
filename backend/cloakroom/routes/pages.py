"""
/private 配下のページ

ロールゲートを通過した後も、ここでセッションを再検証する。
"""

import os

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse, RedirectResponse

from cloakroom.models import Role
from cloakroom.utils.role_gate import LOGIN_PATH
from cloakroom.utils.session_auth import get_optional_identity

router = APIRouter(tags=["pages"], include_in_schema=False)

TEMPLATE_DIR = os.path.join(os.path.dirname(os.path.dirname(__file__)), "templates")


def _page(name: str, status_code: int = 200) -> FileResponse:
    return FileResponse(os.path.join(TEMPLATE_DIR, f"{name}.html"), status_code=status_code, media_type="text/html")


def _login_redirect() -> RedirectResponse:
    return RedirectResponse(LOGIN_PATH, status_code=307)


# ロールゲートはメソッドを問わず書き換えるので全メソッドで応答する
@router.api_route("/not-allowed", methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE"])
async def not_allowed():
    return _page("not_allowed", status_code=403)


@router.get("/private/login")
async def login_page():
    return _page("login")


@router.get("/private/reset/request")
async def reset_request_page():
    return _page("reset_request")


@router.get("/private/reset/{token}")
async def reset_token_page(token: str):
    return _page("reset_token")


@router.get("/private")
async def home_page(identity=Depends(get_optional_identity)):
    if identity is None:
        return _login_redirect()
    return _page("home")


@router.get("/private/handover")
async def handover_page(identity=Depends(get_optional_identity)):
    if identity is None:
        return _login_redirect()
    return _page("handover")


@router.get("/private/handovers")
@router.get("/private/handovers/{handover_id}")
async def handovers_page(handover_id: str = None, identity=Depends(get_optional_identity)):
    if identity is None:
        return _login_redirect()
    return _page("handovers")


@router.get("/private/admin")
@router.get("/private/admin/{section:path}")
async def admin_page(section: str = "", identity=Depends(get_optional_identity)):
    if identity is None:
        return _login_redirect()
    # ロール Cookie が改ざんされていてもここで弾く
    if identity.role is not Role.ADMIN:
        return _page("not_allowed", status_code=403)
    return _page("admin")
