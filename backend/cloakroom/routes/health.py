import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from cloakroom.config import VERSION
from cloakroom.storage import Storage, get_storage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
def health_check(storage: Storage = Depends(get_storage)):
    """ヘルスチェック（ストアへの往復を1回行う）"""
    try:
        sample = storage.handovers.list(sort_by="created_at", descending=True, limit=1)
    except Exception:
        logger.exception("Health check store round-trip failed")
        return JSONResponse(
            status_code=500,
            content={"ok": False, "version": VERSION, "store": {"backend": storage.backend, "connected": False}},
        )
    return {
        "ok": True,
        "version": VERSION,
        "store": {"backend": storage.backend, "connected": True, "sampleCount": len(sample)},
    }
