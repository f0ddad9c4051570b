import logging
import secrets
from typing import List, Optional

from cloakroom.config import LIST_LIMIT
from cloakroom.exceptions import ConflictError, NotFoundError, ValidationError
from cloakroom.models import LostClaim, now_ms
from cloakroom.storage import Storage

logger = logging.getLogger(__name__)

SEARCH_FIELDS = ["full_name", "email", "phone"]


def _clean(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


class LostClaimService:
    """遺失物の問い合わせ"""

    @staticmethod
    def create(storage: Storage, data: dict, now: Optional[int] = None) -> LostClaim:
        full_name = _clean(data.get("full_name"))
        address_line1 = _clean(data.get("address_line1"))
        if not full_name or not address_line1:
            raise ValidationError("Missing fields")
        now = now_ms() if now is None else now

        claim_id = _clean(data.get("id")) or f"lost_{now}_{secrets.token_hex(3)}"
        # 受付済みの問い合わせは上書きさせない
        if storage.lost_claims.get(claim_id) is not None:
            raise ConflictError("Claim already exists")

        claim = LostClaim(
            id=claim_id,
            full_name=full_name,
            address_line1=address_line1,
            address_line2=_clean(data.get("address_line2")),
            city=_clean(data.get("city")),
            postal_code=_clean(data.get("postal_code")),
            country=_clean(data.get("country")),
            phone=_clean(data.get("phone")),
            email=_clean(data.get("email")),
            photos=[p for p in data.get("photos") or [] if p],
            created_at=now,
        )
        storage.lost_claims.save(claim)
        logger.info("Lost claim %s received", claim.id)
        return claim

    @staticmethod
    def list(storage: Storage, q: str = "") -> List[LostClaim]:
        q = (q or "").strip()
        repo = storage.lost_claims
        if q:
            return repo.search(q, SEARCH_FIELDS, sort_by="created_at", descending=True, limit=LIST_LIMIT)
        return repo.list(sort_by="created_at", descending=True, limit=LIST_LIMIT)

    @staticmethod
    def set_resolved(storage: Storage, claim_id: str, resolved: Optional[bool], now: Optional[int] = None) -> LostClaim:
        claim = storage.lost_claims.get(claim_id)
        if claim is None:
            raise NotFoundError()
        if resolved is None:
            return claim
        now = now_ms() if now is None else now
        updated = claim.model_copy(update={"resolved": resolved, "resolved_at": now if resolved else None})
        storage.lost_claims.save(updated)
        return updated

    @staticmethod
    def delete(storage: Storage, claim_id: str) -> bool:
        return storage.lost_claims.delete(claim_id)
