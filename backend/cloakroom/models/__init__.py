from cloakroom.models.base import Document, now_ms
from cloakroom.models.identity import Role, StaffUser, AdminUser, Identity, IDENTITY_MODELS
from cloakroom.models.session import Session, PasswordResetToken
from cloakroom.models.event import Event, is_event_active
from cloakroom.models.handover import HandoverReport
from cloakroom.models.lost import LostClaim
from cloakroom.models.phone import PhoneCode
from cloakroom.models.product import Product, ProductVariant
