"""
Pydantic schemas for request/response validation
"""

from boosterhub.schemas.club import (
    BoosterClubResponse,
    ClubSummary,
    ClubListResponse,
)
from boosterhub.schemas.payment import (
    PaymentLinkPayload,
    QRColor,
    QRSettings,
    PaymentSettingsUpdate,
    ClubPaymentView,
    PaymentStatusResponse,
    QRCodeUploadResponse,
    EncodePaymentLinkRequest,
    DecodePaymentLinkRequest,
    PaymentLinkResponse,
)
from boosterhub.schemas.audit_log import AuditLogEntry, AuditLogResponse

__all__ = [
    "BoosterClubResponse",
    "ClubSummary",
    "ClubListResponse",
    "PaymentLinkPayload",
    "QRColor",
    "QRSettings",
    "PaymentSettingsUpdate",
    "ClubPaymentView",
    "PaymentStatusResponse",
    "QRCodeUploadResponse",
    "EncodePaymentLinkRequest",
    "DecodePaymentLinkRequest",
    "PaymentLinkResponse",
    "AuditLogEntry",
    "AuditLogResponse",
]
