"""
Service Dependencies
Per-request services wired from the clients owned by the application
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncConnection

from boosterhub.database import get_connection
from boosterhub.services.audit_log_service import AuditLogService
from boosterhub.services.club_store import ClubStore
from boosterhub.services.payment_settings_service import PaymentSettingsService


def get_club_store(connection: AsyncConnection = Depends(get_connection)) -> ClubStore:
    return ClubStore(connection)


def get_audit_log_service(connection: AsyncConnection = Depends(get_connection)) -> AuditLogService:
    # Shares the request connection with the club store
    return AuditLogService(connection)


def get_payment_settings_service(
    request: Request,
    store: ClubStore = Depends(get_club_store),
    audit_log: AuditLogService = Depends(get_audit_log_service),
) -> PaymentSettingsService:
    state = request.app.state
    return PaymentSettingsService(
        store=store,
        audit_log=audit_log,
        renderer=state.qr_renderer,
        storage=state.storage,
        max_upload_size=state.settings.MAX_QR_UPLOAD_SIZE,
    )


def client_ip(request: Request):
    """Client address for audit entries; X-Forwarded-For is read only behind a trusted proxy"""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded and request.app.state.settings.TRUST_FORWARDED_FOR:
        return forwarded.split(",")[0].strip()[:45]
    return request.client.host if request.client else None
