"""
Admin Routes
Payment settings, QR uploads, audit trail and payment-link tools (admin only)
"""

from uuid import UUID

from fastapi import APIRouter, Depends, File, Query, Request, UploadFile

from boosterhub.auth import get_current_admin
from boosterhub.dependencies import client_ip, get_audit_log_service, get_payment_settings_service
from boosterhub.schemas.audit_log import AuditLogEntry, AuditLogResponse
from boosterhub.schemas.payment import (
    ClubPaymentView,
    DecodePaymentLinkRequest,
    EncodePaymentLinkRequest,
    PaymentLinkPayload,
    PaymentLinkResponse,
    PaymentSettingsUpdate,
    PaymentStatusResponse,
    QRCodeUploadResponse,
)
from boosterhub.services.audit_log_service import AuditLogService
from boosterhub.services.payment_link import decode_payment_link, encode_payment_link
from boosterhub.services.payment_settings_service import PaymentSettingsService

router = APIRouter()


@router.get("/payment-status", response_model=PaymentStatusResponse, response_model_by_alias=True)
async def get_payment_status(
    current_admin: dict = Depends(get_current_admin),
    service: PaymentSettingsService = Depends(get_payment_settings_service),
):
    """Payment readiness counts across active clubs"""
    return await service.get_payment_status()


@router.get("/payment-settings/club/{club_id}", response_model=ClubPaymentView)
async def get_club_payment_settings(
    club_id: UUID,
    current_admin: dict = Depends(get_current_admin),
    service: PaymentSettingsService = Depends(get_payment_settings_service),
):
    return await service.get_payment_config(club_id)


@router.put("/payment-settings/club/{club_id}", response_model=ClubPaymentView)
async def update_club_payment_settings(
    club_id: UUID,
    patch: PaymentSettingsUpdate,
    request: Request,
    current_admin: dict = Depends(get_current_admin),
    service: PaymentSettingsService = Depends(get_payment_settings_service),
):
    """
    Update a club's payment settings (Admin only)

    Only fields present in the body change; send "" to clear a field.
    The change is stamped with the admin's username and written to the audit log.
    """
    return await service.update_payment_settings(
        club_id,
        actor=current_admin["username"],
        patch=patch,
        ip_address=client_ip(request),
    )


@router.post("/payment-settings/club/{club_id}/qr-code", response_model=QRCodeUploadResponse)
async def upload_club_qr_code(
    club_id: UUID,
    request: Request,
    qrCode: UploadFile = File(...),
    current_admin: dict = Depends(get_current_admin),
    service: PaymentSettingsService = Depends(get_payment_settings_service),
):
    """Upload a Zelle QR image for a club; stored as a normalized PNG"""
    content = await qrCode.read()
    return await service.upload_qr_code(
        club_id,
        actor=current_admin["username"],
        content=content,
        content_type=qrCode.content_type,
        ip_address=client_ip(request),
    )


@router.get("/payment-settings/club/{club_id}/audit-log", response_model=AuditLogResponse)
async def get_club_audit_log(
    club_id: UUID,
    limit: int = Query(50, ge=1, le=500, description="Number of records to return"),
    offset: int = Query(0, ge=0, description="Number of records to skip"),
    current_admin: dict = Depends(get_current_admin),
    service: PaymentSettingsService = Depends(get_payment_settings_service),
    audit_log: AuditLogService = Depends(get_audit_log_service),
):
    """Payment settings history of a club, newest first"""
    # 404 for unknown or inactive clubs
    await service.get_payment_config(club_id)

    logs, total = await audit_log.list_for_club(club_id, limit=limit, offset=offset)

    return AuditLogResponse(
        logs=[AuditLogEntry(**log) for log in logs],
        total=total,
        limit=limit,
        offset=offset,
        has_more=(offset + limit) < total,
    )


@router.post("/payment-links/encode", response_model=PaymentLinkResponse)
async def encode_link(
    body: EncodePaymentLinkRequest,
    current_admin: dict = Depends(get_current_admin),
):
    """Build a Zelle deep link for a recipient name and token"""
    payload = PaymentLinkPayload(name=body.name.strip(), token=body.token.strip())
    return PaymentLinkResponse(url=encode_payment_link(payload), payload=payload)


@router.post("/payment-links/decode", response_model=PaymentLinkResponse)
async def decode_link(
    body: DecodePaymentLinkRequest,
    current_admin: dict = Depends(get_current_admin),
):
    """Show what a Zelle deep link resolves to"""
    url = body.url.strip()
    return PaymentLinkResponse(url=url, payload=decode_payment_link(url))
