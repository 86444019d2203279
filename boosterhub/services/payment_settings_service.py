"""
Payment Settings Service
Read paths for club payment data and validated admin updates with an audit trail
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from urllib.parse import urlsplit
from uuid import UUID

from boosterhub.config import Settings
from boosterhub.exceptions import (
    ConfigurationError,
    InvalidSettingsError,
    NotFoundError,
    NoZelleUrlError,
    PaymentDisabledError,
    ValidationError,
)
from boosterhub.schemas.payment import ClubPaymentView, PaymentSettingsUpdate, PaymentStatusResponse
from boosterhub.services.audit_log_service import AuditLogService, UPDATE_PAYMENT_SETTINGS, UPLOAD_QR_CODE
from boosterhub.services.club_store import ClubStore
from boosterhub.services.image_optimizer import ImageOptimizer, image_optimizer
from boosterhub.services.payment_link import is_placeholder, is_usable_payment_url, try_decode_payment_link
from boosterhub.services.qr_renderer import QRRenderer, qr_renderer, resolve_settings
from boosterhub.services.storage_service import StorageService

logger = logging.getLogger(__name__)

PAYMENT_FIELDS = ("zelle_url", "stripe_url", "payment_instructions", "is_payment_enabled", "qr_code_settings")
URL_FIELDS = ("zelle_url", "stripe_url")

DEFAULT_MAX_UPLOAD_SIZE = Settings.model_fields["MAX_QR_UPLOAD_SIZE"].default


def qr_upload_path(club_id: UUID) -> str:
    return f"zelle-standardized/club-{club_id}-qr.png"


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes; stored values are always UTC
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=timezone.utc)


def _next_stamp(previous: Optional[datetime]) -> datetime:
    """Current time, nudged forward if the clock has not moved past the last stamp"""
    now = datetime.now(timezone.utc)
    previous = _as_utc(previous)
    if previous is not None and now <= previous:
        now = previous + timedelta(microseconds=1)
    return now


def _check_url(field: str, value: Optional[str]) -> None:
    if value is None or is_placeholder(value):
        return
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValidationError(f"{field} must be an http(s) URL")


class PaymentSettingsService:
    """Payment configuration of clubs: views, QR codes and admin updates"""

    def __init__(
        self,
        store: ClubStore,
        audit_log: AuditLogService,
        renderer: QRRenderer = qr_renderer,
        storage: Optional[StorageService] = None,
        optimizer: ImageOptimizer = image_optimizer,
        max_upload_size: int = DEFAULT_MAX_UPLOAD_SIZE,
    ):
        self.store = store
        self.audit_log = audit_log
        self.renderer = renderer
        self.storage = storage
        self.optimizer = optimizer
        self.max_upload_size = max_upload_size

    async def _require_active(self, club_id: UUID) -> dict:
        club = await self.store.get_active(club_id)
        if not club:
            raise NotFoundError()
        return club

    @staticmethod
    def to_view(club: dict) -> ClubPaymentView:
        """Payment view of a club row, with QR defaults filled in and the Zelle recipient decoded"""
        try:
            qr_settings = resolve_settings(club.get("qr_code_settings")).to_settings()
        except InvalidSettingsError:
            # A bad stored value must not hide the rest of the config from admins
            qr_settings = resolve_settings(None).to_settings()

        return ClubPaymentView(
            id=club["id"],
            name=club["name"],
            is_payment_enabled=bool(club.get("is_payment_enabled")),
            zelle_url=club.get("zelle_url"),
            stripe_url=club.get("stripe_url"),
            payment_instructions=club.get("payment_instructions"),
            qr_code_settings=qr_settings,
            zelle_qr_code_path=club.get("zelle_qr_code_path"),
            zelle_recipient=try_decode_payment_link(club.get("zelle_url")),
            last_payment_update_by=club.get("last_payment_update_by"),
            last_payment_update_at=club.get("last_payment_update_at"),
        )

    async def get_payment_config(self, club_id: UUID) -> ClubPaymentView:
        """
        Payment configuration of an active club

        Raises:
            NotFoundError: club missing or inactive
        """
        return self.to_view(await self._require_active(club_id))

    async def generate_qr(self, club_id: UUID) -> bytes:
        """
        Render the club's Zelle link as a PNG

        Checks run in order: club exists, payment enabled, Zelle URL usable.
        """
        club = await self._require_active(club_id)

        if not club.get("is_payment_enabled"):
            raise PaymentDisabledError()

        zelle_url = club.get("zelle_url")
        if not is_usable_payment_url(zelle_url):
            raise NoZelleUrlError()

        return self.renderer.render(zelle_url.strip(), club.get("qr_code_settings"))

    async def update_payment_settings(
        self,
        club_id: UUID,
        actor: str,
        patch: PaymentSettingsUpdate,
        ip_address: Optional[str] = None,
    ) -> ClubPaymentView:
        """
        Apply an admin patch to a club's payment settings

        Fields not present in the patch are left alone; blank strings clear a field.
        Enabling payment (or leaving it enabled) requires a usable Zelle or Stripe URL
        on the resulting record.

        Raises:
            NotFoundError: club missing or inactive
            ValidationError: bad URL, bad QR settings, or payment enabled without a method
        """
        submitted = {field: getattr(patch, field) for field in PAYMENT_FIELDS if field in patch.model_fields_set}

        for field in URL_FIELDS:
            if field in submitted:
                _check_url(field, submitted[field])

        if submitted.get("qr_code_settings") is not None:
            try:
                resolve_settings(submitted["qr_code_settings"])
            except InvalidSettingsError as exc:
                raise ValidationError(str(exc)) from exc
            submitted["qr_code_settings"] = submitted["qr_code_settings"].model_dump(
                by_alias=True, exclude_none=True
            )

        if "is_payment_enabled" in submitted and submitted["is_payment_enabled"] is None:
            # null is not a state; treat it like an omitted flag
            del submitted["is_payment_enabled"]

        club = await self._require_active(club_id)

        resulting = {**club, **submitted}
        if resulting.get("is_payment_enabled") and not (
            is_usable_payment_url(resulting.get("zelle_url"))
            or is_usable_payment_url(resulting.get("stripe_url"))
        ):
            raise ValidationError("At least one payment method (Zelle or Stripe) is required to enable payments")

        changes = {
            field: {"old": club.get(field), "new": value}
            for field, value in submitted.items()
            if club.get(field) != value
        }

        stamp = _next_stamp(club.get("last_payment_update_at"))
        values = {**submitted, "last_payment_update_by": actor, "last_payment_update_at": stamp}

        # Club row and audit entry commit together
        await self.store.update_payment_fields(club_id, values)
        await self.audit_log.record(
            club_id=club_id,
            actor=actor,
            action=UPDATE_PAYMENT_SETTINGS,
            changes=changes,
            ip_address=ip_address,
            changed_at=stamp,
        )
        await self.store.commit()

        updated = await self.store.get_active(club_id)

        logger.info(
            "Payment settings for club %s updated by %s (%s)",
            club_id, actor, ", ".join(sorted(changes)) or "no changes",
        )
        return self.to_view(updated)

    async def upload_qr_code(
        self,
        club_id: UUID,
        actor: str,
        content: bytes,
        content_type: Optional[str],
        ip_address: Optional[str] = None,
    ) -> dict:
        """
        Store an uploaded Zelle QR image for a club

        Returns:
            {"id", "name", "qr_code_path"}
        """
        if not content:
            raise ValidationError("No file uploaded")
        if len(content) > self.max_upload_size:
            raise ValidationError(f"File too large. Maximum size is {self.max_upload_size // 1024}KB")
        if not content_type or not content_type.startswith("image/"):
            raise ValidationError("Only image uploads are allowed")
        if self.storage is None:
            raise ConfigurationError("Blob storage is not configured")

        club = await self._require_active(club_id)

        png_bytes, png_type = self.optimizer.optimize(content)
        path = await self.storage.upload_bytes(qr_upload_path(club_id), png_bytes, png_type)

        stamp = _next_stamp(club.get("last_payment_update_at"))
        await self.store.update_payment_fields(club_id, {
            "zelle_qr_code_path": path,
            "last_payment_update_by": actor,
            "last_payment_update_at": stamp,
        })
        await self.audit_log.record(
            club_id=club_id,
            actor=actor,
            action=UPLOAD_QR_CODE,
            changes={"zelle_qr_code_path": {"old": club.get("zelle_qr_code_path"), "new": path}},
            ip_address=ip_address,
            changed_at=stamp,
        )
        await self.store.commit()

        logger.info("QR code for club %s uploaded by %s", club_id, actor)
        return {"id": club["id"], "name": club["name"], "qr_code_path": path}

    async def get_payment_status(self) -> PaymentStatusResponse:
        counts = await self.store.payment_status_counts()
        return PaymentStatusResponse(**counts)
