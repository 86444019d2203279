"""
Payment Request/Response Models
Payment settings, payment links and QR rendering options
"""

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictBool, field_validator
from typing import Optional
from datetime import datetime
from uuid import UUID


class PaymentLinkPayload(BaseModel):
    """Decoded contents of a Zelle deep link"""
    model_config = ConfigDict(frozen=True)

    name: str
    action: str = "payment"
    token: str


class QRColor(BaseModel):
    dark: Optional[str] = None
    light: Optional[str] = None


class QRSettings(BaseModel):
    """
    QR rendering options as stored on a club.
    Unset values fall back to the renderer defaults.
    """
    model_config = ConfigDict(populate_by_name=True)

    width: Optional[int] = None
    margin: Optional[int] = None
    color: Optional[QRColor] = None
    error_correction_level: Optional[str] = Field(default=None, alias="errorCorrectionLevel")


class PaymentSettingsUpdate(BaseModel):
    """
    Admin patch of a club's payment settings.
    Omitted fields are left unchanged; empty strings clear a field.
    """
    model_config = ConfigDict(extra="ignore")

    zelle_url: Optional[str] = Field(default=None, max_length=2000)
    stripe_url: Optional[str] = Field(
        default=None,
        max_length=2000,
        validation_alias=AliasChoices("stripe_url", "stripe_urls"),
    )
    payment_instructions: Optional[str] = Field(default=None, max_length=5000)
    is_payment_enabled: Optional[StrictBool] = None
    qr_code_settings: Optional[QRSettings] = None

    @field_validator("zelle_url", "stripe_url", "payment_instructions")
    @classmethod
    def blank_to_none(cls, v):
        if v is None:
            return None
        v = v.strip()
        return v or None


class ClubPaymentView(BaseModel):
    """Payment configuration of a single club"""
    id: UUID
    name: str
    is_payment_enabled: bool
    zelle_url: Optional[str] = None
    stripe_url: Optional[str] = None
    payment_instructions: Optional[str] = None
    qr_code_settings: QRSettings
    zelle_qr_code_path: Optional[str] = None
    zelle_recipient: Optional[PaymentLinkPayload] = None
    last_payment_update_by: Optional[str] = None
    last_payment_update_at: Optional[datetime] = None


class PaymentStatusResponse(BaseModel):
    """Aggregate payment readiness across active clubs"""
    model_config = ConfigDict(populate_by_name=True)

    total_clubs: int = Field(alias="totalClubs")
    clubs_with_zelle: int = Field(alias="clubsWithZelle")
    clubs_with_stripe: int = Field(alias="clubsWithStripe")
    payment_enabled: int = Field(alias="paymentEnabled")


class QRCodeUploadResponse(BaseModel):
    id: UUID
    name: str
    qr_code_path: str


class EncodePaymentLinkRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    token: str = Field(..., min_length=1, max_length=255, description="Recipient email or phone")


class DecodePaymentLinkRequest(BaseModel):
    url: str = Field(..., min_length=1, max_length=2000)


class PaymentLinkResponse(BaseModel):
    url: str
    payload: PaymentLinkPayload
