"""
Club Response Models
Public club data served to the payment pages
"""

from pydantic import BaseModel, computed_field
from typing import Optional, List
from datetime import datetime
from uuid import UUID


class BoosterClubResponse(BaseModel):
    """Full public record of an active club"""
    id: UUID
    name: str
    description: Optional[str] = None
    website_url: Optional[str] = None
    donation_url: Optional[str] = None
    is_active: bool
    is_payment_enabled: bool
    zelle_url: Optional[str] = None
    stripe_url: Optional[str] = None
    payment_instructions: Optional[str] = None
    qr_code_settings: Optional[dict] = None  # stored JSON, served as-is
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @computed_field
    @property
    def stripe_urls(self) -> Optional[str]:
        # Older payment pages still read this key
        return self.stripe_url


class ClubSummary(BaseModel):
    """Club entry for the public index"""
    id: UUID
    name: str
    description: Optional[str] = None
    website_url: Optional[str] = None
    donation_url: Optional[str] = None
    sort_order: int
    is_payment_enabled: bool


class ClubListResponse(BaseModel):
    """List of active clubs"""
    total: int
    clubs: List[ClubSummary]
