"""
Booster Club Model
One row per booster club, including its payment configuration
"""

from sqlalchemy import Column, String, Boolean, DateTime, Integer, Text, JSON, Uuid, func
import uuid
from boosterhub.database import Base

# Clubs without an explicit position sort after every ordered club
DEFAULT_SORT_ORDER = 999


class BoosterClub(Base):
    __tablename__ = "booster_clubs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False, unique=True)
    description = Column(Text, nullable=True)
    website_url = Column(String(500), nullable=True)
    donation_url = Column(String(500), nullable=True)

    # Status
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=DEFAULT_SORT_ORDER, index=True)

    # Payment configuration
    is_payment_enabled = Column(Boolean, nullable=False, default=False, index=True)
    zelle_url = Column(Text, nullable=True)
    stripe_url = Column(Text, nullable=True)
    payment_instructions = Column(Text, nullable=True)
    qr_code_settings = Column(JSON, nullable=True)
    zelle_qr_code_path = Column(String(500), nullable=True)

    # Audit stamp
    last_payment_update_by = Column(String(100), nullable=True)
    last_payment_update_at = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


booster_clubs = BoosterClub.__table__
