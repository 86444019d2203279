"""
Payment Audit Log Model
Append-only record of payment configuration changes
"""

from sqlalchemy import Column, String, DateTime, ForeignKey, JSON, Uuid, func
import uuid
from boosterhub.database import Base


class PaymentAuditLog(Base):
    __tablename__ = "payment_audit_log"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    club_id = Column(Uuid(as_uuid=True), ForeignKey("booster_clubs.id", ondelete="CASCADE"), nullable=False, index=True)
    action = Column(String(50), nullable=False)
    changes = Column(JSON, nullable=True)
    changed_by = Column(String(100), nullable=False)
    changed_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now(), index=True)
    ip_address = Column(String(45), nullable=True)


payment_audit_log = PaymentAuditLog.__table__
