"""
Payment Audit Log Service
Append-only trail of payment configuration changes
"""

import uuid
from datetime import datetime, timezone
from typing import List, Optional
from uuid import UUID

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncConnection

from boosterhub.models.audit import payment_audit_log

UPDATE_PAYMENT_SETTINGS = "UPDATE_PAYMENT_SETTINGS"
UPLOAD_QR_CODE = "UPLOAD_QR_CODE"


class AuditLogService:
    """Service for payment audit operations"""

    def __init__(self, connection: AsyncConnection):
        self.connection = connection

    async def record(
        self,
        club_id: UUID,
        actor: str,
        action: str,
        changes: dict,
        ip_address: Optional[str] = None,
        changed_at: Optional[datetime] = None,
    ) -> dict:
        """
        Append an audit entry (committed together with the caller's changes)

        Args:
            club_id: Club whose payment configuration changed
            actor: Who made the change
            action: UPDATE_PAYMENT_SETTINGS or UPLOAD_QR_CODE
            changes: Map of field name to {"old": ..., "new": ...}
            ip_address: Client address of the request, if known
            changed_at: Timestamp shared with the club's audit stamp

        Returns:
            The stored entry
        """
        entry = {
            "id": uuid.uuid4(),
            "club_id": club_id,
            "action": action,
            "changes": changes,
            "changed_by": actor,
            "changed_at": changed_at or datetime.now(timezone.utc),
            "ip_address": ip_address,
        }
        await self.connection.execute(payment_audit_log.insert().values(**entry))
        return entry

    async def list_for_club(
        self,
        club_id: UUID,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[List[dict], int]:
        """
        Get audit entries for a club, newest first

        Returns:
            Tuple of (entries, total count)
        """
        total = await self.connection.scalar(
            select(func.count()).select_from(payment_audit_log).where(payment_audit_log.c.club_id == club_id)
        )

        query = (
            select(payment_audit_log)
            .where(payment_audit_log.c.club_id == club_id)
            .order_by(desc(payment_audit_log.c.changed_at))
            .limit(limit)
            .offset(offset)
        )
        result = await self.connection.execute(query)

        return [dict(row) for row in result.mappings()], total or 0
