"""
Audit Log Schemas
Response models for the payment audit trail
"""

from pydantic import BaseModel, field_validator
from uuid import UUID
from datetime import datetime
from typing import Optional, List
import json


class AuditLogEntry(BaseModel):
    """Single audit log entry"""
    model_config = {"from_attributes": True}

    id: UUID
    club_id: UUID
    action: str
    changes: Optional[dict] = None
    changed_by: str
    changed_at: datetime
    ip_address: Optional[str] = None

    @field_validator("changes", mode="before")
    @classmethod
    def parse_changes(cls, v):
        if isinstance(v, str):
            try:
                return json.loads(v)
            except (json.JSONDecodeError, TypeError):
                return {"raw": v}
        return v


class AuditLogResponse(BaseModel):
    """Response with paginated audit entries"""
    logs: List[AuditLogEntry]
    total: int
    limit: int
    offset: int
    has_more: bool
