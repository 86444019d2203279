"""
Database Models
Import all models here so the shared metadata knows every table
"""

from boosterhub.models.club import BoosterClub, booster_clubs, DEFAULT_SORT_ORDER
from boosterhub.models.admin import AdminUser, admin_users
from boosterhub.models.audit import PaymentAuditLog, payment_audit_log

__all__ = [
    "BoosterClub",
    "AdminUser",
    "PaymentAuditLog",
    "booster_clubs",
    "admin_users",
    "payment_audit_log",
    "DEFAULT_SORT_ORDER",
]
