"""
Authentication Module
Password hashing and JWT token management
"""

from boosterhub.auth.password import hash_password, verify_password, generate_random_password
from boosterhub.auth.dependencies import (
    ADMIN_ROLE,
    create_access_token,
    decode_access_token,
    get_current_admin,
)

__all__ = [
    "hash_password",
    "verify_password",
    "generate_random_password",
    "ADMIN_ROLE",
    "create_access_token",
    "decode_access_token",
    "get_current_admin",
]
