"""
Authentication Routes
Admin login
"""

from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import BaseModel
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncConnection

from boosterhub.auth import ADMIN_ROLE, create_access_token, verify_password
from boosterhub.database import get_connection
from boosterhub.models.admin import admin_users

router = APIRouter()


# Request/Response Models
class LoginRequest(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class LoginResponse(BaseModel):
    status: str
    message: str
    access_token: str
    token_type: str = "bearer"
    username: str
    full_name: Optional[str] = None
    must_change_password: bool = False


@router.post("/login", response_model=LoginResponse)
async def login(
    credentials: LoginRequest,
    request: Request,
    connection: AsyncConnection = Depends(get_connection),
):
    """
    Login endpoint for admin users

    Process:
    1. Look up the admin by username
    2. Refuse locked or deactivated accounts
    3. Verify password
    4. Issue a JWT and update last_login
    """
    if not credentials.username or not credentials.password:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username and password are required"
        )

    result = await connection.execute(
        select(admin_users).where(admin_users.c.username == credentials.username.strip())
    )
    admin = result.mappings().first()

    if not admin or not verify_password(credentials.password, admin["password_hash"]):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid username or password"
        )

    if admin["is_locked"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is locked. Contact an administrator."
        )

    if not admin["is_active"]:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is deactivated. Contact an administrator."
        )

    access_token = create_access_token(
        {"sub": admin["username"], "role": ADMIN_ROLE},
        request.app.state.settings,
    )

    # Update last login
    await connection.execute(
        admin_users.update()
        .where(admin_users.c.id == admin["id"])
        .values(last_login=datetime.now(timezone.utc))
    )
    await connection.commit()

    return LoginResponse(
        status="success",
        message="Login successful",
        access_token=access_token,
        username=admin["username"],
        full_name=admin["full_name"],
        must_change_password=bool(admin["must_change_password"])
    )
