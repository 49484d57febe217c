# app/users/auth_dependencies.py
# Centralized Authentication Dependencies

from typing import Optional
from fastapi import Depends, HTTPException, status, Cookie
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession

from config.appconfig import settings
from app.database.connection import get_db
from app.users.user_models.user_model import User, UserRole
from app.users.auth_token_model.token_model import Token
from app.system_models.appointment_model.appointment_model import Appointment
from app.users.security import decode_token

# Security schemes
security_scheme = HTTPBearer(auto_error=False)  # Don't auto-raise for cookie fallback

INVALID_TOKEN = "Invalid or expired token"


def _invalid_token() -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=INVALID_TOKEN)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security_scheme),
    token_cookie: Optional[str] = Cookie(None, alias=settings.COOKIE_NAME),
    db: AsyncSession = Depends(get_db)
) -> User:
    """
    Get current authenticated user.

    Accepts token from EITHER:
    - Authorization: Bearer header (API clients)
    - `token` cookie (browsers)

    Missing token → 401. Bad signature, expiry, revocation, unknown or
    inactive user → 403.
    """
    # Extract token from header or cookie
    if credentials:
        token_string = credentials.credentials
    elif token_cookie:
        token_string = token_cookie
    else:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="No token provided",
            headers={"WWW-Authenticate": "Bearer"},
        )

    # 1. Decode JWT (validates signature + expiry)
    payload = decode_token(token_string)
    if not payload or payload.get("type") != "access":
        raise _invalid_token()

    user_id = payload.get("user_id")
    if not user_id:
        raise _invalid_token()

    # 2. Token must be known and not revoked (logout revokes)
    token_record = await db.execute(
        select(Token).where(
            and_(
                Token.token_string == token_string,
                Token.token_type == "access"
            )
        )
    )
    token_obj = token_record.scalars().first()
    if not token_obj or token_obj.is_revoked:
        raise _invalid_token()

    # 3. Fetch user from database
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()

    if not user or not user.is_active:
        raise _invalid_token()

    return user


def require_roles(*roles: UserRole):
    """
    Dependency factory: only let the listed roles through.
    Raises 403 otherwise.
    """
    allowed = {UserRole(role).value for role in roles}

    async def role_gate(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Forbidden"
            )
        return current_user

    return role_gate


get_current_student = require_roles(UserRole.STUDENT)
get_current_doctor = require_roles(UserRole.DOCTOR)
get_current_admin = require_roles(UserRole.ADMIN)
get_current_pharmacist = require_roles(UserRole.PHARMACY)


async def authorize_user_or_admin(
    user_id: int,
    current_user: User = Depends(get_current_user)
) -> User:
    """The user named in the path, or an admin."""
    if current_user.role != UserRole.ADMIN.value and current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden"
        )
    return current_user


async def check_appointment_ownership(
    appointment_id: int,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Load the appointment in the path and make sure the caller is its
    student, its doctor, or an admin.
    """
    appointment = await db.get(Appointment, appointment_id)
    if not appointment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Appointment not found"
        )

    if current_user.role != UserRole.ADMIN.value and current_user.id not in (
        appointment.student_id,
        appointment.doctor_id,
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Forbidden: Access denied"
        )
    return appointment
