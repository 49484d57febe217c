import logging
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.users.user_models.schemas import UserSignup, UserLogin
from app.users.user_models.user_model import User, UserRole
from app.users.auth_token_model.token_model import Token
from app.users.security import get_password_hash, verify_password, create_access_token, token_claims_for

logger = logging.getLogger(__name__)


# ============================================================
# ✅ REGISTER A NEW USER
# ============================================================
async def registering_user(user_data: UserSignup, db: AsyncSession) -> User:
    # Check if user already exists
    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalars().first():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists"
        )

    new_user = User(
        name=user_data.name,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role,
        phone=user_data.phone,
    )
    if user_data.role == UserRole.STUDENT.value:
        new_user.roll_number = user_data.roll_number
    elif user_data.role == UserRole.DOCTOR.value:
        new_user.specialization = user_data.specialization
        new_user.time_per_patient = user_data.time_per_patient

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    logger.info(f"Registered {new_user.role} account {new_user.id} ({new_user.email})")
    return new_user


# ============================================================
# ✅ AUTHENTICATE USER
# ============================================================
async def authenticate_user(
    email: str, password: str, db: AsyncSession
) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    user = result.scalars().first()

    if not user:
        return None

    if not verify_password(password, user.hashed_password):
        return None

    return user


# ============================================================
# ✅ LOGIN USER
# ============================================================
async def login_user(user_data: UserLogin, db: AsyncSession) -> tuple[str, User]:
    user = await authenticate_user(user_data.email, user_data.password, db)
    if not user:
        logger.warning(f"Failed login attempt for {user_data.email}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid credentials"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user"
        )

    access_token = await create_access_token(
        data=token_claims_for(user),
        db=db
    )
    return access_token, user


# ============================================================
# ✅ LOGOUT USER (Global Revocation)
# ============================================================
async def logout_user(user: User, db: AsyncSession) -> None:
    # Revoke every token issued to this user
    await db.execute(
        update(Token)
        .where(Token.user_id == user.id)
        .values(is_revoked=True)
    )
    await db.commit()
    logger.info(f"User {user.id} logged out; tokens revoked")
