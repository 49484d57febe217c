# app/users/auth_routers.py

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from config.appconfig import settings
from app.database.connection import get_db
from app.users.auth_services import registering_user, login_user, logout_user
from app.users.auth_dependencies import get_current_user
from app.users.user_models.schemas import UserSignup, UserLogin, UserResponse, UserLoginResponse
from app.users.user_models.user_model import User

logger = logging.getLogger(__name__)

router = APIRouter()


# ============================================================
# ✅ SIGNUP
# ============================================================
@router.post("/signup", status_code=201)
async def signup(user_data: UserSignup, db: AsyncSession = Depends(get_db)):
    try:
        user = await registering_user(user_data, db)
    except SQLAlchemyError:
        logger.error("Signup error", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")
    return {"success": True, "user": UserResponse.model_validate(user)}


# ============================================================
# ✅ LOGIN (token in body + http-only cookie)
# ============================================================
@router.post("/login", response_model=UserLoginResponse)
async def login(
    user_data: UserLogin,
    response: Response,
    db: AsyncSession = Depends(get_db)
) -> UserLoginResponse:
    try:
        access_token, user = await login_user(user_data, db)
    except SQLAlchemyError:
        logger.error("Login error", exc_info=True)
        raise HTTPException(status_code=500, detail="Server error")

    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=access_token,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
        max_age=settings.ACCESS_TOKEN_EXPIRY * 60,
    )
    return UserLoginResponse(token=access_token, user=UserResponse.model_validate(user))


# ============================================================
# ✅ LOGOUT USER
# ============================================================
@router.post("/logout")
async def logout(
    response: Response,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    await logout_user(current_user, db)
    response.delete_cookie(settings.COOKIE_NAME, httponly=True, samesite="lax")
    response.headers["Cache-Control"] = "no-store, no-cache, must-revalidate, private"
    return {"success": True, "message": "Logged out successfully"}
