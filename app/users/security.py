# app/users/security.py

from sqlalchemy.ext.asyncio import AsyncSession
from passlib.context import CryptContext
from datetime import timedelta
from typing import Optional, Dict, Any
from config.appconfig import settings
from app.helpers.time import utcnow
from jose import JWTError, jwt
import secrets

from app.users.auth_token_model.token_model import Token


# Password hashing context
pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


# ============================================================
# ✅ Verify Password
# ============================================================
def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


# ============================================================
# ✅ Get Password Hash
# ============================================================
def get_password_hash(password: str) -> str:
    """Hash a password."""
    return pwd_context.hash(password)


# ============================================================
# ✅ Token Claims
# ============================================================
def token_claims_for(user) -> Dict[str, Any]:
    """Claims every access token carries: e-mail as subject, id and role."""
    return {"sub": user.email, "user_id": user.id, "role": user.role}


# ============================================================
# ✅ Create Access Token
# ============================================================
async def create_access_token(
    data: Dict[str, Any],
    db: AsyncSession,
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create a JWT access token and store it as active."""
    to_encode = data.copy()

    expire = utcnow() + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRY))

    # jti keeps two tokens issued in the same second distinct
    to_encode.update({"exp": expire, "type": "access", "jti": secrets.token_hex(8)})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    # Store as active token; logout revokes it
    token = Token(
        token_string=encoded_jwt,
        token_type="access",
        user_id=data.get("user_id"),
        expires_at=expire
    )
    db.add(token)
    await db.commit()

    return encoded_jwt


# ============================================================
# ✅ Decode Token
# ============================================================
def decode_token(token: str) -> Optional[Dict[str, Any]]:
    """Decode and verify a JWT token (signature and expiry)."""
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM]
        )
        return payload
    except JWTError:
        return None

