"""
Authentication Service
"""
from datetime import datetime, timedelta
from typing import Optional
import re
import logging

from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import HTTPException, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from ..config import settings
from ..database import get_users_collection, database
from ..models import User

logger = logging.getLogger(__name__)

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Security
security = HTTPBearer(auto_error=False)

RESET_TOKEN_PURPOSE = "password_reset"
RESET_STAGE_QUESTION = "question"
RESET_STAGE_VERIFIED = "verified"
ADMIN_SCOPE = "admin"


def create_access_token(user_id: str, email: str, scope: Optional[str] = None) -> str:
    """Create JWT access token

    Admin panel tokens carry ``scope=admin``; only the admin login issues them.
    """
    expire = datetime.utcnow() + timedelta(days=settings.jwt_expiration_days)
    to_encode = {
        "sub": user_id,
        "email": email,
        "exp": expire
    }
    if scope:
        to_encode["scope"] = scope
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def create_reset_token(user_id: str, stage: str) -> str:
    """Short-lived token carrying the progress of a password reset"""
    expire = datetime.utcnow() + timedelta(minutes=settings.reset_token_minutes)
    to_encode = {
        "sub": user_id,
        "purpose": RESET_TOKEN_PURPOSE,
        "stage": stage,
        "exp": expire
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_reset_token(token: str, stage: str) -> str:
    """Return the user id of a reset token issued for ``stage``"""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise HTTPException(status_code=401, detail="Password reset session expired")

    if payload.get("purpose") != RESET_TOKEN_PURPOSE or payload.get("stage") != stage:
        raise HTTPException(status_code=401, detail="Invalid password reset session")

    user_id = payload.get("sub")
    if not user_id:
        raise HTTPException(status_code=401, detail="Invalid password reset session")
    return user_id


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash"""
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    """Hash a password"""
    return pwd_context.hash(password)


def _normalize_answer(answer: str) -> str:
    return answer.strip().lower()


def hash_security_answer(answer: str) -> str:
    return pwd_context.hash(_normalize_answer(answer))


def verify_security_answer(answer: str, answer_hash: str) -> bool:
    return pwd_context.verify(_normalize_answer(answer), answer_hash)


def validate_email(email: str) -> bool:
    """Validate email format"""
    email_regex = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'
    return bool(re.match(email_regex, email))


async def _load_user(user_id: str) -> Optional[User]:
    users = get_users_collection()
    user_data = await users.find_one({"id": user_id})
    if not user_data:
        return None
    return User(**user_data)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> Optional[User]:
    """Get current user from JWT token (optional auth)"""
    if not credentials:
        return None

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        return None

    user_id = payload.get("sub")
    if not user_id or payload.get("purpose"):
        return None

    user = await _load_user(user_id)
    if user is None or not user.is_active:
        return None
    return user


async def require_auth(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> User:
    """Require authenticated user"""
    if not credentials:
        raise HTTPException(status_code=401, detail="Not authenticated")

    # Проверяем подключение к базе данных
    if not await database.check_connection():
        raise HTTPException(
            status_code=503,
            detail="Database unavailable. Please try again later."
        )

    try:
        payload = jwt.decode(
            credentials.credentials,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm]
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")

    user_id = payload.get("sub")
    # Токен сброса пароля не даёт доступа к API
    if not user_id or payload.get("purpose"):
        raise HTTPException(status_code=401, detail="Invalid token")

    user = await _load_user(user_id)
    if user is None:
        raise HTTPException(status_code=401, detail="User not found")
    if not user.is_active:
        raise HTTPException(status_code=403, detail="Account is deactivated")

    return user


async def require_admin(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    user: User = Depends(require_auth)
) -> User:
    """Require admin role and a token issued by the admin login"""
    # Токен уже проверен в require_auth
    payload = jwt.decode(
        credentials.credentials,
        settings.jwt_secret,
        algorithms=[settings.jwt_algorithm]
    )
    if not user.is_admin or payload.get("scope") != ADMIN_SCOPE:
        raise HTTPException(status_code=403, detail="Admin access required")
    return user
