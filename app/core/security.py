"""
Password hashing, session tokens and the session cookie
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import Request, Response
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import settings

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)

SESSION_MAX_AGE = settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60

def get_password_hash(password: str) -> str:
    """Hash a plain password with bcrypt"""
    return pwd_context.hash(password)

def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a stored hash; malformed hashes never match"""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        logger.warning(f"Password verification failed on a malformed hash: {e}")
        return False

def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a session token.

    Args:
        data: claims to embed, e.g. {'sub': '42', 'email': ..., 'name': ...}.
            'sub' must be a string.
        expires_delta: lifetime override; defaults to ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        Encoded HS256 JWT carrying 'iat' and 'exp'.
    """
    to_encode = {k: v for k, v in data.items() if v is not None}
    now = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"iat": now, "exp": now + expires_delta})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

def create_session_token(user) -> str:
    """Token for an authenticated user row"""
    return create_access_token({
        "sub": str(user.id),
        "email": user.email,
        "name": user.name,
    })

def verify_token(token: str) -> Optional[Dict]:
    """
    Validate signature and expiry.

    Returns the payload, or None when the token is malformed, forged or expired.
    """
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.warning(f"Token verification failed: {e}")
        return None

    if "sub" not in payload:
        logger.warning("Token verification failed: missing 'sub' claim")
        return None
    return payload

def get_request_token(request: Request) -> Optional[str]:
    """Bearer header first, then the session cookie"""
    authorization = request.headers.get("Authorization")
    if authorization and authorization.startswith("Bearer "):
        return authorization[len("Bearer "):].strip() or None
    return request.cookies.get(settings.AUTH_COOKIE_NAME)

def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        max_age=SESSION_MAX_AGE,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )

def clear_session_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.AUTH_COOKIE_NAME,
        httponly=True,
        secure=settings.is_production,
        samesite="lax",
        path="/",
    )
