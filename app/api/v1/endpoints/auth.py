"""
Auth API Endpoints
"""

import logging
from urllib.parse import urlencode
from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_session_user
from app.config import settings
from app.core.security import create_session_token, set_session_cookie, clear_session_cookie
from app.models.user import User
from app.schemas.user import (
    SignupRequest,
    LoginRequest,
    UserResponse,
    AuthResponse,
    PasswordResetRequest,
    PasswordResetConfirm,
    PasswordResetRequestResponse,
    AccountDeleteRequest
)
from app.services.auth_service import (
    AuthService,
    EmailAlreadyRegistered,
    InvalidResetToken,
    InvalidConfirmation
)

logger = logging.getLogger(__name__)

router = APIRouter()

def _session_response(response: Response, user: User, message: str) -> AuthResponse:
    token = create_session_token(user)
    set_session_cookie(response, token)
    return AuthResponse(
        message=message,
        user=UserResponse.model_validate(user),
        access_token=token
    )

@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(
    payload: SignupRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Create an account and start a session
    """
    try:
        user = await AuthService(db).signup(payload.email, payload.password, payload.name)
    except EmailAlreadyRegistered as e:
        raise HTTPException(status_code=400, detail=str(e))

    return _session_response(response, user, "User created successfully")

@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    response: Response,
    db: AsyncSession = Depends(get_db)
):
    """
    Check credentials and start a session
    """
    user = await AuthService(db).authenticate(payload.email, payload.password)
    if not user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid email or password")

    logger.info(f"Login successful for user_id: {user.id}")
    return _session_response(response, user, "Login successful")

@router.post("/logout")
async def logout(response: Response):
    """Drop the session cookie"""
    clear_session_cookie(response)
    return {"message": "Logout successful"}

@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_session_user)):
    """Current user from a fully verified session token"""
    return user

@router.post("/password/reset-request", response_model=PasswordResetRequestResponse,
             response_model_exclude_none=True)
async def request_password_reset(
    payload: PasswordResetRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Always answers ok so callers cannot tell which emails have accounts.
    Outside production the reset link is echoed back for local testing.
    """
    token = await AuthService(db).request_password_reset(payload.email)

    if token and not settings.is_production:
        query = urlencode({"token": token, "email": payload.email})
        return PasswordResetRequestResponse(
            reset_url=f"{settings.APP_URL}{settings.API_V1_STR}/auth/password/reset?{query}"
        )
    return PasswordResetRequestResponse()

@router.post("/password/reset")
async def reset_password(
    payload: PasswordResetConfirm,
    db: AsyncSession = Depends(get_db)
):
    """Set a new password with a single-use reset token"""
    try:
        await AuthService(db).reset_password(payload.token, payload.email, payload.password)
    except InvalidResetToken as e:
        raise HTTPException(status_code=400, detail=str(e))

    return {"ok": True}

@router.delete("/account")
async def delete_account(
    payload: AccountDeleteRequest,
    response: Response,
    user: User = Depends(get_session_user),
    db: AsyncSession = Depends(get_db)
):
    """
    Permanently delete the account and all of its data, then end the session
    """
    try:
        await AuthService(db).delete_account(user, payload.confirmation)
    except InvalidConfirmation as e:
        raise HTTPException(status_code=400, detail=str(e))

    clear_session_cookie(response)
    return {"message": "Account deleted successfully"}
