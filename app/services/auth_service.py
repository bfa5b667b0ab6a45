"""
Auth Service
Signup, credential checks, password reset tokens and account deletion
"""

import logging
import secrets
from datetime import datetime, timedelta
from typing import Optional
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from app.config import settings
from app.core.security import get_password_hash, verify_password
from app.models.budget import Wallet, Income, Saving, Budget
from app.models.expense import Expense
from app.models.preferences import UserPreferences, Notification
from app.models.subscription import Subscription
from app.models.user import User, PasswordResetToken

logger = logging.getLogger(__name__)

# Checked when the email is unknown so both login failures cost one bcrypt round
DUMMY_PASSWORD_HASH = get_password_hash("subtrack-login-timing-placeholder")

ACCOUNT_DELETION_PHRASE = "DELETE MY ACCOUNT"

# Everything a user owns, removed before the user row itself
OWNED_MODELS = (Expense, Income, Saving, Budget, Subscription, Notification, Wallet, UserPreferences)

class AuthError(Exception):
    """Base class for auth failures that map to a 4xx response"""

class EmailAlreadyRegistered(AuthError):
    pass

class InvalidResetToken(AuthError):
    pass

class InvalidConfirmation(AuthError):
    pass

class AuthService:
    """
    Account operations on top of the password and token primitives
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email))
        return result.scalar_one_or_none()

    async def signup(self, email: str, password: str, name: Optional[str] = None) -> User:
        if await self.get_user_by_email(email):
            raise EmailAlreadyRegistered("User already exists with this email")

        user = User(email=email, hashed_password=get_password_hash(password), name=name)
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            # lost a race with a concurrent signup for the same email
            await self.db.rollback()
            raise EmailAlreadyRegistered("User already exists with this email")

        await self.db.refresh(user)
        logger.info(f"User created with ID: {user.id}")
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Same None for unknown email and wrong password"""
        user = await self.get_user_by_email(email)
        if user is None:
            verify_password(password, DUMMY_PASSWORD_HASH)
        if user is None or not verify_password(password, user.hashed_password):
            logger.warning("Login failed: invalid credentials")
            return None
        return user

    async def request_password_reset(self, email: str) -> Optional[str]:
        """Issue a reset token, or None when no account uses this email"""
        user = await self.get_user_by_email(email)
        if not user:
            return None

        token = secrets.token_urlsafe(32)
        expires = datetime.utcnow() + timedelta(minutes=settings.PASSWORD_RESET_EXPIRE_MINUTES)
        self.db.add(PasswordResetToken(identifier=email, token=token, expires=expires))
        await self.db.commit()
        logger.info(f"Password reset token issued for user {user.id}")
        return token

    async def reset_password(self, token: str, email: str, new_password: str) -> None:
        """Consume a single-use reset token and store the new password hash"""
        result = await self.db.execute(
            select(PasswordResetToken).where(PasswordResetToken.token == token)
        )
        record = result.scalar_one_or_none()
        if not record or record.identifier != email:
            raise InvalidResetToken("Invalid or used token")

        if record.expires < datetime.utcnow():
            await self.db.execute(delete(PasswordResetToken).where(PasswordResetToken.token == token))
            await self.db.commit()
            raise InvalidResetToken("Token expired")

        user = await self.get_user_by_email(email)
        if not user:
            raise InvalidResetToken("Invalid or used token")

        user.hashed_password = get_password_hash(new_password)
        await self.db.execute(delete(PasswordResetToken).where(PasswordResetToken.token == token))
        await self.db.commit()
        logger.info(f"Password reset completed for user {user.id}")

    async def delete_account(self, user: User, confirmation: str) -> None:
        """Remove the user and every row they own in a single transaction"""
        if confirmation != ACCOUNT_DELETION_PHRASE:
            raise InvalidConfirmation(f'Type exactly "{ACCOUNT_DELETION_PHRASE}" to confirm')

        user_id = user.id
        for model in OWNED_MODELS:
            await self.db.execute(delete(model).where(model.user_id == user_id))
        await self.db.execute(delete(PasswordResetToken).where(PasswordResetToken.identifier == user.email))
        await self.db.execute(delete(User).where(User.id == user_id))
        await self.db.commit()
        logger.info(f"Account deleted for user {user_id}")
