"""Database models initialization."""

# Import all models to ensure they're registered with SQLAlchemy
from .user import User, PasswordResetToken
from .subscription import Subscription
from .expense import Expense
from .budget import Wallet, Income, Saving, Budget
from .preferences import UserPreferences, Notification, PREFERENCE_DEFAULTS

__all__ = [
    "User",
    "PasswordResetToken",
    "Subscription",
    "Expense",
    "Wallet",
    "Income",
    "Saving",
    "Budget",
    "UserPreferences",
    "Notification",
    "PREFERENCE_DEFAULTS"
]
