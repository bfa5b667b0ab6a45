"""
API v1 Router
"""

from fastapi import APIRouter
from app.api.v1.endpoints import (
    auth,
    subscriptions,
    expenses,
    savings,
    wallet,
    budgets,
    preferences,
    notifications,
    data
)

api_router = APIRouter()

api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["auth"]
)

api_router.include_router(
    subscriptions.router,
    prefix="/subscriptions",
    tags=["subscriptions"]
)

api_router.include_router(
    expenses.router,
    prefix="/expenses",
    tags=["expenses"]
)

api_router.include_router(
    savings.router,
    prefix="/savings",
    tags=["savings"]
)

api_router.include_router(
    wallet.router,
    prefix="/wallet",
    tags=["wallet"]
)

api_router.include_router(
    budgets.router,
    prefix="/budgets",
    tags=["budgets"]
)

api_router.include_router(
    preferences.router,
    prefix="/preferences",
    tags=["preferences"]
)

api_router.include_router(
    notifications.router,
    prefix="/notifications",
    tags=["notifications"]
)

api_router.include_router(
    data.router,
    prefix="/data",
    tags=["data"]
)
