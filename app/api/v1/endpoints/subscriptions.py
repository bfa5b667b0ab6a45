"""
Subscription API Endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.api.deps import get_db, get_current_user_id
from app.models.subscription import Subscription
from app.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionUpdate,
    SubscriptionResponse,
    SubscriptionStats
)
from app.services import analytics
from app.services.repository import OwnedRecordRepository

router = APIRouter()

def _repository(db: AsyncSession) -> OwnedRecordRepository:
    return OwnedRecordRepository(Subscription, db, order_by=Subscription.created_at.desc())

@router.post("/", response_model=SubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_subscription(
    subscription: SubscriptionCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Create a subscription"""
    return await _repository(db).create(user_id, subscription.dict())

@router.get("/", response_model=List[SubscriptionResponse])
async def get_subscriptions(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """All subscriptions, newest first"""
    return await _repository(db).list(user_id)

@router.get("/stats", response_model=SubscriptionStats)
async def get_subscription_stats(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Monthly/annual totals, spending by category and renewals due in 30 days
    """
    subscriptions = await _repository(db).list(user_id)
    return analytics.subscription_stats(subscriptions)

@router.get("/{subscription_id}", response_model=SubscriptionResponse)
async def get_subscription(
    subscription_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    subscription = await _repository(db).get(subscription_id, user_id)
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription

@router.patch("/{subscription_id}", response_model=SubscriptionResponse)
async def update_subscription(
    subscription_id: int,
    update_data: SubscriptionUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    subscription = await _repository(db).update(
        subscription_id, user_id, update_data.dict(exclude_unset=True)
    )
    if not subscription:
        raise HTTPException(status_code=404, detail="Subscription not found")
    return subscription

@router.delete("/{subscription_id}")
async def delete_subscription(
    subscription_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    if not await _repository(db).delete(subscription_id, user_id):
        raise HTTPException(status_code=404, detail="Subscription not found")
    return {"message": "Subscription deleted successfully"}
