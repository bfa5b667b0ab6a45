"""
Notification API Endpoints
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import update, and_
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.api.deps import get_db, get_current_user_id
from app.models.preferences import Notification
from app.schemas.preferences import NotificationResponse, NotificationCount
from app.services.notifier import Notifier
from app.services.repository import OwnedRecordRepository

router = APIRouter()

MAX_NOTIFICATIONS = 50

def _repository(db: AsyncSession) -> OwnedRecordRepository:
    return OwnedRecordRepository(Notification, db, order_by=Notification.created_at.desc())

@router.get("/", response_model=List[NotificationResponse])
async def get_notifications(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """50 most recent notifications"""
    return await _repository(db).list(user_id, limit=MAX_NOTIFICATIONS)

@router.get("/count", response_model=NotificationCount)
async def get_notification_count(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    repository = _repository(db)
    return NotificationCount(
        total=await repository.count(user_id),
        unread=await repository.count(user_id, Notification.is_read == False)
    )

@router.post("/check", response_model=List[NotificationResponse])
async def check_notifications(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Run renewal, low balance, goal and budget checks; returns what was created
    """
    return await Notifier(db).check_all(user_id)

@router.post("/read-all")
async def mark_all_read(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    stmt = (
        update(Notification)
        .where(and_(Notification.user_id == user_id, Notification.is_read == False))
        .values(is_read=True)
    )
    result = await db.execute(stmt)
    await db.commit()
    return {"updated": result.rowcount}

@router.post("/{notification_id}/read", response_model=NotificationResponse)
async def mark_read(
    notification_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    notification = await _repository(db).update(notification_id, user_id, {"is_read": True})
    if not notification:
        raise HTTPException(status_code=404, detail="Notification not found")
    return notification

@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    if not await _repository(db).delete(notification_id, user_id):
        raise HTTPException(status_code=404, detail="Notification not found")
    return {"message": "Notification deleted successfully"}
