from pydantic import BaseModel
from datetime import datetime
from typing import Optional, Any

class PreferencesUpdate(BaseModel):
    email_notifications: Optional[bool] = None
    push_notifications: Optional[bool] = None
    reminder_seven_days: Optional[bool] = None
    reminder_one_day: Optional[bool] = None
    reminder_same_day: Optional[bool] = None
    weekly_digest: Optional[bool] = None
    monthly_report: Optional[bool] = None

class PreferencesResponse(BaseModel):
    user_id: int
    email_notifications: bool
    push_notifications: bool
    reminder_seven_days: bool
    reminder_one_day: bool
    reminder_same_day: bool
    weekly_digest: bool
    monthly_report: bool
    updated_at: datetime

    class Config:
        from_attributes = True

class NotificationResponse(BaseModel):
    id: int
    title: str
    message: str
    type: str
    data: Optional[Any] = None
    is_read: bool
    created_at: datetime

    class Config:
        from_attributes = True

class NotificationCount(BaseModel):
    total: int
    unread: int
