from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, DateTime, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base

# Defaults applied when preferences are created lazily
PREFERENCE_DEFAULTS = {
    "email_notifications": False,
    "push_notifications": False,
    "reminder_seven_days": True,
    "reminder_one_day": True,
    "reminder_same_day": False,
    "weekly_digest": False,
    "monthly_report": False,
}

class UserPreferences(Base):
    __tablename__ = "user_preferences"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    email_notifications = Column(Boolean, default=False, nullable=False)
    push_notifications = Column(Boolean, default=False, nullable=False)
    reminder_seven_days = Column(Boolean, default=True, nullable=False)
    reminder_one_day = Column(Boolean, default=True, nullable=False)
    reminder_same_day = Column(Boolean, default=False, nullable=False)
    weekly_digest = Column(Boolean, default=False, nullable=False)
    monthly_report = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    title = Column(String(200), nullable=False)
    message = Column(String(500), nullable=False)
    type = Column(String(30), default="INFO", index=True)
    data = Column(JSON, nullable=True)
    is_read = Column(Boolean, default=False, index=True)

    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    # Relationships
    user = relationship("User", back_populates="notifications")
