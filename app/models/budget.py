from sqlalchemy import Column, Integer, String, Float, Boolean, ForeignKey, DateTime, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from app.core.database import Base

# Defaults applied when the wallet is created lazily
WALLET_DEFAULTS = {"balance": 0.0, "monthly_budget": 0.0, "currency": "USD"}

class Wallet(Base):
    __tablename__ = "wallets"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)

    balance = Column(Float, default=0.0, nullable=False)
    monthly_budget = Column(Float, default=0.0, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    last_salary_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

class Income(Base):
    __tablename__ = "income"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    source = Column(String(100), nullable=False)  # employer, client, ...
    type = Column(String(20), default="SALARY", nullable=False)  # SALARY, FREELANCE, BONUS, ...
    amount = Column(Float, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="incomes")

class Saving(Base):
    __tablename__ = "savings"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    name = Column(String(100), nullable=False)  # Emergency fund, Travel, etc.
    amount = Column(Float, default=0.0, nullable=False)
    target_amount = Column(Float, nullable=True)
    currency = Column(String(3), default="USD", nullable=False)
    category = Column(String(50), nullable=True)
    date = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    description = Column(Text, nullable=True)

    is_active = Column(Boolean, default=True, nullable=False)
    is_completed = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="savings")

class Budget(Base):
    """Monthly spending limit for one expense category"""
    __tablename__ = "budgets"
    __table_args__ = (
        UniqueConstraint("user_id", "category", "month", "year", name="uq_budget_category_month"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    category = Column(String(50), nullable=False, index=True)
    monthly_limit = Column(Float, nullable=False)
    currency = Column(String(3), default="USD", nullable=False)
    alert_threshold = Column(Float, default=80.0, nullable=False)  # percent of the limit
    enable_alerts = Column(Boolean, default=True, nullable=False)
    month = Column(Integer, nullable=False)  # 1-12
    year = Column(Integer, nullable=False)

    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("User", back_populates="budgets")
