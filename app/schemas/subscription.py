from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Dict

CURRENCY_PATTERN = "^[A-Z]{3}$"

class SubscriptionBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., ge=0)
    billing_date: datetime
    categories: List[str] = []
    description: Optional[str] = None
    currency: str = Field("USD", pattern=CURRENCY_PATTERN)

class SubscriptionCreate(SubscriptionBase):
    pass

class SubscriptionUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[float] = Field(None, ge=0)
    billing_date: Optional[datetime] = None
    categories: Optional[List[str]] = None
    description: Optional[str] = None
    currency: Optional[str] = Field(None, pattern=CURRENCY_PATTERN)

class SubscriptionResponse(SubscriptionBase):
    id: int
    user_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True

class SubscriptionStats(BaseModel):
    count: int
    total_monthly: float
    total_annual: float
    average_price: float
    spending_by_category: Dict[str, float]
    upcoming_renewals: List[SubscriptionResponse]
