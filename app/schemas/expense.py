from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Dict
from app.schemas.subscription import CURRENCY_PATTERN

class ExpenseBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    amount: float = Field(..., ge=0)
    category: Optional[str] = Field(None, max_length=50)
    date: datetime = Field(default_factory=datetime.utcnow)
    description: Optional[str] = None
    currency: str = Field("USD", pattern=CURRENCY_PATTERN)

class ExpenseCreate(ExpenseBase):
    pass

class ExpenseUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    amount: Optional[float] = Field(None, ge=0)
    category: Optional[str] = Field(None, max_length=50)
    date: Optional[datetime] = None
    description: Optional[str] = None
    currency: Optional[str] = Field(None, pattern=CURRENCY_PATTERN)

class ExpenseResponse(ExpenseBase):
    id: int
    user_id: int
    created_at: datetime

    class Config:
        from_attributes = True

class ExpenseStats(BaseModel):
    total_monthly: float
    total_weekly: float
    average_monthly_expense: float
    recent_expenses: List[ExpenseResponse]
    category_breakdown: Dict[str, float]
