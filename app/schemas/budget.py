from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Dict
from app.schemas.subscription import CURRENCY_PATTERN

INCOME_TYPE_PATTERN = "^(SALARY|FREELANCE|BONUS|INVESTMENT|SIDE_HUSTLE|OTHER)$"

# Wallet

class WalletUpdate(BaseModel):
    balance: Optional[float] = None
    monthly_budget: Optional[float] = Field(None, ge=0)
    currency: Optional[str] = Field(None, pattern=CURRENCY_PATTERN)

class WalletResponse(BaseModel):
    id: int
    user_id: int
    balance: float
    monthly_budget: float
    currency: str
    last_salary_date: Optional[datetime] = None
    updated_at: datetime

    class Config:
        from_attributes = True

class WalletStats(BaseModel):
    balance: float
    monthly_budget: float
    currency: str
    monthly_income: float
    monthly_expenses: float
    total_income: float
    total_expenses: float
    net_worth: float
    budget_remaining: float
    income_count: int

# Income

class IncomeBase(BaseModel):
    source: str = Field(..., min_length=1, max_length=100)
    type: str = Field("SALARY", pattern=INCOME_TYPE_PATTERN)
    amount: float = Field(..., ge=0)
    date: datetime = Field(default_factory=datetime.utcnow)
    description: Optional[str] = None
    currency: str = Field("USD", pattern=CURRENCY_PATTERN)

class IncomeCreate(IncomeBase):
    update_wallet_balance: bool = False

class IncomeUpdate(BaseModel):
    source: Optional[str] = Field(None, min_length=1, max_length=100)
    type: Optional[str] = Field(None, pattern=INCOME_TYPE_PATTERN)
    amount: Optional[float] = Field(None, ge=0)
    date: Optional[datetime] = None
    description: Optional[str] = None
    currency: Optional[str] = Field(None, pattern=CURRENCY_PATTERN)

class IncomeResponse(IncomeBase):
    id: int
    user_id: int
    created_at: datetime

    class Config:
        from_attributes = True

# Savings

class SavingBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    amount: float = Field(0.0, ge=0)
    target_amount: Optional[float] = Field(None, ge=0)
    category: Optional[str] = Field(None, max_length=50)
    date: datetime = Field(default_factory=datetime.utcnow)
    description: Optional[str] = None
    currency: str = Field("USD", pattern=CURRENCY_PATTERN)
    is_active: bool = True

class SavingCreate(SavingBase):
    pass

class SavingUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    amount: Optional[float] = Field(None, ge=0)
    target_amount: Optional[float] = Field(None, ge=0)
    category: Optional[str] = Field(None, max_length=50)
    date: Optional[datetime] = None
    description: Optional[str] = None
    currency: Optional[str] = Field(None, pattern=CURRENCY_PATTERN)
    is_active: Optional[bool] = None

class SavingResponse(SavingBase):
    id: int
    user_id: int
    is_completed: bool
    progress_percentage: Optional[float] = None
    created_at: datetime

    class Config:
        from_attributes = True

class GoalProgress(BaseModel):
    id: int
    name: str
    current: float
    target: float
    progress: float

class SavingStats(BaseModel):
    total_savings: float
    total_count: int
    active_count: int
    total_target: float
    this_month_total: float
    category_totals: Dict[str, float]
    goal_progress: List[GoalProgress]

# Category budgets

class BudgetBase(BaseModel):
    category: str = Field(..., min_length=1, max_length=50)
    monthly_limit: float = Field(..., gt=0)
    currency: str = Field("USD", pattern=CURRENCY_PATTERN)
    alert_threshold: float = Field(80.0, gt=0, le=100)
    enable_alerts: bool = True

class BudgetCreate(BudgetBase):
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=2000, le=2100)

class BudgetUpdate(BaseModel):
    monthly_limit: Optional[float] = Field(None, gt=0)
    currency: Optional[str] = Field(None, pattern=CURRENCY_PATTERN)
    alert_threshold: Optional[float] = Field(None, gt=0, le=100)
    enable_alerts: Optional[bool] = None
    is_active: Optional[bool] = None

class BudgetResponse(BudgetBase):
    id: int
    user_id: int
    month: int
    year: int
    is_active: bool
    created_at: datetime

    class Config:
        from_attributes = True

class BudgetStatus(BudgetResponse):
    spent: float
    remaining: float
    percentage_used: float
    is_over_budget: bool
    is_near_limit: bool

class UnbudgetedCategory(BaseModel):
    category: str
    spent: float

class BudgetStatusReport(BaseModel):
    month: int
    year: int
    budget_status: List[BudgetStatus]
    categories_without_budget: List[UnbudgetedCategory]
    total_budget: float
    total_spent: float
