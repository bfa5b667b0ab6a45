"""
Category Budget API Endpoints
"""

from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional, Tuple

from app.api.deps import get_db, get_current_user_id
from app.models.budget import Budget
from app.models.expense import Expense
from app.schemas.budget import (
    BudgetCreate,
    BudgetUpdate,
    BudgetResponse,
    BudgetStatus,
    BudgetStatusReport
)
from app.services import analytics
from app.services.repository import OwnedRecordRepository, upsert_owned

router = APIRouter()

def _repository(db: AsyncSession) -> OwnedRecordRepository:
    return OwnedRecordRepository(Budget, db, order_by=Budget.category.asc())

def _period(month: Optional[int], year: Optional[int]) -> Tuple[int, int]:
    """Requested month and year, defaulting to the current ones"""
    now = datetime.utcnow()
    return month or now.month, year or now.year

async def _active_budgets(db: AsyncSession, user_id: int, month: int, year: int) -> List[Budget]:
    return await _repository(db).list(
        user_id, Budget.month == month, Budget.year == year, Budget.is_active == True
    )

@router.post("/", response_model=BudgetResponse, status_code=status.HTTP_201_CREATED)
async def set_budget(
    budget: BudgetCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Create the budget for a category and month, or replace the existing one
    """
    month, year = _period(budget.month, budget.year)
    values = budget.dict(exclude={"category", "month", "year"})
    values["is_active"] = True

    return await upsert_owned(
        db, Budget, user_id,
        key={"category": budget.category, "month": month, "year": year},
        values=values
    )

@router.get("/", response_model=List[BudgetResponse])
async def get_budgets(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Active budgets for one month (current month by default), by category"""
    month, year = _period(month, year)
    return await _active_budgets(db, user_id, month, year)

@router.get("/status", response_model=BudgetStatusReport)
async def get_budget_status(
    month: Optional[int] = Query(None, ge=1, le=12),
    year: Optional[int] = Query(None, ge=2000, le=2100),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Spent, remaining and alert flags per budget, plus unbudgeted spending
    """
    month, year = _period(month, year)
    budgets = await _active_budgets(db, user_id, month, year)

    start, end = analytics.month_bounds(year, month)
    expenses = await OwnedRecordRepository(Expense, db).list(
        user_id, Expense.date >= start, Expense.date < end
    )

    report = analytics.budget_status(budgets, expenses, year, month)
    report['budget_status'] = [
        BudgetStatus(
            **BudgetResponse.model_validate(entry['budget']).model_dump(),
            **{k: v for k, v in entry.items() if k != 'budget'}
        )
        for entry in report['budget_status']
    ]
    return BudgetStatusReport(month=month, year=year, **report)

@router.get("/{budget_id}", response_model=BudgetResponse)
async def get_budget(
    budget_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    budget = await _repository(db).get(budget_id, user_id)
    if not budget:
        raise HTTPException(status_code=404, detail="Budget not found")
    return budget

@router.patch("/{budget_id}", response_model=BudgetResponse)
async def update_budget(
    budget_id: int,
    update_data: BudgetUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    budget = await _repository(db).update(budget_id, user_id, update_data.dict(exclude_unset=True))
    if not budget:
        raise HTTPException(status_code=404, detail="Budget not found")
    return budget

@router.delete("/{budget_id}")
async def delete_budget(
    budget_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    if not await _repository(db).delete(budget_id, user_id):
        raise HTTPException(status_code=404, detail="Budget not found")
    return {"message": "Budget deleted successfully"}
