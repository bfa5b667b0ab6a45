"""
Expense API Endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List, Optional

from app.api.deps import get_db, get_current_user_id
from app.models.expense import Expense
from app.schemas.expense import (
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseResponse,
    ExpenseStats
)
from app.services import analytics
from app.services.repository import OwnedRecordRepository

router = APIRouter()

def _repository(db: AsyncSession) -> OwnedRecordRepository:
    return OwnedRecordRepository(Expense, db, order_by=Expense.date.desc())

@router.post("/", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
async def create_expense(
    expense: ExpenseCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Record an expense"""
    return await _repository(db).create(user_id, expense.dict())

@router.get("/", response_model=List[ExpenseResponse])
async def get_expenses(
    user_id: int = Depends(get_current_user_id),
    category: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=1, le=500),
    db: AsyncSession = Depends(get_db)
):
    """
    Expenses newest first, optionally for one category
    """
    criteria = [Expense.category == category] if category else []
    return await _repository(db).list(user_id, *criteria, limit=limit)

@router.get("/stats", response_model=ExpenseStats)
async def get_expense_stats(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    expenses = await _repository(db).list(user_id)
    return analytics.expense_stats(expenses)

@router.get("/{expense_id}", response_model=ExpenseResponse)
async def get_expense(
    expense_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    expense = await _repository(db).get(expense_id, user_id)
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense

@router.patch("/{expense_id}", response_model=ExpenseResponse)
async def update_expense(
    expense_id: int,
    update_data: ExpenseUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Update expense (e.g., correct category)"""
    expense = await _repository(db).update(expense_id, user_id, update_data.dict(exclude_unset=True))
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense

@router.delete("/{expense_id}")
async def delete_expense(
    expense_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    if not await _repository(db).delete(expense_id, user_id):
        raise HTTPException(status_code=404, detail="Expense not found")
    return {"message": "Expense deleted successfully"}
