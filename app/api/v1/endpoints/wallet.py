"""
Wallet and Income API Endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.api.deps import get_db, get_current_user_id
from app.models.budget import Wallet, Income, WALLET_DEFAULTS
from app.models.expense import Expense
from app.schemas.budget import (
    WalletUpdate,
    WalletResponse,
    WalletStats,
    IncomeCreate,
    IncomeUpdate,
    IncomeResponse
)
from app.services import analytics
from app.services.repository import (
    OwnedRecordRepository,
    get_or_create_singleton,
    upsert_singleton,
    increment_singleton
)

router = APIRouter()

def _incomes(db: AsyncSession) -> OwnedRecordRepository:
    return OwnedRecordRepository(Income, db, order_by=Income.date.desc())

@router.get("/", response_model=WalletResponse)
async def get_wallet(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Wallet for the user, created with defaults on first access"""
    return await get_or_create_singleton(db, Wallet, user_id, WALLET_DEFAULTS)

@router.put("/", response_model=WalletResponse)
async def update_wallet(
    wallet: WalletUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Set balance, monthly budget and currency"""
    return await upsert_singleton(
        db, Wallet, user_id, wallet.dict(exclude_unset=True, exclude_none=True), WALLET_DEFAULTS
    )

@router.get("/stats", response_model=WalletStats)
async def get_wallet_stats(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Monthly and all-time income vs expenses, net worth and budget left
    """
    wallet = await get_or_create_singleton(db, Wallet, user_id, WALLET_DEFAULTS)
    incomes = await _incomes(db).list(user_id)
    expenses = await OwnedRecordRepository(Expense, db).list(user_id)
    return analytics.wallet_stats(wallet, incomes, expenses)

# Income CRUD
@router.post("/income", response_model=IncomeResponse, status_code=status.HTTP_201_CREATED)
async def add_income(
    income: IncomeCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """
    Add income; with update_wallet_balance the wallet balance grows by the same
    amount. The income row and the wallet credit commit together or not at all.
    """
    income_data = income.dict()
    update_wallet_balance = income_data.pop("update_wallet_balance")

    db_income = await _incomes(db).create(user_id, income_data, commit=False)

    if update_wallet_balance:
        extra = {"last_salary_date": db_income.date} if db_income.type == "SALARY" else None
        await increment_singleton(
            db, Wallet, user_id, "balance", db_income.amount, WALLET_DEFAULTS, extra, commit=False
        )

    await db.commit()
    return db_income

@router.get("/income", response_model=List[IncomeResponse])
async def get_incomes(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Income history, newest first"""
    return await _incomes(db).list(user_id)

@router.get("/income/{income_id}", response_model=IncomeResponse)
async def get_income(
    income_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    income = await _incomes(db).get(income_id, user_id)
    if not income:
        raise HTTPException(status_code=404, detail="Income not found")
    return income

@router.patch("/income/{income_id}", response_model=IncomeResponse)
async def update_income(
    income_id: int,
    update_data: IncomeUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    income = await _incomes(db).update(income_id, user_id, update_data.dict(exclude_unset=True))
    if not income:
        raise HTTPException(status_code=404, detail="Income not found")
    return income

@router.delete("/income/{income_id}")
async def delete_income(
    income_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    if not await _incomes(db).delete(income_id, user_id):
        raise HTTPException(status_code=404, detail="Income not found")
    return {"message": "Income deleted successfully"}
