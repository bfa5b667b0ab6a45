"""
Savings API Endpoints
"""

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List

from app.api.deps import get_db, get_current_user_id
from app.models.budget import Saving
from app.schemas.budget import (
    SavingCreate,
    SavingUpdate,
    SavingResponse,
    SavingStats
)
from app.services import analytics
from app.services.repository import OwnedRecordRepository

router = APIRouter()

def _repository(db: AsyncSession) -> OwnedRecordRepository:
    return OwnedRecordRepository(Saving, db, order_by=Saving.date.desc())

def _with_progress(saving: Saving) -> SavingResponse:
    """Attach goal progress to the stored row"""
    response = SavingResponse.model_validate(saving)
    if saving.target_amount:
        response.progress_percentage = round(saving.amount / saving.target_amount * 100, 1)
    return response

def _get_or_404(saving):
    if not saving:
        raise HTTPException(status_code=404, detail="Saving not found")
    return _with_progress(saving)

@router.post("/", response_model=SavingResponse, status_code=status.HTTP_201_CREATED)
async def create_saving(
    saving: SavingCreate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Create a savings entry or goal"""
    return _with_progress(await _repository(db).create(user_id, saving.dict()))

@router.get("/", response_model=List[SavingResponse])
async def get_savings(
    user_id: int = Depends(get_current_user_id),
    active_only: bool = Query(False, description="Show only active savings"),
    db: AsyncSession = Depends(get_db)
):
    criteria = [Saving.is_active == True] if active_only else []
    savings = await _repository(db).list(user_id, *criteria)
    return [_with_progress(s) for s in savings]

@router.get("/stats", response_model=SavingStats)
async def get_saving_stats(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    savings = await _repository(db).list(user_id)
    return analytics.saving_stats(savings)

@router.get("/{saving_id}", response_model=SavingResponse)
async def get_saving(
    saving_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    return _get_or_404(await _repository(db).get(saving_id, user_id))

@router.patch("/{saving_id}", response_model=SavingResponse)
async def update_saving(
    saving_id: int,
    update_data: SavingUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    saving = await _repository(db).update(saving_id, user_id, update_data.dict(exclude_unset=True))
    return _get_or_404(saving)

@router.post("/{saving_id}/toggle", response_model=SavingResponse)
async def toggle_saving(
    saving_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Flip a saving between active and paused"""
    repository = _repository(db)
    saving = await repository.get(saving_id, user_id)
    if not saving:
        raise HTTPException(status_code=404, detail="Saving not found")
    return _get_or_404(await repository.update(saving_id, user_id, {"is_active": not saving.is_active}))

@router.put("/{saving_id}/add-money", response_model=SavingResponse)
async def add_money_to_saving(
    saving_id: int,
    amount: float = Query(..., gt=0, description="Amount to add"),
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Add money to a savings goal"""
    return _get_or_404(await _repository(db).increment(saving_id, user_id, "amount", amount))

@router.delete("/{saving_id}")
async def delete_saving(
    saving_id: int,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    if not await _repository(db).delete(saving_id, user_id):
        raise HTTPException(status_code=404, detail="Saving not found")
    return {"message": "Saving deleted successfully"}
