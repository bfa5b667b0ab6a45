"""
Data management endpoints: bulk clear and JSON export of a user's records
"""

import logging
from datetime import datetime
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user_id
from app.models.budget import Wallet, Income, Saving, Budget, WALLET_DEFAULTS
from app.models.expense import Expense
from app.models.preferences import Notification
from app.models.subscription import Subscription
from app.schemas.budget import BudgetResponse, IncomeResponse, SavingResponse, WalletResponse
from app.schemas.expense import ExpenseResponse
from app.schemas.subscription import SubscriptionResponse
from app.services.repository import OwnedRecordRepository, get_or_create_singleton

logger = logging.getLogger(__name__)

router = APIRouter()

CLEARABLE = {
    "expenses": Expense,
    "subscriptions": Subscription,
    "savings": Saving,
    "income": Income,
    "budgets": Budget,
    "notifications": Notification,
}

@router.get("/export")
async def export_data(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Every record the user owns, as JSON"""
    wallet = await get_or_create_singleton(db, Wallet, user_id, WALLET_DEFAULTS)

    async def dump(model, schema):
        records = await OwnedRecordRepository(model, db).list(user_id)
        return [schema.model_validate(r).model_dump(mode="json") for r in records]

    return {
        "exported_at": datetime.utcnow().isoformat(),
        "wallet": WalletResponse.model_validate(wallet).model_dump(mode="json"),
        "subscriptions": await dump(Subscription, SubscriptionResponse),
        "expenses": await dump(Expense, ExpenseResponse),
        "savings": await dump(Saving, SavingResponse),
        "income": await dump(Income, IncomeResponse),
        "budgets": await dump(Budget, BudgetResponse),
    }

@router.delete("/{entity}")
async def clear_entity(
    entity: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Delete all of the user's records of one kind"""
    model = CLEARABLE.get(entity)
    if model is None:
        raise HTTPException(status_code=404, detail=f"Unknown data type: {entity}")

    count = await OwnedRecordRepository(model, db).clear(user_id)
    logger.info(f"Cleared {count} {entity} for user {user_id}")
    return {"count": count}
