"""
Preferences API Endpoints
"""

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db, get_current_user_id
from app.models.preferences import UserPreferences, PREFERENCE_DEFAULTS
from app.schemas.preferences import PreferencesUpdate, PreferencesResponse
from app.services.repository import get_or_create_singleton, upsert_singleton

router = APIRouter()

@router.get("/", response_model=PreferencesResponse)
async def get_preferences(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Preferences, created with defaults on first access"""
    return await get_or_create_singleton(db, UserPreferences, user_id, PREFERENCE_DEFAULTS)

@router.patch("/", response_model=PreferencesResponse)
async def update_preferences(
    preferences: PreferencesUpdate,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Change any subset of the reminder and notification flags"""
    return await upsert_singleton(
        db, UserPreferences, user_id,
        preferences.dict(exclude_unset=True, exclude_none=True),
        PREFERENCE_DEFAULTS
    )

@router.post("/toggle/{name}", response_model=PreferencesResponse)
async def toggle_preference(
    name: str,
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db)
):
    """Flip one flag"""
    if name not in PREFERENCE_DEFAULTS:
        raise HTTPException(status_code=400, detail=f"Unknown preference: {name}")

    current = await get_or_create_singleton(db, UserPreferences, user_id, PREFERENCE_DEFAULTS)
    return await upsert_singleton(
        db, UserPreferences, user_id, {name: not getattr(current, name)}, PREFERENCE_DEFAULTS
    )
