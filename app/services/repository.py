"""
Owned Record Repository
Per-user CRUD shared by every entity that belongs to a user
"""

from datetime import datetime
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar
from sqlalchemy import select, delete, update, func, and_
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.datetime_utils import convert_timezone_aware_datetimes

ModelType = TypeVar("ModelType")

class OwnedRecordRepository(Generic[ModelType]):
    """
    CRUD for a model with a ``user_id`` foreign key.

    Every statement carries ``user_id`` in its WHERE clause, so a record that
    belongs to somebody else behaves exactly like a record that does not exist.
    """

    def __init__(self, model: Type[ModelType], db: AsyncSession, order_by=None):
        self.model = model
        self.db = db
        self.order_by = order_by if order_by is not None else model.id.desc()

    def _owned(self, user_id: int, *criteria):
        return and_(self.model.user_id == user_id, *criteria)

    async def create(self, user_id: int, data: Dict[str, Any], commit: bool = True) -> ModelType:
        """Insert one owned row; with commit=False it is only flushed into the open transaction"""
        data = convert_timezone_aware_datetimes(dict(data))
        record = self.model(user_id=user_id, **data)
        self.db.add(record)
        if commit:
            await self.db.commit()
        else:
            await self.db.flush()
        await self.db.refresh(record)
        return record

    async def list(self, user_id: int, *criteria, limit: Optional[int] = None) -> List[ModelType]:
        query = select(self.model).where(self._owned(user_id, *criteria)).order_by(self.order_by)
        if limit is not None:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def get(self, record_id: int, user_id: int) -> Optional[ModelType]:
        stmt = select(self.model).where(self._owned(user_id, self.model.id == record_id))
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, record_id: int, user_id: int, data: Dict[str, Any]) -> Optional[ModelType]:
        record = await self.get(record_id, user_id)
        if record is None:
            return None

        columns = self.model.__table__.columns
        for key, value in convert_timezone_aware_datetimes(dict(data)).items():
            # null clears optional fields and is ignored for required ones
            if value is None and not columns[key].nullable:
                continue
            setattr(record, key, value)

        await self.db.commit()
        await self.db.refresh(record)
        return record

    async def increment(self, record_id: int, user_id: int, column: str, amount: float) -> Optional[ModelType]:
        """Atomic ``column = column + amount`` on one owned row"""
        field = getattr(self.model, column)
        stmt = (
            update(self.model)
            .where(self._owned(user_id, self.model.id == record_id))
            .values({column: field + amount})
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        if result.rowcount == 0:
            return None
        return await self._reload(record_id, user_id)

    async def delete(self, record_id: int, user_id: int) -> bool:
        stmt = delete(self.model).where(self._owned(user_id, self.model.id == record_id))
        result = await self.db.execute(stmt)
        await self.db.commit()
        return result.rowcount > 0

    async def clear(self, user_id: int) -> int:
        result = await self.db.execute(delete(self.model).where(self._owned(user_id)))
        await self.db.commit()
        return result.rowcount

    async def count(self, user_id: int, *criteria) -> int:
        stmt = select(func.count(self.model.id)).where(self._owned(user_id, *criteria))
        result = await self.db.execute(stmt)
        return result.scalar() or 0

    async def _reload(self, record_id: int, user_id: int) -> Optional[ModelType]:
        stmt = (
            select(self.model)
            .where(self._owned(user_id, self.model.id == record_id))
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

# Lazy per-user singletons (wallet, preferences)

def _insert_for(db: AsyncSession, model):
    if db.bind.dialect.name == "sqlite":
        return sqlite_insert(model)
    return pg_insert(model)

async def _load_singleton(db: AsyncSession, model, user_id: int):
    stmt = (
        select(model)
        .where(model.user_id == user_id)
        .execution_options(populate_existing=True)
    )
    result = await db.execute(stmt)
    return result.scalar_one()

async def get_or_create_singleton(db: AsyncSession, model, user_id: int,
                                  defaults: Dict[str, Any], commit: bool = True):
    """
    Read-or-create in one atomic INSERT ... ON CONFLICT DO NOTHING, so two
    concurrent first reads can never produce two rows.
    """
    stmt = (
        _insert_for(db, model)
        .values(user_id=user_id, **defaults)
        .on_conflict_do_nothing(index_elements=[model.user_id])
    )
    await db.execute(stmt)
    if commit:
        await db.commit()
    return await _load_singleton(db, model, user_id)

async def upsert_singleton(db: AsyncSession, model, user_id: int,
                           values: Dict[str, Any], defaults: Optional[Dict[str, Any]] = None):
    """Create with ``defaults`` overlaid by ``values``, or update ``values`` in place"""
    values = convert_timezone_aware_datetimes(dict(values))
    insert_values = dict(defaults or {})
    insert_values.update(values)

    stmt = _insert_for(db, model).values(user_id=user_id, **insert_values)
    if values:
        stmt = stmt.on_conflict_do_update(
            index_elements=[model.user_id],
            set_=dict(values, updated_at=datetime.utcnow()),
        )
    else:
        stmt = stmt.on_conflict_do_nothing(index_elements=[model.user_id])

    await db.execute(stmt)
    await db.commit()
    return await _load_singleton(db, model, user_id)

async def increment_singleton(db: AsyncSession, model, user_id: int, column: str, amount: float,
                              defaults: Dict[str, Any], extra: Optional[Dict[str, Any]] = None,
                              commit: bool = True):
    """
    Atomic ``column = column + amount`` on a singleton, creating it first if needed.
    With commit=False both statements stay in the caller's transaction.
    """
    await get_or_create_singleton(db, model, user_id, defaults, commit=False)

    values = {column: getattr(model, column) + amount, "updated_at": datetime.utcnow()}
    values.update(convert_timezone_aware_datetimes(dict(extra or {})))
    await db.execute(update(model).where(model.user_id == user_id).values(values))
    if commit:
        await db.commit()
    return await _load_singleton(db, model, user_id)

async def upsert_owned(db: AsyncSession, model, user_id: int,
                       key: Dict[str, Any], values: Dict[str, Any]):
    """
    Insert or update the row identified by ``user_id`` plus ``key``.

    The key columns must form a unique constraint together with ``user_id``.
    """
    values = convert_timezone_aware_datetimes(dict(values))
    stmt = (
        _insert_for(db, model)
        .values(user_id=user_id, **key, **values)
        .on_conflict_do_update(
            index_elements=[model.user_id, *(getattr(model, column) for column in key)],
            set_=dict(values, updated_at=datetime.utcnow()),
        )
    )
    await db.execute(stmt)
    await db.commit()

    criteria = [getattr(model, column) == value for column, value in key.items()]
    result = await db.execute(
        select(model)
        .where(and_(model.user_id == user_id, *criteria))
        .execution_options(populate_existing=True)
    )
    return result.scalar_one()
