"""
Notification Service
Creates notifications and runs the renewal / balance / goal / budget checks
"""

import logging
import math
from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional
from sqlalchemy import select, and_
from sqlalchemy.ext.asyncio import AsyncSession
from app.models.budget import Wallet, Saving, Budget
from app.models.expense import Expense
from app.models.preferences import Notification
from app.models.subscription import Subscription
from app.services import analytics

logger = logging.getLogger(__name__)

RENEWAL_REMINDER_DAYS = 3
LOW_BALANCE_RATIO = 0.1

class Notifier:
    """
    Raises notifications for one user
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create(self, user_id: int, title: str, message: str,
                     type: str = "INFO", data: Optional[Dict[str, Any]] = None) -> Notification:
        notification = Notification(user_id=user_id, title=title, message=message, type=type, data=data)
        self.db.add(notification)
        await self.db.commit()
        await self.db.refresh(notification)
        return notification

    async def _recent(self, user_id: int, type: str, since: datetime) -> List[Notification]:
        stmt = select(Notification).where(
            and_(
                Notification.user_id == user_id,
                Notification.type == type,
                Notification.created_at >= since
            )
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def check_renewals(self, user_id: int, now: datetime) -> List[Notification]:
        """One reminder per subscription per day for renewals in the next 3 days"""
        stmt = select(Subscription).where(
            and_(
                Subscription.user_id == user_id,
                Subscription.billing_date >= now,
                Subscription.billing_date <= now + timedelta(days=RENEWAL_REMINDER_DAYS)
            )
        )
        result = await self.db.execute(stmt)
        subscriptions = result.scalars().all()

        today = datetime(now.year, now.month, now.day)
        already_reminded = {
            (n.data or {}).get("subscription_id")
            for n in await self._recent(user_id, "SUBSCRIPTION_RENEWAL", today)
        }

        created = []
        for sub in subscriptions:
            if sub.id in already_reminded:
                continue
            days_until = math.ceil((sub.billing_date - now).total_seconds() / 86400)
            plural = "" if days_until == 1 else "s"
            created.append(await self.create(
                user_id,
                "Subscription Renewal Reminder",
                f"{sub.name} will renew in {days_until} day{plural} for {sub.price:.2f} {sub.currency}",
                "SUBSCRIPTION_RENEWAL",
                {"subscription_id": sub.id, "amount": sub.price},
            ))
        return created

    async def check_low_balance(self, user_id: int, wallet: Optional[Wallet], now: datetime) -> List[Notification]:
        if not wallet or not wallet.monthly_budget:
            return []
        if wallet.balance >= wallet.monthly_budget * LOW_BALANCE_RATIO:
            return []
        if await self._recent(user_id, "LOW_BALANCE", now - timedelta(days=1)):
            return []

        return [await self.create(
            user_id,
            "Low Balance Alert",
            f"Your wallet balance ({wallet.balance:.2f}) is running low compared to your monthly budget.",
            "LOW_BALANCE",
            {"balance": wallet.balance, "budget": wallet.monthly_budget},
        )]

    async def check_goals(self, user_id: int) -> List[Notification]:
        """Mark reached savings goals completed and congratulate once"""
        stmt = select(Saving).where(
            and_(
                Saving.user_id == user_id,
                Saving.is_active == True,
                Saving.is_completed == False
            )
        )
        result = await self.db.execute(stmt)

        created = []
        for goal in result.scalars().all():
            if goal.target_amount and goal.amount >= goal.target_amount:
                goal.is_completed = True
                created.append(await self.create(
                    user_id,
                    "Savings Goal Achieved!",
                    f"Congratulations! You've reached your goal of {goal.target_amount:.2f} for \"{goal.name}\".",
                    "GOAL_ACHIEVED",
                    {"goal_id": goal.id, "amount": goal.target_amount},
                ))
        return created

    async def check_budget(self, user_id: int, wallet: Optional[Wallet], now: datetime) -> List[Notification]:
        if not wallet or not wallet.monthly_budget:
            return []

        month_start = datetime(now.year, now.month, 1)
        stmt = select(Expense.amount).where(
            and_(
                Expense.user_id == user_id,
                Expense.date >= month_start
            )
        )
        result = await self.db.execute(stmt)
        spent = sum(result.scalars().all())

        if spent <= wallet.monthly_budget:
            return []
        # category budget alerts share the type but carry a budget_id
        recent = await self._recent(user_id, "BUDGET_EXCEEDED", month_start)
        if any("budget_id" not in (n.data or {}) for n in recent):
            return []

        overspent = spent - wallet.monthly_budget
        return [await self.create(
            user_id,
            "Budget Exceeded",
            f"You've exceeded your monthly budget of {wallet.monthly_budget:.2f} by {overspent:.2f}.",
            "BUDGET_EXCEEDED",
            {"budget": wallet.monthly_budget, "spent": spent, "overspent": overspent},
        )]

    async def check_category_budgets(self, user_id: int, now: datetime) -> List[Notification]:
        """
        One BUDGET_EXCEEDED or BUDGET_WARNING per category budget per month;
        a budget that already warned can still exceed later in the month.
        """
        stmt = select(Budget).where(
            and_(
                Budget.user_id == user_id,
                Budget.month == now.month,
                Budget.year == now.year,
                Budget.is_active == True,
                Budget.enable_alerts == True
            )
        )
        result = await self.db.execute(stmt)
        budgets = result.scalars().all()
        if not budgets:
            return []

        month_start, month_end = analytics.month_bounds(now.year, now.month)
        result = await self.db.execute(
            select(Expense).where(
                and_(
                    Expense.user_id == user_id,
                    Expense.date >= month_start,
                    Expense.date < month_end
                )
            )
        )
        report = analytics.budget_status(budgets, result.scalars().all(), now.year, now.month)

        async def alerted(type: str) -> set:
            return {
                (n.data or {}).get("budget_id")
                for n in await self._recent(user_id, type, month_start)
            }

        exceeded = await alerted("BUDGET_EXCEEDED")
        warned = exceeded | await alerted("BUDGET_WARNING")

        created = []
        for entry in report['budget_status']:
            budget = entry['budget']
            data = {
                "budget_id": budget.id,
                "category": budget.category,
                "spent": entry['spent'],
                "budget": budget.monthly_limit,
                "month": budget.month,
                "year": budget.year,
            }
            if entry['is_over_budget']:
                if budget.id in exceeded:
                    continue
                created.append(await self.create(
                    user_id,
                    "Budget Exceeded",
                    f"You have exceeded your budget for {budget.category}. "
                    f"Spent: {entry['spent']:.2f}, Budget: {budget.monthly_limit:.2f}",
                    "BUDGET_EXCEEDED",
                    data,
                ))
            elif entry['is_near_limit']:
                if budget.id in warned:
                    continue
                created.append(await self.create(
                    user_id,
                    "Budget Warning",
                    f"You have used {entry['percentage_used']:.1f}% of your budget for {budget.category}",
                    "BUDGET_WARNING",
                    dict(data, percentage=entry['percentage_used']),
                ))
        return created

    async def check_all(self, user_id: int, now: Optional[datetime] = None) -> List[Notification]:
        """Run every check and return the notifications created"""
        if now is None:
            now = datetime.utcnow()

        result = await self.db.execute(select(Wallet).where(Wallet.user_id == user_id))
        wallet = result.scalar_one_or_none()

        created = []
        created += await self.check_renewals(user_id, now)
        created += await self.check_low_balance(user_id, wallet, now)
        created += await self.check_goals(user_id)
        created += await self.check_budget(user_id, wallet, now)
        created += await self.check_category_budgets(user_id, now)

        if created:
            logger.info(f"Created {len(created)} notifications for user {user_id}")
        return created
