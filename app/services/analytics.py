"""
Analytics Service
Pure aggregations over a user's already-loaded records
"""

from datetime import datetime, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

UNCATEGORIZED = "Other"
RENEWAL_WINDOW_DAYS = 30
RECENT_COUNT = 5

def _start_of_month(now: datetime) -> datetime:
    return datetime(now.year, now.month, 1)

def average(total: float, count: int) -> float:
    return total / max(count, 1)

def spending_by_category(subscriptions: Iterable) -> Dict[str, float]:
    """
    Sum subscription prices per category.

    A subscription listed under several categories adds its full price to
    each of them, so the bucket total can exceed the real monthly spend.
    """
    spending: Dict[str, float] = {}
    for sub in subscriptions:
        for category in sub.categories or []:
            spending[category] = spending.get(category, 0.0) + sub.price
    return spending

def subscription_totals(subscriptions: Iterable) -> Dict:
    """Monthly total, flat x12 annual projection and average price"""
    prices = [sub.price for sub in subscriptions]
    total_monthly = sum(prices)
    return {
        'count': len(prices),
        'total_monthly': total_monthly,
        'total_annual': total_monthly * 12,
        'average_price': average(total_monthly, len(prices)),
    }

def upcoming_renewals(subscriptions: Iterable, now: Optional[datetime] = None,
                      days: int = RENEWAL_WINDOW_DAYS) -> List:
    """Subscriptions billing between now and now + days, soonest first"""
    if now is None:
        now = datetime.utcnow()
    horizon = now + timedelta(days=days)
    upcoming = [sub for sub in subscriptions if now <= sub.billing_date <= horizon]
    return sorted(upcoming, key=lambda sub: sub.billing_date)

def subscription_stats(subscriptions: Iterable, now: Optional[datetime] = None) -> Dict:
    subscriptions = list(subscriptions)
    stats = subscription_totals(subscriptions)
    stats['spending_by_category'] = spending_by_category(subscriptions)
    stats['upcoming_renewals'] = upcoming_renewals(subscriptions, now)
    return stats

def expense_stats(expenses: Iterable, now: Optional[datetime] = None) -> Dict:
    """
    Month-to-date and last-7-days totals plus a month-to-date breakdown.

    ``expenses`` is expected newest first, as the list endpoint returns it.
    """
    if now is None:
        now = datetime.utcnow()
    expenses = list(expenses)
    month_start = _start_of_month(now)
    week_start = now - timedelta(days=7)

    monthly = [e for e in expenses if e.date >= month_start]
    weekly = [e for e in expenses if e.date >= week_start]

    breakdown: Dict[str, float] = {}
    for expense in monthly:
        category = expense.category or UNCATEGORIZED
        breakdown[category] = breakdown.get(category, 0.0) + expense.amount

    total_monthly = sum(e.amount for e in monthly)
    return {
        'total_monthly': total_monthly,
        'total_weekly': sum(e.amount for e in weekly),
        'average_monthly_expense': average(total_monthly, len(monthly)),
        'recent_expenses': expenses[:RECENT_COUNT],
        'category_breakdown': breakdown,
    }

def saving_stats(savings: Iterable, now: Optional[datetime] = None) -> Dict:
    if now is None:
        now = datetime.utcnow()
    savings = list(savings)
    month_start = _start_of_month(now)

    category_totals: Dict[str, float] = {}
    for saving in savings:
        category = saving.category or UNCATEGORIZED
        category_totals[category] = category_totals.get(category, 0.0) + saving.amount

    goal_progress = [
        {
            'id': s.id,
            'name': s.name,
            'current': s.amount,
            'target': s.target_amount,
            'progress': round(s.amount / s.target_amount * 100, 1),
        }
        for s in savings if s.target_amount and s.target_amount > 0
    ]

    return {
        'total_savings': sum(s.amount for s in savings),
        'total_count': len(savings),
        'active_count': len([s for s in savings if s.is_active]),
        'total_target': sum(s.target_amount or 0 for s in savings),
        'this_month_total': sum(s.amount for s in savings if s.date >= month_start),
        'category_totals': category_totals,
        'goal_progress': goal_progress,
    }

def wallet_stats(wallet, incomes: Iterable, expenses: Iterable,
                 now: Optional[datetime] = None) -> Dict:
    if now is None:
        now = datetime.utcnow()
    incomes = list(incomes)
    expenses = list(expenses)
    month_start = _start_of_month(now)

    monthly_income = sum(i.amount for i in incomes if i.date >= month_start)
    monthly_expenses = sum(e.amount for e in expenses if e.date >= month_start)
    total_income = sum(i.amount for i in incomes)
    total_expenses = sum(e.amount for e in expenses)

    return {
        'balance': wallet.balance,
        'monthly_budget': wallet.monthly_budget,
        'currency': wallet.currency,
        'monthly_income': monthly_income,
        'monthly_expenses': monthly_expenses,
        'total_income': total_income,
        'total_expenses': total_expenses,
        'net_worth': total_income - total_expenses,
        'budget_remaining': (wallet.monthly_budget or 0) - monthly_expenses,
        'income_count': len(incomes),
    }

def month_bounds(year: int, month: int) -> Tuple[datetime, datetime]:
    """First instant of the month and of the month after it"""
    start = datetime(year, month, 1)
    if month == 12:
        return start, datetime(year + 1, 1, 1)
    return start, datetime(year, month + 1, 1)

def budget_status(budgets: Iterable, expenses: Iterable, year: int, month: int) -> Dict:
    """
    Spending against each category budget for one calendar month.

    Each entry of ``budget_status`` pairs the budget row with ``spent``,
    ``remaining`` (never negative), ``percentage_used``, ``is_over_budget``
    (strictly above the limit) and ``is_near_limit`` (at or above the
    budget's alert threshold). Categories with spending but no budget are
    listed separately; ``total_spent`` covers every category.
    """
    budgets = list(budgets)
    start, end = month_bounds(year, month)

    spending: Dict[str, float] = {}
    for expense in expenses:
        if start <= expense.date < end:
            category = expense.category or UNCATEGORIZED
            spending[category] = spending.get(category, 0.0) + expense.amount

    statuses = []
    for budget in budgets:
        spent = spending.get(budget.category, 0.0)
        limit = budget.monthly_limit
        percentage_used = spent / limit * 100 if limit > 0 else 0.0
        statuses.append({
            'budget': budget,
            'spent': spent,
            'remaining': max(0.0, limit - spent),
            'percentage_used': percentage_used,
            'is_over_budget': spent > limit,
            'is_near_limit': percentage_used >= budget.alert_threshold,
        })

    budgeted = {budget.category for budget in budgets}
    return {
        'budget_status': statuses,
        'categories_without_budget': [
            {'category': category, 'spent': spent}
            for category, spent in sorted(spending.items()) if category not in budgeted
        ],
        'total_budget': sum(budget.monthly_limit for budget in budgets),
        'total_spent': sum(spending.values()),
    }
