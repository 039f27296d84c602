"""
Budget performance and budget recommendations.
"""
import math
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Set

from ledger_metrics.metrics.primitives import (
    ZERO,
    is_expense,
    kind_of,
    percentage,
    sum_where,
    to_decimal,
)


YEAR_TO_DATE = "year_to_date"
RECOMMENDATION_MONTHS = 3

# Upper bounds (exclusive) of each status tier, in percent of budget used
STATUS_TIERS = (
    (50, "good"),
    (85, "warning"),
    (100, "alert"),
)


def budget_status(percentage_used: float) -> str:
    for upper_bound, status in STATUS_TIERS:
        if percentage_used < upper_bound:
            return status
    return "over_budget"


def overlaps_window(budget: Any, start: date, end: date) -> bool:
    return budget.start_date <= end and (budget.end_date is None or budget.end_date >= start)


def effective_budget_amount(budget: Any, period: str) -> Decimal:
    """Yearly budgets are pro-rated to a month unless the query covers the year to date."""
    amount = to_decimal(budget.amount)
    if kind_of(budget.period) == "yearly" and period != YEAR_TO_DATE:
        amount = amount / 12
    return amount


def _category_name(record: Any, default: str) -> str:
    category = getattr(record, "category", None)
    return category.name if category is not None else default


def evaluate_budget_performance(
    budgets: Iterable[Any],
    transactions: Iterable[Any],
    start: date,
    end: date,
    period: str = "current",
) -> Dict[str, Any]:
    """
    Compare each active budget with the expenses booked against its category
    inside ``[start, end]``.
    """
    expenses = [
        t for t in transactions
        if is_expense(t) and start <= t.transaction_date <= end
    ]

    categories: List[Dict[str, Any]] = []
    total_budgeted = ZERO
    total_spent = ZERO

    for budget in budgets:
        if not overlaps_window(budget, start, end):
            continue

        budgeted = effective_budget_amount(budget, period)
        matching = [t for t in expenses if t.category_id == budget.category_id]
        spent = sum_where(matching)
        used = percentage(spent, budgeted)

        categories.append({
            "budget_id": getattr(budget, "id", None),
            "category_id": budget.category_id,
            "category_name": _category_name(budget, "Unknown"),
            "budgeted": budgeted,
            "spent": spent,
            "remaining": budgeted - spent,
            "percentage": used,
            "status": budget_status(used),
            "transaction_count": len(matching),
        })
        total_budgeted += budgeted
        total_spent += spent

    categories.sort(key=lambda item: item["percentage"], reverse=True)

    overall_percentage = percentage(total_spent, total_budgeted)
    return {
        "period": {"start_date": start, "end_date": end},
        "overall": {
            "budgeted": total_budgeted,
            "spent": total_spent,
            "remaining": total_budgeted - total_spent,
            "percentage": overall_percentage,
            "status": budget_status(overall_percentage),
        },
        "categories": categories,
    }


def recommend_budgets(
    transactions: Iterable[Any],
    budgeted_category_ids: Set[int],
    months: int = RECOMMENDATION_MONTHS,
) -> List[Dict[str, Any]]:
    """
    Suggest a monthly budget for every category with spending but no budget.

    ``transactions`` should already be limited to the trailing window.
    """
    grouped: Dict[int, Dict[str, Any]] = {}
    for transaction in transactions:
        if not is_expense(transaction) or not transaction.category_id:
            continue
        entry = grouped.setdefault(transaction.category_id, {
            "category_id": transaction.category_id,
            "category_name": _category_name(transaction, "Unknown"),
            "total": ZERO,
            "count": 0,
        })
        entry["total"] += to_decimal(transaction.amount)
        entry["count"] += 1

    recommendations = []
    for category_id, entry in grouped.items():
        if category_id in budgeted_category_ids:
            continue
        average_monthly = entry["total"] / months
        if average_monthly <= 0:
            continue
        recommendations.append({
            "category_id": category_id,
            "category_name": entry["category_name"],
            "average_monthly_expense": average_monthly,
            "recommended_budget": Decimal(math.ceil(average_monthly / 10) * 10),
            "transaction_count": entry["count"],
        })

    recommendations.sort(key=lambda item: item["average_monthly_expense"], reverse=True)
    return recommendations


def budgeted_categories(budgets: Iterable[Any]) -> Set[int]:
    return {budget.category_id for budget in budgets}
