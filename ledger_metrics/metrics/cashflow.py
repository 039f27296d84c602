"""
Cash flow, expense breakdown, dashboard deltas and account balance history.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Tuple

from ledger_metrics.metrics.kpi import savings_rate
from ledger_metrics.metrics.periods import period_key
from ledger_metrics.metrics.primitives import (
    ZERO,
    growth_rate,
    is_expense,
    is_income,
    percentage,
    signed_amount,
    sum_where,
    to_decimal,
)


def income_and_expenses(transactions: Iterable[Any]) -> Tuple[Decimal, Decimal]:
    transactions = list(transactions)
    return sum_where(transactions, is_income), sum_where(transactions, is_expense)


def _change(value: Any, previous: Any, positive_when_falling: bool = False) -> Dict[str, Any]:
    change = growth_rate(value, previous)
    improving = change <= 0 if positive_when_falling else change >= 0
    return {
        "value": value,
        "change": change,
        "change_type": "positive" if improving else "negative",
    }


def dashboard_summary(
    current_transactions: Iterable[Any],
    previous_transactions: Iterable[Any],
    current_net_worth: Any,
    previous_net_worth: Optional[Any] = None,
) -> Dict[str, Any]:
    """
    Month-over-month view of income, expenses, savings rate and net worth.

    The savings-rate change is a difference in percentage points and stays 0
    while the previous month's rate is not positive.
    """
    income, expenses = income_and_expenses(current_transactions)
    previous_income, previous_expenses = income_and_expenses(previous_transactions)

    rate = savings_rate(income, expenses)
    previous_rate = savings_rate(previous_income, previous_expenses)
    rate_change = rate - previous_rate if previous_rate > 0 else 0.0

    return {
        "net_worth": _change(to_decimal(current_net_worth), to_decimal(previous_net_worth)),
        "monthly_income": _change(income, previous_income),
        "monthly_expenses": _change(expenses, previous_expenses, positive_when_falling=True),
        "savings_rate": {
            "value": rate,
            "change": rate_change,
            "change_type": "positive" if rate_change >= 0 else "negative",
        },
    }


def cash_flow(transactions: Iterable[Any], granularity: str = "monthly") -> List[Dict[str, Any]]:
    buckets: Dict[str, Dict[str, Any]] = {}
    for transaction in transactions:
        key = period_key(transaction.transaction_date, granularity)
        bucket = buckets.setdefault(key, {"period": key, "income": ZERO, "expenses": ZERO, "net": ZERO})
        if is_income(transaction):
            bucket["income"] += to_decimal(transaction.amount)
        elif is_expense(transaction):
            bucket["expenses"] += to_decimal(transaction.amount)
        bucket["net"] = bucket["income"] - bucket["expenses"]

    return [buckets[key] for key in sorted(buckets)]


def expense_breakdown(transactions: Iterable[Any]) -> Dict[str, Any]:
    groups: Dict[int, Dict[str, Any]] = {}
    total = ZERO
    for transaction in transactions:
        if not is_expense(transaction):
            continue
        category = getattr(transaction, "category", None)
        category_id = category.id if category is not None else 0
        group = groups.setdefault(category_id, {
            "category_id": category_id,
            "category_name": category.name if category is not None else "Uncategorized",
            "amount": ZERO,
            "count": 0,
        })
        amount = to_decimal(transaction.amount)
        group["amount"] += amount
        group["count"] += 1
        total += amount

    breakdown = [
        {**group, "percentage": percentage(group["amount"], total)}
        for group in groups.values()
    ]
    breakdown.sort(key=lambda item: item["amount"], reverse=True)
    return {"total_expenses": total, "breakdown": breakdown}


def account_balance(initial_balance: Any, transactions: Iterable[Any]) -> Decimal:
    """Balance as a fold over the ledger: opening balance plus every signed amount."""
    return to_decimal(initial_balance) + sum((signed_amount(t) for t in transactions), ZERO)


def balance_history(initial_balance: Any, transactions: Iterable[Any]) -> List[Dict[str, Any]]:
    """Running balance after each transaction, oldest first."""
    balance = to_decimal(initial_balance)
    history = []
    for transaction in sorted(transactions, key=lambda t: (t.transaction_date, t.id)):
        balance += signed_amount(transaction)
        history.append({
            "date": transaction.transaction_date,
            "balance": balance,
            "transaction_id": transaction.id,
        })
    return history
