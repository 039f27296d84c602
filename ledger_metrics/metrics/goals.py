"""
Goal progress, completion and suggestions for common savings goals.
"""
from typing import Any, Dict, Iterable, List

from ledger_metrics.metrics.primitives import kind_of, percentage, to_decimal


ACTIVE = "active"
COMPLETED = "completed"

# (name, category, description, priority); lower priority numbers come first
COMMON_GOALS = (
    ("Emergency Fund", "emergency_fund", "Save 3-6 months of living expenses for emergencies", 1),
    ("Debt Payoff", "debt_payoff", "Pay off high-interest debt", 1),
    ("Retirement Savings", "retirement", "Save for retirement through pension or investment accounts", 2),
    ("Home Purchase", "home_purchase", "Save for a down payment on a home", 2),
    ("Education Fund", "education", "Save for education expenses", 3),
    ("Vacation Fund", "vacation", "Save for your next vacation", 4),
    ("New Car Fund", "car_purchase", "Save for your next vehicle purchase", 3),
    ("Financial Independence", "financial_independence", "Save enough to achieve financial independence", 2),
)


def goal_progress(current_amount: Any, target_amount: Any) -> float:
    return percentage(current_amount, target_amount)


def is_goal_reached(current_amount: Any, target_amount: Any) -> bool:
    return to_decimal(current_amount) >= to_decimal(target_amount)


def next_goal_status(status: Any, current_amount: Any, target_amount: Any) -> str:
    """A goal flips to completed as soon as the saved amount reaches the target."""
    if is_goal_reached(current_amount, target_amount):
        return COMPLETED
    return kind_of(status)


def recommend_goals(goals: Iterable[Any]) -> List[Dict[str, Any]]:
    """
    Common goals whose category is not covered by one of the user's active
    goals, ordered by priority. Goals in any other status do not count.
    """
    covered = {goal.category for goal in goals if kind_of(goal.status) == ACTIVE}
    suggestions = [
        {"name": name, "category": category, "description": description, "priority": priority}
        for name, category, description, priority in COMMON_GOALS
        if category not in covered
    ]
    suggestions.sort(key=lambda goal: goal["priority"])
    return suggestions
