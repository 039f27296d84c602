"""
KPI formulas: net worth, savings rate, freedom number, FI index and the
composite financial health score.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Sequence, Tuple

from ledger_metrics.metrics.primitives import (
    growth_rate,
    percentage,
    sum_where,
    to_decimal,
)


NET_WORTH = "net_worth"
SAVINGS_RATE = "savings_rate"
FI_INDEX = "fi_index"
FREEDOM_NUMBER = "freedom_number"
HEALTH_SCORE = "health_score"

KPI_TYPES = (NET_WORTH, SAVINGS_RATE, FI_INDEX, FREEDOM_NUMBER, HEALTH_SCORE)

# (upper bound, points) for positive net worth; anything above the last bound scores 40
NET_WORTH_SCORE_BANDS = (
    (Decimal("10000"), 10),
    (Decimal("50000"), 20),
    (Decimal("100000"), 30),
)
NET_WORTH_MAX_SCORE = 40
SAVINGS_RATE_MAX_SCORE = 40
FI_PROGRESS_MAX_SCORE = 20

HEALTH_STATUS_BANDS = (
    (80, "Excellent"),
    (60, "Good"),
    (40, "Fair"),
)


def net_worth(assets: Iterable[Any], liabilities: Iterable[Any]) -> Decimal:
    """Point-in-time net worth: total asset value minus total liability amount."""
    return sum_where(assets, field="value") - sum_where(liabilities, field="amount")


def savings_rate(income: Any, expenses: Any) -> float:
    income = to_decimal(income)
    return percentage(income - to_decimal(expenses), income)


def net_worth_growth(values: Sequence[Any]) -> Tuple[float, float]:
    """
    Monthly and yearly growth over a KPI series in ascending date order.

    Monthly growth compares the last two entries. Yearly growth compares the
    twelfth-from-last entry with the last one and needs at least 12 entries.
    """
    monthly_growth = 0.0
    yearly_growth = 0.0
    if len(values) >= 2:
        current = values[-1]
        monthly_growth = growth_rate(current, values[-2])
        if len(values) >= 12:
            yearly_growth = growth_rate(current, values[-12])
    return monthly_growth, yearly_growth


def freedom_number(annual_expenses: Any, withdrawal_rate: Any = 4) -> Decimal:
    withdrawal_rate = to_decimal(withdrawal_rate)
    if withdrawal_rate <= 0:
        return Decimal("0")
    return to_decimal(annual_expenses) / (withdrawal_rate / 100)


def fi_index(net_worth_value: Any, freedom_number_value: Any) -> float:
    return percentage(net_worth_value, freedom_number_value)


def net_worth_score(net_worth_value: Any) -> int:
    value = to_decimal(net_worth_value)
    if value <= 0:
        return 0
    for upper_bound, points in NET_WORTH_SCORE_BANDS:
        if value < upper_bound:
            return points
    return NET_WORTH_MAX_SCORE


def savings_rate_score(savings_rate_value: Any) -> float:
    value = float(to_decimal(savings_rate_value))
    if value <= 0:
        return 0.0
    return min(float(SAVINGS_RATE_MAX_SCORE), value)


def fi_progress_score(fi_index_value: Any) -> float:
    value = float(to_decimal(fi_index_value))
    if value <= 0:
        return 0.0
    return min(float(FI_PROGRESS_MAX_SCORE), value / 5)


def health_status(score: float) -> str:
    for threshold, label in HEALTH_STATUS_BANDS:
        if score >= threshold:
            return label
    return "Needs Improvement"


def health_score(net_worth_value: Any, savings_rate_value: Any, fi_index_value: Any) -> Dict[str, Any]:
    components: List[Dict[str, Any]] = [
        {"name": "Net Worth", "score": float(net_worth_score(net_worth_value)), "max_score": NET_WORTH_MAX_SCORE},
        {"name": "Savings Rate", "score": savings_rate_score(savings_rate_value), "max_score": SAVINGS_RATE_MAX_SCORE},
        {
            "name": "Financial Independence Progress",
            "score": fi_progress_score(fi_index_value),
            "max_score": FI_PROGRESS_MAX_SCORE,
        },
    ]
    score = sum(component["score"] for component in components)
    return {
        "score": score,
        "status": health_status(score),
        "components": components,
    }


def average(values: Sequence[Any]) -> float:
    if not values:
        return 0.0
    return float(sum(to_decimal(value) for value in values) / len(values))
