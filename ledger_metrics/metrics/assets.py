"""
Asset performance and portfolio allocation.
"""
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from ledger_metrics.metrics.primitives import (
    ZERO,
    annualized_return,
    kind_of,
    percentage,
    to_decimal,
)


DAYS_PER_YEAR = 365

# Static default target mix; not personalised to the user
RECOMMENDED_ALLOCATION = {
    "stock": 60,
    "bond": 30,
    "cash": 10,
    "real_estate": 0,
    "crypto": 0,
    "other": 0,
}


def has_performance_data(asset: Any) -> bool:
    return (
        asset.acquisition_price is not None
        and asset.acquisition_date is not None
        and asset.current_price is not None
    )


def holding_period_years(acquisition_date: date, as_of: date) -> float:
    """Fixed 365-day years, not a calendar-aware day count."""
    return (as_of - acquisition_date).days / DAYS_PER_YEAR


def asset_performance(assets: Iterable[Any], as_of: date) -> List[Dict[str, Any]]:
    """Return and annualized return for every asset with acquisition and current pricing."""
    performance = []
    for asset in assets:
        if not has_performance_data(asset):
            continue

        quantity = to_decimal(asset.quantity) if asset.quantity is not None else Decimal("1")
        acquisition_value = to_decimal(asset.acquisition_price) * quantity
        current_value = to_decimal(asset.current_price) * quantity
        absolute_return = current_value - acquisition_value
        years = holding_period_years(asset.acquisition_date, as_of)

        performance.append({
            "id": asset.id,
            "name": asset.name,
            "type": kind_of(asset.asset_type),
            "acquisition_value": acquisition_value,
            "current_value": current_value,
            "absolute_return": absolute_return,
            "percentage_return": percentage(absolute_return, acquisition_value),
            "annualized_return": annualized_return(current_value, acquisition_value, years),
            "holding_period_years": years,
        })

    performance.sort(key=lambda item: item["percentage_return"], reverse=True)
    return performance


def asset_allocation(assets: Iterable[Any]) -> Dict[str, Any]:
    totals: Dict[str, Decimal] = {}
    for asset in assets:
        asset_type = kind_of(asset.asset_type)
        totals[asset_type] = totals.get(asset_type, ZERO) + to_decimal(asset.value)

    total_value = sum(totals.values(), ZERO)
    allocation = [
        {"type": asset_type, "value": value, "percentage": percentage(value, total_value)}
        for asset_type, value in totals.items()
    ]
    allocation.sort(key=lambda item: item["value"], reverse=True)

    return {
        "total_value": total_value,
        "allocation": allocation,
        "recommended_allocation": dict(RECOMMENDED_ALLOCATION),
    }
