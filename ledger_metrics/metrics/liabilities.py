"""
Liability summary and debt payoff projection.

The projection is a plain month-by-month amortisation of the whole debt at
the weighted interest rate under one fixed aggregate monthly payment.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from ledger_metrics.metrics.primitives import (
    ZERO,
    kind_of,
    sum_where,
    to_decimal,
)


MAX_PROJECTION_MONTHS = 360  # 30 years
SNAPSHOT_EVERY_MONTHS = 12

# Multiplier turning one periodic payment into its monthly equivalent
PAYMENT_FREQUENCY_MULTIPLIERS = {
    "weekly": Decimal("4.33"),
    "bi-weekly": Decimal("2.17"),
    "monthly": Decimal("1"),
    "quarterly": Decimal("1") / 3,
    "annually": Decimal("1") / 12,
}


def monthly_equivalent(payment_amount: Any, payment_frequency: Optional[Any]) -> Decimal:
    """Unknown or missing frequencies are treated as monthly."""
    multiplier = PAYMENT_FREQUENCY_MULTIPLIERS.get(kind_of(payment_frequency), Decimal("1"))
    return to_decimal(payment_amount) * multiplier


def monthly_payment_total(liabilities: Iterable[Any]) -> Decimal:
    return sum(
        (monthly_equivalent(liability.payment_amount, liability.payment_frequency)
         for liability in liabilities if liability.payment_amount is not None),
        ZERO,
    )


def weighted_interest_rate(liabilities: Iterable[Any]) -> Decimal:
    liabilities = list(liabilities)
    total_debt = sum_where(liabilities, field="amount")
    if total_debt <= 0:
        return ZERO
    weighted = sum(
        (to_decimal(liability.amount) * to_decimal(liability.interest_rate) for liability in liabilities),
        ZERO,
    )
    return weighted / total_debt


def debt_by_type(liabilities: Iterable[Any]) -> List[Dict[str, Any]]:
    groups: Dict[str, Dict[str, Any]] = {}
    for liability in liabilities:
        liability_type = kind_of(liability.liability_type)
        group = groups.setdefault(liability_type, {"amounts": [], "rates": []})
        group["amounts"].append(to_decimal(liability.amount))
        if liability.interest_rate is not None:
            group["rates"].append(to_decimal(liability.interest_rate))

    summary = []
    for liability_type, group in groups.items():
        rates = group["rates"]
        summary.append({
            "type": liability_type,
            "total_amount": sum(group["amounts"], ZERO),
            "avg_interest_rate": sum(rates, ZERO) / len(rates) if rates else None,
            "count": len(group["amounts"]),
        })
    return summary


def project_payoff(
    total_debt: Any,
    annual_interest_rate: Any,
    monthly_payment: Any,
    max_months: int = MAX_PROJECTION_MONTHS,
) -> List[Dict[str, Any]]:
    """
    Simulate paying ``total_debt`` down with ``monthly_payment`` a month.

    A snapshot is taken every 12 months and in the month the debt reaches
    zero. No payment means no projection.
    """
    monthly_payment = to_decimal(monthly_payment)
    if monthly_payment <= 0:
        return []

    monthly_rate = to_decimal(annual_interest_rate) / 100 / 12
    remaining = to_decimal(total_debt)
    projections = []
    month = 0

    while remaining > 0 and month < max_months:
        month += 1
        interest = remaining * monthly_rate
        payment = min(monthly_payment, remaining + interest)
        remaining = remaining + interest - payment

        if month % SNAPSHOT_EVERY_MONTHS == 0 or remaining <= 0:
            projections.append({
                "month": month,
                "year": month // 12,
                "remaining_debt": max(ZERO, remaining),
                "total_paid": monthly_payment * month,
            })

    return projections


def liability_summary(liabilities: Iterable[Any]) -> Dict[str, Any]:
    liabilities = list(liabilities)
    total_debt = sum_where(liabilities, field="amount")
    rate = weighted_interest_rate(liabilities)
    payment_total = monthly_payment_total(liabilities)

    return {
        "total_debt": total_debt,
        "weighted_interest_rate": rate,
        "monthly_payment_total": payment_total,
        "debt_by_type": debt_by_type(liabilities),
        "payoff_projections": project_payoff(total_debt, rate, payment_total),
    }
