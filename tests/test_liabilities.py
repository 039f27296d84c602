from decimal import Decimal
from types import SimpleNamespace

import pytest

from ledger_metrics.db.core import LiabilityType, PaymentFrequency
from ledger_metrics.metrics.liabilities import (
    debt_by_type,
    liability_summary,
    monthly_equivalent,
    project_payoff,
    weighted_interest_rate,
)


def _liability(amount, rate=None, payment=None, frequency=None, liability_type="mortgage"):
    return SimpleNamespace(
        amount=Decimal(str(amount)),
        interest_rate=Decimal(str(rate)) if rate is not None else None,
        payment_amount=Decimal(str(payment)) if payment is not None else None,
        payment_frequency=frequency,
        liability_type=liability_type,
    )


@pytest.mark.parametrize("frequency,expected", [
    ("weekly", 433),
    ("bi-weekly", 217),
    ("monthly", 100),
    ("quarterly", 33.333),
    ("annually", 8.333),
    (None, 100),
    ("fortnightly", 100),
    (PaymentFrequency.BI_WEEKLY, 217),
])
def test_monthly_equivalent(frequency, expected):
    assert float(monthly_equivalent(100, frequency)) == pytest.approx(expected, abs=1e-3)


def test_weighted_rate_treats_missing_rate_as_zero():
    assert weighted_interest_rate([_liability(10000, 5), _liability(30000)]) == Decimal("1.25")
    assert weighted_interest_rate([]) == Decimal("0")


def test_debt_by_type_groups_and_averages():
    rows = debt_by_type([
        _liability(1000, 20, liability_type=LiabilityType.CREDIT_CARD),
        _liability(3000, 10, liability_type=LiabilityType.CREDIT_CARD),
        _liability(5000, liability_type="personal_loan"),
    ])
    by_type = {row["type"]: row for row in rows}
    assert by_type["credit_card"]["total_amount"] == Decimal("4000")
    assert by_type["credit_card"]["avg_interest_rate"] == Decimal("15")
    assert by_type["credit_card"]["count"] == 2
    assert by_type["personal_loan"]["avg_interest_rate"] is None


def test_interest_free_payoff_snapshots_on_payoff_month():
    assert project_payoff(1200, 0, 100) == [
        {"month": 12, "year": 1, "remaining_debt": Decimal("0"), "total_paid": Decimal("1200")},
    ]


def test_payoff_with_interest():
    projections = project_payoff(10000, 12, 500)

    assert [p["month"] for p in projections] == [12, 23]
    assert projections[0]["remaining_debt"] > 0
    assert projections[-1]["remaining_debt"] == 0
    assert projections[-1]["total_paid"] == Decimal("11500")


def test_payoff_stops_after_thirty_years_when_payment_never_covers_interest():
    projections = project_payoff(100000, 12, 500)

    assert len(projections) == 30
    assert projections[-1]["month"] == 360
    assert projections[-1]["year"] == 30
    assert projections[-1]["remaining_debt"] > Decimal("100000")


def test_no_projection_without_payment():
    assert project_payoff(5000, 5, 0) == []


def test_summary_combines_payment_frequencies():
    summary = liability_summary([
        _liability(12000, 6, payment=500, frequency="monthly", liability_type="car_loan"),
        _liability(6000, 3, payment=100, frequency="weekly", liability_type="student_loan"),
        _liability(2000, 24, liability_type="credit_card"),
    ])

    assert summary["total_debt"] == Decimal("20000")
    assert summary["monthly_payment_total"] == Decimal("933.00")
    assert summary["weighted_interest_rate"] == Decimal("6.9")
    assert summary["payoff_projections"][-1]["remaining_debt"] == 0
    assert len(summary["debt_by_type"]) == 3
