from decimal import Decimal

import pytest

from ledger_metrics.db.core import TransactionType
from ledger_metrics.metrics.primitives import (
    MAX_ANNUALIZED_RETURN,
    annualized_return,
    growth_rate,
    is_expense,
    percentage,
    round_half_up,
    signed_amount,
    sum_where,
    to_money,
)

from conftest import make_transaction


def test_percentage_guards_non_positive_denominator():
    assert percentage(50, 200) == 25.0
    assert percentage(50, 0) == 0.0
    assert percentage(50, -10) == 0.0


def test_growth_rate_against_previous_value():
    assert growth_rate(110, 100) == pytest.approx(10.0)
    assert growth_rate(90, 100) == pytest.approx(-10.0)
    assert growth_rate(500, 0) == 0.0


def test_signed_amount_derives_sign_from_type():
    assert signed_amount(make_transaction("25.50", "income")) == Decimal("25.50")
    assert signed_amount(make_transaction("25.50", "expense")) == Decimal("-25.50")
    assert signed_amount(make_transaction("25.50", "transfer")) == Decimal("0")


def test_signed_amount_accepts_orm_enum_members():
    assert signed_amount(make_transaction("10", TransactionType.EXPENSE)) == Decimal("-10")
    assert signed_amount(make_transaction("10", TransactionType.INCOME)) == Decimal("10")


def test_sum_where_is_not_sign_aware():
    records = [
        make_transaction("100", "income"),
        make_transaction("40", "expense"),
        make_transaction("60", "expense"),
    ]
    assert sum_where(records) == Decimal("200")
    assert sum_where(records, is_expense) == Decimal("100")


def test_annualized_return_fractional_exponent():
    # 1000 -> 1500 over two years
    assert annualized_return(1500, 1000, 2) == pytest.approx(22.474, abs=1e-3)


def test_annualized_return_zero_without_holding_period_or_cost():
    assert annualized_return(1500, 1000, 0) == 0.0
    assert annualized_return(1500, 0, 2) == 0.0


def test_annualized_return_total_loss():
    assert annualized_return(0, 1000, 2) == -100.0


def test_annualized_return_caps_short_holding_with_large_gain():
    # 10x in one day would compound to 10**365
    assert annualized_return(10, 1, 1 / 365) == MAX_ANNUALIZED_RETURN
    assert annualized_return(10, 1, 1) == pytest.approx(900.0)


def test_rounding_helpers():
    assert to_money("10.005") == Decimal("10.01")
    assert round_half_up(29.5) == 30
    assert round_half_up(29.49) == 29
