from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace

import pytest

from ledger_metrics.metrics.assets import asset_allocation, asset_performance
from ledger_metrics.metrics.primitives import MAX_ANNUALIZED_RETURN


def _asset(asset_id, asset_type, value, acquisition_price=None, current_price=None, quantity=None,
           acquisition_date=None):
    return SimpleNamespace(
        id=asset_id,
        name=f"asset-{asset_id}",
        asset_type=asset_type,
        value=Decimal(str(value)),
        acquisition_price=Decimal(str(acquisition_price)) if acquisition_price is not None else None,
        current_price=Decimal(str(current_price)) if current_price is not None else None,
        quantity=Decimal(str(quantity)) if quantity is not None else None,
        acquisition_date=acquisition_date,
    )


def test_allocation_by_type_sorted_by_value():
    assets = [_asset(1, "cash", 10000), _asset(2, "stock", 60000), _asset(3, "bond", 30000)]

    result = asset_allocation(assets)

    assert result["total_value"] == Decimal("100000")
    assert [(row["type"], row["value"], row["percentage"]) for row in result["allocation"]] == [
        ("stock", Decimal("60000"), 60.0),
        ("bond", Decimal("30000"), 30.0),
        ("cash", Decimal("10000"), 10.0),
    ]
    assert result["recommended_allocation"] == {
        "stock": 60, "bond": 30, "cash": 10, "real_estate": 0, "crypto": 0, "other": 0,
    }


def test_allocation_of_empty_portfolio():
    result = asset_allocation([])
    assert result["total_value"] == Decimal("0")
    assert result["allocation"] == []


def test_performance_of_two_year_holding():
    as_of = date(2024, 6, 1)
    asset = _asset(1, "stock", 1500, acquisition_price=100, current_price=150, quantity=10,
                   acquisition_date=as_of - timedelta(days=730))

    [row] = asset_performance([asset], as_of)

    assert row["acquisition_value"] == Decimal("1000")
    assert row["current_value"] == Decimal("1500")
    assert row["absolute_return"] == Decimal("500")
    assert row["percentage_return"] == 50.0
    assert row["holding_period_years"] == pytest.approx(2.0)
    assert row["annualized_return"] == pytest.approx(22.47, abs=0.01)


def test_performance_skips_unpriced_assets_and_sorts_by_return():
    as_of = date(2024, 6, 1)
    bought = date(2023, 6, 2)
    assets = [
        _asset(1, "stock", 0, acquisition_price=100, current_price=90, quantity=1, acquisition_date=bought),
        _asset(2, "crypto", 0, acquisition_price=100, current_price=300, acquisition_date=bought),
        _asset(3, "cash", 500),
        _asset(4, "bond", 0, acquisition_price=100, acquisition_date=bought),
    ]

    rows = asset_performance(assets, as_of)

    assert [row["id"] for row in rows] == [2, 1]
    # missing quantity counts as one unit
    assert rows[0]["acquisition_value"] == Decimal("100")
    assert rows[0]["percentage_return"] == 200.0
    assert rows[1]["percentage_return"] == -10.0


def test_same_day_purchase_has_zero_annualized_return():
    as_of = date(2024, 6, 1)
    asset = _asset(1, "stock", 0, acquisition_price=100, current_price=120, quantity=1, acquisition_date=as_of)
    [row] = asset_performance([asset], as_of)
    assert row["annualized_return"] == 0.0
    assert row["percentage_return"] == 20.0


def test_large_gain_over_one_day_is_capped_instead_of_overflowing():
    as_of = date(2024, 3, 15)
    asset = _asset(1, "crypto", 10, acquisition_price=1, current_price=10, quantity=1,
                   acquisition_date=date(2024, 3, 14))

    [row] = asset_performance([asset], as_of)

    assert row["percentage_return"] == 900.0
    assert row["annualized_return"] == MAX_ANNUALIZED_RETURN


def test_asset_without_performance_data_still_counts_in_allocation():
    as_of = date(2024, 6, 1)
    priced = _asset(1, "stock", 7500, acquisition_price=50, current_price=75, quantity=100,
                    acquisition_date=date(2023, 6, 2))
    unpriced = _asset(2, "real_estate", 2500)

    rows = asset_performance([priced, unpriced], as_of)
    allocation = asset_allocation([priced, unpriced])

    assert [row["id"] for row in rows] == [1]
    assert [(row["type"], row["percentage"]) for row in allocation["allocation"]] == [
        ("stock", 75.0),
        ("real_estate", 25.0),
    ]
