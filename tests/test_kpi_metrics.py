from decimal import Decimal
from types import SimpleNamespace

import pytest

from ledger_metrics.metrics.kpi import (
    fi_index,
    freedom_number,
    health_score,
    net_worth,
    net_worth_growth,
    net_worth_score,
    savings_rate,
)


def test_net_worth_sums_assets_minus_liabilities():
    assets = [SimpleNamespace(value=Decimal("60000")), SimpleNamespace(value=Decimal("30000")),
              SimpleNamespace(value=Decimal("10000"))]
    liabilities = [SimpleNamespace(amount=Decimal("15000"))]
    assert net_worth(assets, []) == Decimal("100000")
    assert net_worth(assets, liabilities) == Decimal("85000")


def test_net_worth_is_stable_across_repeated_calls():
    assets = [SimpleNamespace(value=Decimal("1250.50")), SimpleNamespace(value=Decimal("80000"))]
    liabilities = [SimpleNamespace(amount=Decimal("20000.25"))]

    first = net_worth(assets, liabilities)
    second = net_worth(assets, liabilities)

    assert first == second == Decimal("61250.25")
    assert [asset.value for asset in assets] == [Decimal("1250.50"), Decimal("80000")]


def test_savings_rate():
    assert savings_rate(5000, 4000) == pytest.approx(20.0)
    assert savings_rate(5000, 6000) == pytest.approx(-20.0)
    assert savings_rate(0, 300) == 0.0


def test_freedom_number_uses_withdrawal_rate():
    assert freedom_number(40000) == Decimal("1000000")
    assert freedom_number(40000, 5) == Decimal("800000")
    assert freedom_number(40000, 0) == Decimal("0")


def test_fi_index_is_zero_when_freedom_number_is_zero():
    assert fi_index(250000, 1000000) == pytest.approx(25.0)
    assert fi_index(250000, 0) == 0.0
    assert fi_index(-5000, 0) == 0.0


def test_net_worth_growth_uses_last_entries():
    assert net_worth_growth([]) == (0.0, 0.0)
    assert net_worth_growth([100]) == (0.0, 0.0)
    monthly, yearly = net_worth_growth([100, 110])
    assert monthly == pytest.approx(10.0)
    assert yearly == 0.0

    series = [100 + 10 * i for i in range(12)]  # 100 .. 210
    monthly, yearly = net_worth_growth(series)
    assert monthly == pytest.approx((210 - 200) / 200 * 100)
    assert yearly == pytest.approx(110.0)


@pytest.mark.parametrize("value,points", [
    (-1, 0), (0, 0), (9999, 10), (10000, 20), (49999, 20), (50000, 30), (99999, 30), (100000, 40),
])
def test_net_worth_score_bands(value, points):
    assert net_worth_score(value) == points


def test_health_score_components_and_status():
    result = health_score(150000, 25, 60)
    scores = {component["name"]: component["score"] for component in result["components"]}
    assert scores == {"Net Worth": 40, "Savings Rate": 25, "Financial Independence Progress": 12}
    assert result["score"] == pytest.approx(77)
    assert result["status"] == "Good"


def test_health_score_caps_and_floors():
    best = health_score(1000000, 90, 400)
    assert best["score"] == 100
    assert best["status"] == "Excellent"

    worst = health_score(-20000, -10, -5)
    assert worst["score"] == 0
    assert worst["status"] == "Needs Improvement"

    assert health_score(60000, 10, 0)["status"] == "Fair"
