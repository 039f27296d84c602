from datetime import date, timedelta
from decimal import Decimal

import pytest

from ledger_metrics import config
from ledger_metrics.crud import crud_kpi
from ledger_metrics.db.core import (
    AssetDB,
    AssetType,
    KPIDB,
    LiabilityDB,
    LiabilityType,
    TransactionDB,
    TransactionType,
)
from ledger_metrics.metrics.kpi import FI_INDEX, FREEDOM_NUMBER, HEALTH_SCORE, NET_WORTH, SAVINGS_RATE
from ledger_metrics.services import kpi_service

TODAY = date(2024, 6, 15)


def _rows(db, kpi_type):
    return db.query(KPIDB).filter(KPIDB.kpi_type == kpi_type).all()


def test_fi_index_is_upserted_per_day(db):
    crud_kpi.record_kpi(db, 1, FI_INDEX, 10, TODAY)
    crud_kpi.record_kpi(db, 1, FI_INDEX, 12.5, TODAY)

    rows = _rows(db, FI_INDEX)
    assert len(rows) == 1
    assert rows[0].value == Decimal("12.5")

    crud_kpi.record_kpi(db, 1, FI_INDEX, 13, TODAY + timedelta(days=1))
    assert len(_rows(db, FI_INDEX)) == 2


def test_other_types_append_a_row_per_calculation(db):
    crud_kpi.record_kpi(db, 1, NET_WORTH, 1000, TODAY)
    crud_kpi.record_kpi(db, 1, NET_WORTH, 1100, TODAY)
    assert len(_rows(db, NET_WORTH)) == 2


def test_upsert_policy_is_configurable(db, monkeypatch):
    monkeypatch.setattr(config, "KPI_DAILY_UPSERT_TYPES", frozenset({NET_WORTH}))
    crud_kpi.record_kpi(db, 1, NET_WORTH, 1000, TODAY)
    crud_kpi.record_kpi(db, 1, NET_WORTH, 1100, TODAY)
    crud_kpi.record_kpi(db, 1, FI_INDEX, 5, TODAY)
    crud_kpi.record_kpi(db, 1, FI_INDEX, 6, TODAY)

    assert len(_rows(db, NET_WORTH)) == 1
    assert len(_rows(db, FI_INDEX)) == 2


def test_unknown_kpi_type_is_rejected(db):
    with pytest.raises(ValueError):
        crud_kpi.record_kpi(db, 1, "happiness", 100, TODAY)


def test_latest_kpi_breaks_same_day_ties_by_insertion(db):
    crud_kpi.record_kpi(db, 1, NET_WORTH, 500, TODAY - timedelta(days=3))
    crud_kpi.record_kpi(db, 1, NET_WORTH, 700, TODAY)
    crud_kpi.record_kpi(db, 1, NET_WORTH, 650, TODAY)

    assert crud_kpi.read_latest_kpi(db, 1, NET_WORTH).value == Decimal("650")
    windowed = crud_kpi.read_latest_kpi(db, 1, NET_WORTH, end_date=TODAY - timedelta(days=1))
    assert windowed.value == Decimal("500")
    assert crud_kpi.read_latest_kpi(db, 1, SAVINGS_RATE) is None


def test_history_returns_last_twelve_oldest_first(db):
    for i in range(15):
        crud_kpi.record_kpi(db, 1, NET_WORTH, 1000 + i, TODAY - timedelta(days=30 * (14 - i)))

    history = crud_kpi.read_kpi_history(db, 1, NET_WORTH)

    assert len(history) == 12
    assert [row.value for row in history] == [Decimal(1003 + i) for i in range(12)]
    assert history[0].date < history[-1].date


def test_net_worth_service_records_and_reports_growth(db):
    db.add_all([
        AssetDB(user_id=1, name="Index fund", asset_type=AssetType.STOCK, value=Decimal("60000")),
        AssetDB(user_id=1, name="Savings", asset_type=AssetType.CASH, value=Decimal("50000")),
        LiabilityDB(user_id=1, name="Car", liability_type=LiabilityType.CAR_LOAN, amount=Decimal("10000")),
    ])
    db.commit()
    crud_kpi.record_kpi(db, 1, NET_WORTH, 80000, TODAY - timedelta(days=31))

    result = kpi_service.get_net_worth(db, 1, today=TODAY)

    assert result["value"] == Decimal("100000")
    assert result["monthly_growth"] == pytest.approx(25.0)
    assert result["change"] == result["monthly_growth"]
    assert result["yearly_growth"] == 0.0
    assert [point["value"] for point in result["historical_data"]] == [Decimal("80000"), Decimal("100000")]


def test_savings_rate_service_uses_current_month(db, checking):
    db.add_all([
        TransactionDB(user_id=1, account_id=checking.id, transaction_date=date(2024, 6, 1),
                      amount=Decimal("4000"), transaction_type=TransactionType.INCOME),
        TransactionDB(user_id=1, account_id=checking.id, transaction_date=date(2024, 6, 10),
                      amount=Decimal("3000"), transaction_type=TransactionType.EXPENSE),
        TransactionDB(user_id=1, account_id=checking.id, transaction_date=date(2024, 5, 10),
                      amount=Decimal("3000"), transaction_type=TransactionType.EXPENSE),
    ])
    db.commit()
    crud_kpi.record_kpi(db, 1, SAVINGS_RATE, 15, date(2024, 5, 31))

    result = kpi_service.get_savings_rate(db, 1, today=TODAY)

    assert result["value"] == pytest.approx(25.0)
    assert result["average_savings_rate"] == pytest.approx(20.0)
    assert len(result["historical_data"]) == 2


def test_freedom_number_recorded_only_with_expenses(db):
    crud_kpi.record_kpi(db, 1, NET_WORTH, 250000, TODAY)

    result = kpi_service.get_freedom_number(db, 1, annual_expenses=Decimal("40000"), today=TODAY)
    assert result["value"] == Decimal("1000000")
    assert result["current_net_worth"] == Decimal("250000")
    assert result["progress_percentage"] == pytest.approx(25.0)
    assert result["withdrawal_rate"] == Decimal("4")

    reused = kpi_service.get_freedom_number(db, 1, withdrawal_rate=Decimal("5"), today=TODAY)
    assert reused["value"] == Decimal("1000000")
    assert len(_rows(db, FREEDOM_NUMBER)) == 1


def test_fi_index_service_without_freedom_number_is_zero(db):
    crud_kpi.record_kpi(db, 1, NET_WORTH, -5000, TODAY)

    result = kpi_service.get_fi_index(db, 1, today=TODAY)

    assert result["value"] == 0.0
    assert result["freedom_number"] == Decimal("0")
    assert len(result["historical_data"]) == 1


def test_health_score_service_reads_latest_kpis(db):
    crud_kpi.record_kpi(db, 1, NET_WORTH, 150000, TODAY)
    crud_kpi.record_kpi(db, 1, SAVINGS_RATE, 25, TODAY)
    crud_kpi.record_kpi(db, 1, FI_INDEX, 60, TODAY)

    result = kpi_service.get_health_score(db, 1, today=TODAY)

    assert result["value"] == pytest.approx(77)
    assert result["status"] == "Good"
    assert [c["max_score"] for c in result["components"]] == [40, 40, 20]
    assert result["historical_data"][-1]["value"] == Decimal("77")
    assert len(_rows(db, HEALTH_SCORE)) == 1


def test_values_beyond_column_precision_are_rejected(db):
    with pytest.raises(ValueError):
        crud_kpi.record_kpi(db, 1, SAVINGS_RATE, Decimal("1E+20"), TODAY)
    with pytest.raises(ValueError):
        crud_kpi.record_kpi(db, 1, SAVINGS_RATE, float("inf"), TODAY)
    assert _rows(db, SAVINGS_RATE) == []


def test_tiny_withdrawal_rate_freedom_number_is_rejected(db):
    with pytest.raises(ValueError):
        kpi_service.get_freedom_number(
            db, 1, annual_expenses=Decimal("40000"), withdrawal_rate=Decimal("1E-15"), today=TODAY
        )
    assert _rows(db, FREEDOM_NUMBER) == []


def test_current_net_worth_is_stable_without_ledger_changes(db):
    db.add(AssetDB(user_id=1, name="House", asset_type=AssetType.REAL_ESTATE, value=Decimal("350000")))
    db.add(LiabilityDB(user_id=1, name="Mortgage", liability_type=LiabilityType.MORTGAGE, amount=Decimal("200000")))
    db.commit()

    assert kpi_service.current_net_worth(db, 1) == kpi_service.current_net_worth(db, 1) == Decimal("150000")
