"""
KPI Service

Computes each headline KPI from current ledger data, records it in the KPI
history and returns the value together with its recent history.
"""
from sqlalchemy.orm import Session
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Optional

from ledger_metrics import config
from ledger_metrics.crud import crud_asset, crud_kpi, crud_liability, crud_transaction
from ledger_metrics.db.core import KPIDB
from ledger_metrics.logging_config import get_logger
from ledger_metrics.metrics import kpi
from ledger_metrics.metrics.cashflow import income_and_expenses
from ledger_metrics.metrics.periods import month_bounds
from ledger_metrics.metrics.primitives import to_decimal

logger = get_logger(__name__)


def _history(db: Session, user_id: int, kpi_type: str) -> List[Dict[str, Any]]:
    return [
        {"date": row.date, "value": row.value}
        for row in crud_kpi.read_kpi_history(db, user_id, kpi_type)
    ]


def _latest_value(db: Session, user_id: int, kpi_type: str) -> Decimal:
    row: Optional[KPIDB] = crud_kpi.read_latest_kpi(db, user_id, kpi_type)
    return to_decimal(row.value) if row else Decimal("0")


def current_net_worth(db: Session, user_id: int) -> Decimal:
    return kpi.net_worth(
        crud_asset.read_db_assets(db, user_id),
        crud_liability.read_db_liabilities(db, user_id),
    )


def month_savings_rate(db: Session, user_id: int, today: date) -> float:
    start, end = month_bounds(today)
    income, expenses = income_and_expenses(
        crud_transaction.read_db_transactions(db, user_id, start_date=start, end_date=end)
    )
    return kpi.savings_rate(income, expenses)


def get_net_worth(db: Session, user_id: int, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    value = current_net_worth(db, user_id)
    crud_kpi.record_kpi(db, user_id, kpi.NET_WORTH, value, today)

    history = _history(db, user_id, kpi.NET_WORTH)
    monthly_growth, yearly_growth = kpi.net_worth_growth([point["value"] for point in history])
    logger.info(f"Net worth for user {user_id}: {value} ({monthly_growth:.2f}% vs previous)")

    return {
        "value": value,
        "monthly_growth": monthly_growth,
        "yearly_growth": yearly_growth,
        "change": monthly_growth,
        "historical_data": history,
    }


def get_savings_rate(db: Session, user_id: int, today: Optional[date] = None) -> Dict[str, Any]:
    today = today or date.today()
    rate = month_savings_rate(db, user_id, today)
    crud_kpi.record_kpi(db, user_id, kpi.SAVINGS_RATE, rate, today)

    history = _history(db, user_id, kpi.SAVINGS_RATE)
    return {
        "value": rate,
        "average_savings_rate": kpi.average([point["value"] for point in history]),
        "historical_data": history,
    }


def get_freedom_number(
    db: Session,
    user_id: int,
    annual_expenses: Optional[Decimal] = None,
    withdrawal_rate: Optional[Decimal] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Without ``annual_expenses`` the latest stored freedom number is reused and
    nothing is recorded.
    """
    withdrawal_rate = to_decimal(withdrawal_rate if withdrawal_rate is not None else config.DEFAULT_WITHDRAWAL_RATE)
    if annual_expenses is not None:
        value = kpi.freedom_number(annual_expenses, withdrawal_rate)
        crud_kpi.record_kpi(db, user_id, kpi.FREEDOM_NUMBER, value, today)
    else:
        value = _latest_value(db, user_id, kpi.FREEDOM_NUMBER)

    net_worth_value = _latest_value(db, user_id, kpi.NET_WORTH)
    return {
        "value": value,
        "current_net_worth": net_worth_value,
        "progress_percentage": kpi.fi_index(net_worth_value, value),
        "withdrawal_rate": withdrawal_rate,
    }


def get_fi_index(db: Session, user_id: int, today: Optional[date] = None) -> Dict[str, Any]:
    net_worth_value = _latest_value(db, user_id, kpi.NET_WORTH)
    freedom_number_value = _latest_value(db, user_id, kpi.FREEDOM_NUMBER)
    value = kpi.fi_index(net_worth_value, freedom_number_value)
    crud_kpi.record_kpi(db, user_id, kpi.FI_INDEX, value, today)

    return {
        "value": value,
        "net_worth": net_worth_value,
        "freedom_number": freedom_number_value,
        "historical_data": _history(db, user_id, kpi.FI_INDEX),
    }


def get_health_score(db: Session, user_id: int, today: Optional[date] = None) -> Dict[str, Any]:
    result = kpi.health_score(
        _latest_value(db, user_id, kpi.NET_WORTH),
        _latest_value(db, user_id, kpi.SAVINGS_RATE),
        _latest_value(db, user_id, kpi.FI_INDEX),
    )
    crud_kpi.record_kpi(db, user_id, kpi.HEALTH_SCORE, result["score"], today)

    return {
        "value": result["score"],
        "status": result["status"],
        "components": result["components"],
        "historical_data": _history(db, user_id, kpi.HEALTH_SCORE),
    }
