"""
Dashboard Service

Month-over-month summary, cash flow over time, the expense breakdown and the
whole-portfolio financial summary.
"""
from sqlalchemy.orm import Session, joinedload
from datetime import date
from typing import Any, Dict, List, Optional

from ledger_metrics.crud import crud_account, crud_asset, crud_kpi, crud_liability
from ledger_metrics.db.core import TransactionDB, TransactionType
from ledger_metrics.metrics import cashflow, kpi, summary
from ledger_metrics.metrics.periods import (
    GRANULARITIES,
    month_bounds,
    previous_month_bounds,
    resolve_expense_window,
    shift_months,
)
from ledger_metrics.services.kpi_service import current_net_worth


CASH_FLOW_MONTHS = 12


def _transactions(db: Session, user_id: int, start: date, end: date, expenses_only: bool = False) -> List[TransactionDB]:
    query = db.query(TransactionDB).filter(
        TransactionDB.user_id == user_id,
        TransactionDB.transaction_date >= start,
        TransactionDB.transaction_date <= end
    )
    if expenses_only:
        query = query.options(joinedload(TransactionDB.category)).filter(
            TransactionDB.transaction_type == TransactionType.EXPENSE
        )
    return query.order_by(TransactionDB.transaction_date).all()


def get_dashboard_summary(db: Session, user_id: int, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Current month against the previous one. Net worth is compared with the
    latest net worth recorded during the previous month.
    """
    today = today or date.today()
    current_start, current_end = month_bounds(today)
    previous_start, previous_end = previous_month_bounds(today)

    previous_net_worth = crud_kpi.read_latest_kpi(
        db, user_id, kpi.NET_WORTH, start_date=previous_start, end_date=previous_end
    )
    net_worth_value = current_net_worth(db, user_id)

    summary = cashflow.dashboard_summary(
        _transactions(db, user_id, current_start, current_end),
        _transactions(db, user_id, previous_start, previous_end),
        net_worth_value,
        previous_net_worth.value if previous_net_worth else None,
    )

    crud_kpi.record_kpi(db, user_id, kpi.NET_WORTH, net_worth_value, today)
    crud_kpi.record_kpi(db, user_id, kpi.SAVINGS_RATE, summary["savings_rate"]["value"], today)
    return summary


def get_cash_flow(
    db: Session,
    user_id: int,
    granularity: str = "monthly",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Income, expenses and net per period; defaults to the trailing twelve months."""
    if granularity not in GRANULARITIES:
        raise ValueError(f"Unsupported granularity '{granularity}'. Expected one of: {', '.join(GRANULARITIES)}")

    today = today or date.today()
    end = end_date or today
    start = start_date or shift_months(today, -(CASH_FLOW_MONTHS - 1)).replace(day=1)
    return cashflow.cash_flow(_transactions(db, user_id, start, end), granularity)


def get_expense_breakdown(
    db: Session,
    user_id: int,
    period: str = "current_month",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    start, end = resolve_expense_window(period, today or date.today(), start_date, end_date)
    return cashflow.expense_breakdown(_transactions(db, user_id, start, end, expenses_only=True))


def get_financial_summary(db: Session, user_id: int) -> Dict[str, Any]:
    """Totals by type for active accounts, assets and liabilities plus the last twelve recorded KPIs."""
    return summary.financial_summary(
        crud_account.read_db_accounts(db, user_id, active_only=True),
        crud_asset.read_db_assets(db, user_id),
        crud_liability.read_db_liabilities(db, user_id),
        crud_kpi.read_kpi_history(db, user_id, kpi.NET_WORTH, limit=summary.SUMMARY_HISTORY_POINTS),
        crud_kpi.read_kpi_history(db, user_id, kpi.SAVINGS_RATE, limit=summary.SUMMARY_HISTORY_POINTS),
    )
