from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from ledger_metrics.db.core import get_db
from ledger_metrics.models import dashboard as dashboard_models
from ledger_metrics.services import dashboard_service

router = APIRouter(
    prefix="/dashboard",
    tags=["dashboard"],
)

# This is a placeholder for a proper authentication dependency.
def get_current_user_id() -> int:
    return 1

@router.get("/summary", response_model=dashboard_models.DashboardSummaryResponse)
def get_summary(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    try:
        return dashboard_service.get_dashboard_summary(db=db, user_id=user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/cash-flow", response_model=List[dashboard_models.CashFlowEntry])
def get_cash_flow(
    granularity: str = "monthly",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Income, expenses and net per weekly, monthly, quarterly or yearly period.
    """
    try:
        return dashboard_service.get_cash_flow(
            db=db, user_id=user_id, granularity=granularity, start_date=start_date, end_date=end_date
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/expenses", response_model=dashboard_models.ExpenseBreakdownResponse)
def get_expense_breakdown(
    period: str = "current_month",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Expenses grouped by category for current_month, previous_month, current_year or custom.
    """
    return dashboard_service.get_expense_breakdown(
        db=db, user_id=user_id, period=period, start_date=start_date, end_date=end_date
    )

@router.get("/financial-summary", response_model=dashboard_models.FinancialSummaryResponse)
def get_financial_summary(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Account balances, asset allocation and liabilities grouped by type, with
    the last twelve net worth and savings rate snapshots, oldest first.
    """
    return dashboard_service.get_financial_summary(db=db, user_id=user_id)
