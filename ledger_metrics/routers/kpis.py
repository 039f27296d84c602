from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from decimal import Decimal

from ledger_metrics.crud import crud_kpi
from ledger_metrics.db.core import get_db
from ledger_metrics.models import kpi as kpi_models
from ledger_metrics.services import kpi_service

router = APIRouter(
    prefix="/kpis",
    tags=["kpis"],
)

# This is a placeholder for a proper authentication dependency.
def get_current_user_id() -> int:
    return 1

@router.get("/", response_model=List[kpi_models.KPIResponse])
def read_kpis(
    kpi_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    List stored KPI values, oldest first.
    """
    return crud_kpi.read_kpis(
        db=db, user_id=user_id, kpi_type=kpi_type,
        start_date=start_date, end_date=end_date, skip=skip, limit=limit
    )

@router.get("/net-worth", response_model=kpi_models.NetWorthResponse)
def get_net_worth(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Current net worth with monthly and yearly growth.
    """
    try:
        return kpi_service.get_net_worth(db=db, user_id=user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/savings-rate", response_model=kpi_models.SavingsRateResponse)
def get_savings_rate(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Savings rate of the current calendar month and its historical average.
    """
    try:
        return kpi_service.get_savings_rate(db=db, user_id=user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/freedom-number", response_model=kpi_models.FreedomNumberResponse)
def get_freedom_number(
    annual_expenses: Optional[Decimal] = Query(None, ge=0),
    withdrawal_rate: Optional[Decimal] = Query(None, gt=0, le=100),
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Portfolio needed to cover annual expenses at the withdrawal rate.
    Pass annual_expenses to recalculate; otherwise the latest value is returned.
    """
    try:
        return kpi_service.get_freedom_number(
            db=db, user_id=user_id, annual_expenses=annual_expenses, withdrawal_rate=withdrawal_rate
        )
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/fi-index", response_model=kpi_models.FIIndexResponse)
def get_fi_index(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Net worth as a percentage of the freedom number.
    """
    try:
        return kpi_service.get_fi_index(db=db, user_id=user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/health-score", response_model=kpi_models.HealthScoreResponse)
def get_health_score(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Composite 0-100 financial health score from the latest KPIs.
    """
    try:
        return kpi_service.get_health_score(db=db, user_id=user_id)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
