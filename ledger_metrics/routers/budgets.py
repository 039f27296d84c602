from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from ledger_metrics.crud import crud_budget
from ledger_metrics.db.core import get_db, NotFoundError
from ledger_metrics.models import budget as budget_models

router = APIRouter(
    prefix="/budgets",
    tags=["budgets"],
)

# This is a placeholder for a proper authentication dependency.
def get_current_user_id() -> int:
    return 1

@router.post("/", response_model=budget_models.BudgetResponse, status_code=status.HTTP_201_CREATED)
def create_budget(
    budget: budget_models.BudgetCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        return crud_budget.create_db_budget(db=db, user_id=user_id, budget_data=budget)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/", response_model=List[budget_models.BudgetResponse])
def read_budgets(
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    return crud_budget.read_db_budgets(db=db, user_id=user_id, skip=skip, limit=limit)

@router.get("/performance", response_model=budget_models.BudgetPerformanceResponse)
def get_budget_performance(
    period: str = "current",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Budget vs. actual for current, previous, year_to_date or a custom window.
    """
    return crud_budget.get_budget_performance(
        db=db, user_id=user_id, period=period, start_date=start_date, end_date=end_date
    )

@router.get("/recommendations", response_model=List[budget_models.BudgetRecommendation])
def get_budget_recommendations(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Suggested monthly budgets for unbudgeted categories, from the last three months of spending.
    """
    return crud_budget.get_budget_recommendations(db=db, user_id=user_id)

@router.get("/{budget_id}", response_model=budget_models.BudgetResponse)
def read_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    db_budget = crud_budget.read_db_budget(db=db, budget_id=budget_id, user_id=user_id)
    if db_budget is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Budget not found")
    return db_budget

@router.put("/{budget_id}", response_model=budget_models.BudgetResponse)
def update_budget(
    budget_id: int,
    budget_updates: budget_models.BudgetUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        return crud_budget.update_db_budget(db=db, budget_id=budget_id, user_id=user_id, budget_updates=budget_updates)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_budget(
    budget_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        crud_budget.delete_db_budget(db=db, budget_id=budget_id, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
