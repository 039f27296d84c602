from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from ledger_metrics.crud import crud_liability
from ledger_metrics.db.core import get_db, NotFoundError
from ledger_metrics.models import liability as liability_models

router = APIRouter(
    prefix="/liabilities",
    tags=["liabilities"],
)

# This is a placeholder for a proper authentication dependency.
def get_current_user_id() -> int:
    return 1

@router.post("/", response_model=liability_models.LiabilityResponse, status_code=status.HTTP_201_CREATED)
def create_liability(
    liability: liability_models.LiabilityCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    return crud_liability.create_db_liability(db=db, user_id=user_id, liability_data=liability)

@router.get("/", response_model=List[liability_models.LiabilityResponse])
def read_liabilities(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return crud_liability.read_db_liabilities(db=db, user_id=user_id)

@router.get("/summary", response_model=liability_models.LiabilitySummaryResponse)
def get_liability_summary(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Total debt, weighted interest rate, monthly payments and the payoff projection.
    """
    return crud_liability.get_liability_summary(db=db, user_id=user_id)

@router.get("/{liability_id}", response_model=liability_models.LiabilityResponse)
def read_liability(
    liability_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    db_liability = crud_liability.read_db_liability(db=db, liability_id=liability_id, user_id=user_id)
    if db_liability is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Liability not found")
    return db_liability

@router.put("/{liability_id}", response_model=liability_models.LiabilityResponse)
def update_liability(
    liability_id: int,
    liability: liability_models.LiabilityUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        return crud_liability.update_db_liability(
            db=db, liability_id=liability_id, user_id=user_id, liability_updates=liability
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.delete("/{liability_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_liability(
    liability_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        crud_liability.delete_db_liability(db=db, liability_id=liability_id, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
