from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from ledger_metrics.crud import crud_account
from ledger_metrics.db.core import get_db, NotFoundError
from ledger_metrics.models import account as account_models

router = APIRouter(
    prefix="/accounts",
    tags=["accounts"],
)

# This is a placeholder for a proper authentication dependency.
def get_current_user_id() -> int:
    return 1

@router.post("/", response_model=account_models.AccountResponse, status_code=status.HTTP_201_CREATED)
def create_account(
    account: account_models.AccountCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        return crud_account.create_db_account(db=db, user_id=user_id, account_data=account)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/", response_model=List[account_models.AccountResponse])
def read_accounts(
    active_only: bool = False,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    return crud_account.read_db_accounts(db=db, user_id=user_id, active_only=active_only)

@router.get("/{account_id}", response_model=account_models.AccountResponse)
def read_account(
    account_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    db_account = crud_account.read_db_account(db=db, account_id=account_id, user_id=user_id)
    if db_account is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Account not found")
    return db_account

@router.put("/{account_id}", response_model=account_models.AccountResponse)
def update_account(
    account_id: int,
    account: account_models.AccountUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        return crud_account.update_db_account(db=db, account_id=account_id, user_id=user_id, account_updates=account)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/{account_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_account(
    account_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        crud_account.delete_db_account(db=db, account_id=account_id, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/{account_id}/balance", response_model=account_models.AccountBalanceResponse)
def get_account_balance(
    account_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Current balance and the running balance after every transaction.
    """
    try:
        return crud_account.get_account_balance_history(db=db, account_id=account_id, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.post("/{account_id}/recompute-balance", response_model=account_models.AccountResponse)
def recompute_balance(
    account_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Rebuild the cached balance from the initial balance and the ledger.
    """
    try:
        return crud_account.recompute_account_balance(db=db, account_id=account_id, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
