from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from ledger_metrics.crud import crud_transaction
from ledger_metrics.db.core import get_db, NotFoundError
from ledger_metrics.models import transaction as transaction_models

router = APIRouter(
    prefix="/transactions",
    tags=["transactions"],
)

# This is a placeholder for a proper authentication dependency.
def get_current_user_id() -> int:
    return 1

@router.post("/", response_model=transaction_models.TransactionResponse, status_code=status.HTTP_201_CREATED)
def create_transaction(
    transaction: transaction_models.TransactionCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Create a transaction and update the account balance.
    """
    try:
        return crud_transaction.create_db_transaction(db=db, user_id=user_id, transaction_data=transaction)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.get("/", response_model=List[transaction_models.TransactionResponse])
def read_transactions(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    transaction_type: Optional[transaction_models.TransactionTypeEnum] = None,
    account_id: Optional[int] = None,
    category_id: Optional[int] = None,
    skip: int = 0,
    limit: int = 100,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    return crud_transaction.read_db_transactions(
        db=db, user_id=user_id, start_date=start_date, end_date=end_date,
        transaction_type=transaction_type, account_id=account_id, category_id=category_id,
        skip=skip, limit=limit
    )

@router.get("/recurring", response_model=transaction_models.RecurringTransactionsResponse)
def get_recurring_transactions(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Transactions marked recurring, plus series that look recurring but are not marked yet.
    """
    return crud_transaction.get_recurring_transactions(db=db, user_id=user_id)

@router.post("/recurring/mark", response_model=List[transaction_models.TransactionResponse])
def mark_recurring(
    request: transaction_models.MarkRecurringRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        return crud_transaction.mark_transactions_recurring(
            db=db, user_id=user_id, transaction_ids=request.transaction_ids,
            recurrence_pattern=request.recurrence_pattern
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.post("/categorize", response_model=List[transaction_models.CategorizedTransaction])
def categorize_transactions(
    request: transaction_models.CategorizeRequest,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Auto-categorise uncategorised transactions from their descriptions.
    """
    return crud_transaction.categorize_transactions(db=db, user_id=user_id, transaction_ids=request.transaction_ids)

@router.get("/{transaction_id}", response_model=transaction_models.TransactionResponse)
def read_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    db_transaction = crud_transaction.read_db_transaction(db=db, transaction_id=transaction_id, user_id=user_id)
    if db_transaction is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Transaction not found")
    return db_transaction

@router.put("/{transaction_id}", response_model=transaction_models.TransactionResponse)
def update_transaction(
    transaction_id: int,
    transaction: transaction_models.TransactionUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        return crud_transaction.update_db_transaction(
            db=db, transaction_id=transaction_id, user_id=user_id, transaction_updates=transaction
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        crud_transaction.delete_db_transaction(db=db, transaction_id=transaction_id, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
