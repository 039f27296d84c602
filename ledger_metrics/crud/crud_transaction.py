from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List, Dict, Any
from datetime import date, datetime
from decimal import Decimal

from ledger_metrics.db.core import (
    AccountDB,
    CategoryDB,
    TransactionDB,
    TransactionType,
    NotFoundError
)
from ledger_metrics.logging_config import get_logger
from ledger_metrics.metrics.categorize import match_category
from ledger_metrics.metrics.primitives import signed_amount, to_decimal
from ledger_metrics.metrics.recurring import detect_recurring
from ledger_metrics.models.transaction import TransactionCreate, TransactionUpdate, TransactionTypeEnum

logger = get_logger(__name__)


def _get_account(db: Session, account_id: int, user_id: int) -> AccountDB:
    account = db.query(AccountDB).filter(
        AccountDB.id == account_id,
        AccountDB.user_id == user_id
    ).first()
    if not account:
        raise NotFoundError(f"Account with id {account_id} not found")
    return account


def _check_category(db: Session, category_id: int, user_id: int) -> None:
    category = db.query(CategoryDB).filter(
        CategoryDB.id == category_id,
        CategoryDB.user_id == user_id
    ).first()
    if not category:
        raise NotFoundError(f"Category with id {category_id} not found")


def apply_balance_delta(account: AccountDB, delta: Decimal) -> None:
    """Adjust the cached balance; the caller commits together with the ledger change."""
    if delta == 0:
        return
    account.balance = to_decimal(account.balance) + delta
    account.balance_last_updated = datetime.utcnow()
    logger.debug(f"Account {account.id} balance adjusted by {delta} to {account.balance}")


def create_db_transaction(db: Session, user_id: int, transaction_data: TransactionCreate) -> TransactionDB:
    """Create a transaction and move its account balance in the same commit"""
    account = _get_account(db, transaction_data.account_id, user_id)
    if transaction_data.category_id:
        _check_category(db, transaction_data.category_id, user_id)

    db_transaction = TransactionDB(
        **transaction_data.model_dump(exclude={"transaction_type"}),
        transaction_type=TransactionType(transaction_data.transaction_type.value),
        user_id=user_id,
    )

    try:
        db.add(db_transaction)
        apply_balance_delta(account, signed_amount(db_transaction))
        db.commit()
        db.refresh(db_transaction)
        return db_transaction
    except IntegrityError:
        db.rollback()
        raise ValueError("Transaction creation failed due to database constraint")


def read_db_transaction(db: Session, transaction_id: int, user_id: int) -> Optional[TransactionDB]:
    return db.query(TransactionDB).filter(
        TransactionDB.id == transaction_id,
        TransactionDB.user_id == user_id
    ).first()


def read_db_transactions(
    db: Session,
    user_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    transaction_type: Optional[TransactionTypeEnum] = None,
    account_id: Optional[int] = None,
    category_id: Optional[int] = None,
    skip: int = 0,
    limit: Optional[int] = None,
) -> List[TransactionDB]:
    """Transactions for a user, newest first, with optional filters. No limit returns everything."""
    query = db.query(TransactionDB).filter(TransactionDB.user_id == user_id)

    if start_date:
        query = query.filter(TransactionDB.transaction_date >= start_date)
    if end_date:
        query = query.filter(TransactionDB.transaction_date <= end_date)
    if transaction_type:
        query = query.filter(TransactionDB.transaction_type == TransactionType(transaction_type.value))
    if account_id:
        query = query.filter(TransactionDB.account_id == account_id)
    if category_id:
        query = query.filter(TransactionDB.category_id == category_id)

    query = query.order_by(TransactionDB.transaction_date.desc(), TransactionDB.id.desc()).offset(skip)
    if limit is not None:
        query = query.limit(limit)
    return query.all()


def update_db_transaction(db: Session, transaction_id: int, user_id: int,
                          transaction_updates: TransactionUpdate) -> TransactionDB:
    """
    Update a transaction. The old signed amount is reversed on the old account
    and the new one applied to the (possibly different) new account before the
    single commit.
    """
    db_transaction = read_db_transaction(db, transaction_id, user_id)
    if not db_transaction:
        raise NotFoundError(f"Transaction with id {transaction_id} not found")

    update_data = transaction_updates.model_dump(exclude_unset=True)

    old_account = _get_account(db, db_transaction.account_id, user_id)
    new_account = old_account
    if update_data.get("account_id") is not None and update_data["account_id"] != db_transaction.account_id:
        new_account = _get_account(db, update_data["account_id"], user_id)
    if update_data.get("category_id"):
        _check_category(db, update_data["category_id"], user_id)

    old_signed = signed_amount(db_transaction)

    for field, value in update_data.items():
        if field == "transaction_type" and value:
            setattr(db_transaction, field, TransactionType(value.value))
        elif field in ("amount", "transaction_type", "transaction_date", "account_id") and value is None:
            # Required columns; an explicit null leaves them unchanged
            continue
        else:
            setattr(db_transaction, field, value)

    apply_balance_delta(old_account, -old_signed)
    apply_balance_delta(new_account, signed_amount(db_transaction))

    try:
        db.commit()
        db.refresh(db_transaction)
        return db_transaction
    except IntegrityError:
        db.rollback()
        raise ValueError("Transaction update failed due to database constraint")


def delete_db_transaction(db: Session, transaction_id: int, user_id: int) -> bool:
    """Delete a transaction and reverse its effect on the account balance"""
    db_transaction = read_db_transaction(db, transaction_id, user_id)
    if not db_transaction:
        raise NotFoundError(f"Transaction with id {transaction_id} not found")

    account = _get_account(db, db_transaction.account_id, user_id)
    apply_balance_delta(account, -signed_amount(db_transaction))
    db.delete(db_transaction)
    db.commit()
    return True


def get_recurring_transactions(db: Session, user_id: int) -> Dict[str, Any]:
    """Transactions already marked recurring plus detected candidates among the rest."""
    transactions = db.query(TransactionDB).filter(
        TransactionDB.user_id == user_id
    ).order_by(TransactionDB.transaction_date).all()

    marked = [t for t in transactions if t.is_recurring]
    potential = detect_recurring(transactions)
    logger.info(
        f"User {user_id}: {len(marked)} marked recurring, {len(potential)} potential recurring series"
    )
    return {"marked_recurring": marked, "potential_recurring": potential}


def mark_transactions_recurring(db: Session, user_id: int, transaction_ids: List[int],
                                recurrence_pattern: Optional[str] = None) -> List[TransactionDB]:
    """Flag a detected series as recurring so the detector stops proposing it."""
    transactions = db.query(TransactionDB).filter(
        TransactionDB.user_id == user_id,
        TransactionDB.id.in_(transaction_ids)
    ).all()
    if len(transactions) != len(set(transaction_ids)):
        raise NotFoundError("One or more transactions not found")

    for transaction in transactions:
        transaction.is_recurring = True
        transaction.recurrence_pattern = recurrence_pattern
    db.commit()
    return transactions


def categorize_transactions(db: Session, user_id: int, transaction_ids: List[int]) -> List[Dict[str, Any]]:
    """
    Assign a category to every uncategorised transaction in ``transaction_ids``
    by matching its description against category keywords. Transactions that
    already carry a category are left alone.
    """
    categories = db.query(CategoryDB).filter(CategoryDB.user_id == user_id).order_by(CategoryDB.id).all()
    transactions = db.query(TransactionDB).filter(
        TransactionDB.user_id == user_id,
        TransactionDB.id.in_(transaction_ids),
        TransactionDB.category_id.is_(None)
    ).order_by(TransactionDB.id).all()

    results = []
    for transaction in transactions:
        category = match_category(transaction.description, categories)
        if category is None:
            continue
        transaction.category_id = category.id
        results.append({
            "id": transaction.id,
            "description": transaction.description,
            "category": category.name,
        })
    db.commit()
    logger.info(f"Categorised {len(results)} of {len(transactions)} uncategorised transactions for user {user_id}")
    return results
