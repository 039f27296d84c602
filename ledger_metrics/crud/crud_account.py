from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Optional, List, Dict, Any
from datetime import datetime

from ledger_metrics.db.core import AccountDB, AccountType, TransactionDB, NotFoundError
from ledger_metrics.logging_config import get_logger
from ledger_metrics.metrics.cashflow import account_balance, balance_history
from ledger_metrics.models.account import AccountCreate, AccountUpdate

logger = get_logger(__name__)


def create_db_account(db: Session, user_id: int, account_data: AccountCreate) -> AccountDB:
    db_account = AccountDB(
        user_id=user_id,
        account_name=account_data.account_name,
        account_type=AccountType(account_data.account_type.value),
        institution_name=account_data.institution_name,
        currency=account_data.currency.upper(),
        initial_balance=account_data.initial_balance,
        # A new account has no transactions yet
        balance=account_data.initial_balance,
        balance_last_updated=datetime.utcnow(),
    )
    try:
        db.add(db_account)
        db.commit()
        db.refresh(db_account)
        return db_account
    except IntegrityError:
        db.rollback()
        raise ValueError(f"Account with name '{account_data.account_name}' already exists")


def read_db_account(db: Session, account_id: int, user_id: int) -> Optional[AccountDB]:
    return db.query(AccountDB).filter(
        AccountDB.id == account_id,
        AccountDB.user_id == user_id
    ).first()


def read_db_accounts(db: Session, user_id: int, active_only: bool = False) -> List[AccountDB]:
    query = db.query(AccountDB).filter(AccountDB.user_id == user_id)
    if active_only:
        query = query.filter(AccountDB.is_active.is_(True))
    return query.order_by(AccountDB.account_name).all()


def update_db_account(db: Session, account_id: int, user_id: int, account_updates: AccountUpdate) -> AccountDB:
    db_account = read_db_account(db, account_id, user_id)
    if not db_account:
        raise NotFoundError(f"Account with id {account_id} not found")

    for field, value in account_updates.model_dump(exclude_unset=True).items():
        setattr(db_account, field, value)

    try:
        db.commit()
        db.refresh(db_account)
        return db_account
    except IntegrityError:
        db.rollback()
        raise ValueError("Account update failed due to database constraint")


def delete_db_account(db: Session, account_id: int, user_id: int) -> bool:
    db_account = read_db_account(db, account_id, user_id)
    if not db_account:
        raise NotFoundError(f"Account with id {account_id} not found")

    if db_account.transactions:
        raise ValueError("Cannot delete an account that still has transactions")

    db.delete(db_account)
    db.commit()
    return True


def _account_transactions(db: Session, account: AccountDB) -> List[TransactionDB]:
    return db.query(TransactionDB).filter(
        TransactionDB.account_id == account.id
    ).order_by(TransactionDB.transaction_date, TransactionDB.id).all()


def recompute_account_balance(db: Session, account_id: int, user_id: int) -> AccountDB:
    """
    Rebuild the cached balance from the ledger: initial balance plus the
    signed amount of every transaction on the account.
    """
    db_account = read_db_account(db, account_id, user_id)
    if not db_account:
        raise NotFoundError(f"Account with id {account_id} not found")

    recomputed = account_balance(db_account.initial_balance, _account_transactions(db, db_account))
    if recomputed != db_account.balance:
        logger.warning(
            f"Balance drift on account {account_id}: cached {db_account.balance}, ledger {recomputed}"
        )

    db_account.balance = recomputed
    db_account.balance_last_updated = datetime.utcnow()
    db.commit()
    db.refresh(db_account)
    return db_account


def get_account_balance_history(db: Session, account_id: int, user_id: int) -> Dict[str, Any]:
    db_account = read_db_account(db, account_id, user_id)
    if not db_account:
        raise NotFoundError(f"Account with id {account_id} not found")

    return {
        "account_id": db_account.id,
        "initial_balance": db_account.initial_balance,
        "balance": db_account.balance,
        "history": balance_history(db_account.initial_balance, _account_transactions(db, db_account)),
    }
