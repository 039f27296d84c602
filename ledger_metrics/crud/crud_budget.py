from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError
from sqlalchemy import or_
from typing import Optional, List, Dict, Any
from datetime import date

from ledger_metrics.db.core import BudgetDB, BudgetPeriod, CategoryDB, TransactionDB, TransactionType, NotFoundError
from ledger_metrics.logging_config import get_logger
from ledger_metrics.metrics.budgets import (
    RECOMMENDATION_MONTHS,
    budgeted_categories,
    evaluate_budget_performance,
    recommend_budgets,
)
from ledger_metrics.metrics.periods import resolve_budget_window, shift_months
from ledger_metrics.models.budget import BudgetCreate, BudgetUpdate

logger = get_logger(__name__)


# ===== DATABASE OPERATIONS =====

def create_db_budget(db: Session, user_id: int, budget_data: BudgetCreate) -> BudgetDB:
    category = db.query(CategoryDB).filter(
        CategoryDB.id == budget_data.category_id,
        CategoryDB.user_id == user_id
    ).first()
    if not category:
        raise NotFoundError(f"Category with id {budget_data.category_id} not found")

    db_budget = BudgetDB(
        **budget_data.model_dump(exclude={"period"}),
        period=BudgetPeriod(budget_data.period.value),
        user_id=user_id,
    )
    try:
        db.add(db_budget)
        db.commit()
        db.refresh(db_budget)
        return db_budget
    except IntegrityError:
        db.rollback()
        raise ValueError(
            f"A {budget_data.period.value.lower()} budget for category {budget_data.category_id} "
            f"starting {budget_data.start_date} already exists"
        )


def read_db_budget(db: Session, budget_id: int, user_id: int) -> Optional[BudgetDB]:
    return db.query(BudgetDB).filter(
        BudgetDB.id == budget_id,
        BudgetDB.user_id == user_id
    ).first()


def read_db_budgets(db: Session, user_id: int, skip: int = 0, limit: int = 100) -> List[BudgetDB]:
    return db.query(BudgetDB).filter(
        BudgetDB.user_id == user_id
    ).order_by(BudgetDB.start_date.desc()).offset(skip).limit(limit).all()


def update_db_budget(db: Session, budget_id: int, user_id: int, budget_updates: BudgetUpdate) -> BudgetDB:
    db_budget = read_db_budget(db, budget_id, user_id)
    if not db_budget:
        raise NotFoundError(f"Budget with id {budget_id} not found")

    update_data = budget_updates.model_dump(exclude_unset=True)

    category_id = update_data.get("category_id")
    if category_id is not None:
        category = db.query(CategoryDB).filter(
            CategoryDB.id == category_id,
            CategoryDB.user_id == user_id
        ).first()
        if not category:
            raise NotFoundError(f"Category with id {category_id} not found")

    for field, value in update_data.items():
        if field == "period":
            if value is not None:
                db_budget.period = BudgetPeriod(value.value)
        elif value is None and field != "end_date":
            continue
        else:
            setattr(db_budget, field, value)

    if db_budget.end_date is not None and db_budget.end_date < db_budget.start_date:
        db.rollback()
        raise ValueError("end_date must not be before start_date")

    duplicate_message = (
        f"A {db_budget.period.value.lower()} budget for category {db_budget.category_id} "
        f"starting {db_budget.start_date} already exists"
    )
    try:
        db.commit()
        db.refresh(db_budget)
        return db_budget
    except IntegrityError:
        db.rollback()
        raise ValueError(duplicate_message)


def delete_db_budget(db: Session, budget_id: int, user_id: int) -> bool:
    db_budget = read_db_budget(db, budget_id, user_id)
    if not db_budget:
        raise NotFoundError(f"Budget with id {budget_id} not found")

    db.delete(db_budget)
    db.commit()
    return True


# ===== ANALYTICS =====

def get_budget_performance(
    db: Session,
    user_id: int,
    period: str = "current",
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Budget vs. actual spending for every budget active in the requested window."""
    window_start, window_end = resolve_budget_window(period, today or date.today(), start_date, end_date)

    budgets = db.query(BudgetDB).options(joinedload(BudgetDB.category)).filter(
        BudgetDB.user_id == user_id,
        BudgetDB.start_date <= window_end,
        or_(BudgetDB.end_date.is_(None), BudgetDB.end_date >= window_start)
    ).all()

    expenses = db.query(TransactionDB).filter(
        TransactionDB.user_id == user_id,
        TransactionDB.transaction_type == TransactionType.EXPENSE,
        TransactionDB.transaction_date >= window_start,
        TransactionDB.transaction_date <= window_end
    ).all()

    logger.debug(
        f"Budget performance for user {user_id} {window_start}..{window_end}: "
        f"{len(budgets)} budgets, {len(expenses)} expenses"
    )
    return evaluate_budget_performance(budgets, expenses, window_start, window_end, period)


def get_budget_recommendations(db: Session, user_id: int, today: Optional[date] = None) -> List[Dict[str, Any]]:
    """Suggested budgets for categories with recent spending and no budget."""
    today = today or date.today()
    window_start = shift_months(today, -RECOMMENDATION_MONTHS)

    expenses = db.query(TransactionDB).options(joinedload(TransactionDB.category)).filter(
        TransactionDB.user_id == user_id,
        TransactionDB.transaction_type == TransactionType.EXPENSE,
        TransactionDB.transaction_date >= window_start,
        TransactionDB.transaction_date <= today
    ).all()
    budgets = db.query(BudgetDB).filter(BudgetDB.user_id == user_id).all()

    return recommend_budgets(expenses, budgeted_categories(budgets))
