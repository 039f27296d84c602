from sqlalchemy.orm import Session
from typing import Optional, List, Dict, Any
from decimal import Decimal

from ledger_metrics.db.core import GoalDB, GoalStatus, NotFoundError
from ledger_metrics.logging_config import get_logger
from ledger_metrics.metrics.goals import next_goal_status, recommend_goals
from ledger_metrics.models.goal import GoalCreate, GoalUpdate

logger = get_logger(__name__)


def _apply_completion(db_goal: GoalDB) -> None:
    status = GoalStatus(next_goal_status(db_goal.status, db_goal.current_amount, db_goal.target_amount).upper())
    if status != db_goal.status:
        logger.info(f"Goal '{db_goal.name}' status {db_goal.status.value} -> {status.value}")
    db_goal.status = status


def create_db_goal(db: Session, user_id: int, goal_data: GoalCreate) -> GoalDB:
    db_goal = GoalDB(
        **goal_data.model_dump(exclude={"status", "currency"}),
        currency=goal_data.currency.upper(),
        status=GoalStatus(goal_data.status.value),
        user_id=user_id,
    )
    _apply_completion(db_goal)
    db.add(db_goal)
    db.commit()
    db.refresh(db_goal)
    return db_goal


def read_db_goal(db: Session, goal_id: int, user_id: int) -> Optional[GoalDB]:
    return db.query(GoalDB).filter(GoalDB.id == goal_id, GoalDB.user_id == user_id).first()


def read_db_goals(db: Session, user_id: int) -> List[GoalDB]:
    return db.query(GoalDB).filter(GoalDB.user_id == user_id).order_by(GoalDB.priority, GoalDB.id).all()


def update_db_goal(db: Session, goal_id: int, user_id: int, goal_updates: GoalUpdate) -> GoalDB:
    db_goal = read_db_goal(db, goal_id, user_id)
    if not db_goal:
        raise NotFoundError(f"Goal with id {goal_id} not found")

    for field, value in goal_updates.model_dump(exclude_unset=True).items():
        if value is None and field in ("name", "target_amount", "current_amount", "currency", "priority", "status"):
            # Required columns; an explicit null leaves them unchanged
            continue
        if field == "status":
            value = GoalStatus(value.value)
        elif field == "currency":
            value = value.upper()
        setattr(db_goal, field, value)

    _apply_completion(db_goal)
    db.commit()
    db.refresh(db_goal)
    return db_goal


def update_goal_progress(db: Session, goal_id: int, user_id: int, current_amount: Decimal) -> GoalDB:
    """Set the saved amount; reaching the target completes the goal."""
    db_goal = read_db_goal(db, goal_id, user_id)
    if not db_goal:
        raise NotFoundError(f"Goal with id {goal_id} not found")

    db_goal.current_amount = current_amount
    _apply_completion(db_goal)

    db.commit()
    db.refresh(db_goal)
    return db_goal


def get_goal_recommendations(db: Session, user_id: int) -> Dict[str, Any]:
    """The user's active goals and common goals none of them covers yet."""
    active_goals = db.query(GoalDB).filter(
        GoalDB.user_id == user_id,
        GoalDB.status == GoalStatus.ACTIVE
    ).order_by(GoalDB.priority, GoalDB.id).all()
    return {"current_goals": active_goals, "recommendations": recommend_goals(active_goals)}


def delete_db_goal(db: Session, goal_id: int, user_id: int) -> bool:
    db_goal = read_db_goal(db, goal_id, user_id)
    if not db_goal:
        raise NotFoundError(f"Goal with id {goal_id} not found")

    db.delete(db_goal)
    db.commit()
    return True
