from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from ledger_metrics.crud import crud_goal
from ledger_metrics.db.core import get_db, NotFoundError
from ledger_metrics.models import goal as goal_models

router = APIRouter(
    prefix="/goals",
    tags=["goals"],
)

# This is a placeholder for a proper authentication dependency.
def get_current_user_id() -> int:
    return 1

@router.post("/", response_model=goal_models.GoalResponse, status_code=status.HTTP_201_CREATED)
def create_goal(
    goal: goal_models.GoalCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    return crud_goal.create_db_goal(db=db, user_id=user_id, goal_data=goal)

@router.get("/", response_model=List[goal_models.GoalResponse])
def read_goals(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return crud_goal.read_db_goals(db=db, user_id=user_id)

@router.get("/recommendations", response_model=goal_models.GoalRecommendationsResponse)
def get_goal_recommendations(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Common savings goals not yet covered by an active goal, highest priority first.
    """
    return crud_goal.get_goal_recommendations(db=db, user_id=user_id)

@router.get("/{goal_id}", response_model=goal_models.GoalResponse)
def read_goal(
    goal_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    db_goal = crud_goal.read_db_goal(db=db, goal_id=goal_id, user_id=user_id)
    if db_goal is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found")
    return db_goal

@router.put("/{goal_id}", response_model=goal_models.GoalResponse)
def update_goal(
    goal_id: int,
    goal: goal_models.GoalUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        return crud_goal.update_db_goal(db=db, goal_id=goal_id, user_id=user_id, goal_updates=goal)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.put("/{goal_id}/progress", response_model=goal_models.GoalResponse)
def update_goal_progress(
    goal_id: int,
    progress: goal_models.GoalProgressUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    """
    Record the amount saved so far; the goal completes once it reaches the target.
    """
    try:
        return crud_goal.update_goal_progress(
            db=db, goal_id=goal_id, user_id=user_id, current_amount=progress.current_amount
        )
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_goal(
    goal_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        crud_goal.delete_db_goal(db=db, goal_id=goal_id, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
