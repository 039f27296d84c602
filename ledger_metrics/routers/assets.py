from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List

from ledger_metrics.crud import crud_asset
from ledger_metrics.db.core import get_db, NotFoundError
from ledger_metrics.models import asset as asset_models

router = APIRouter(
    prefix="/assets",
    tags=["assets"],
)

# This is a placeholder for a proper authentication dependency.
def get_current_user_id() -> int:
    return 1

@router.post("/", response_model=asset_models.AssetResponse, status_code=status.HTTP_201_CREATED)
def create_asset(
    asset: asset_models.AssetCreate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    return crud_asset.create_db_asset(db=db, user_id=user_id, asset_data=asset)

@router.get("/", response_model=List[asset_models.AssetResponse])
def read_assets(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return crud_asset.read_db_assets(db=db, user_id=user_id)

@router.get("/performance", response_model=List[asset_models.AssetPerformance])
def get_asset_performance(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    """
    Absolute, percentage and annualized return of every priced asset.
    """
    return crud_asset.get_asset_performance(db=db, user_id=user_id)

@router.get("/allocation", response_model=asset_models.AssetAllocationResponse)
def get_asset_allocation(db: Session = Depends(get_db), user_id: int = Depends(get_current_user_id)):
    return crud_asset.get_asset_allocation(db=db, user_id=user_id)

@router.get("/{asset_id}", response_model=asset_models.AssetResponse)
def read_asset(
    asset_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    db_asset = crud_asset.read_db_asset(db=db, asset_id=asset_id, user_id=user_id)
    if db_asset is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Asset not found")
    return db_asset

@router.put("/{asset_id}", response_model=asset_models.AssetResponse)
def update_asset(
    asset_id: int,
    asset: asset_models.AssetUpdate,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        return crud_asset.update_db_asset(db=db, asset_id=asset_id, user_id=user_id, asset_updates=asset)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))

@router.delete("/{asset_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_asset(
    asset_id: int,
    db: Session = Depends(get_db),
    user_id: int = Depends(get_current_user_id)
):
    try:
        crud_asset.delete_db_asset(db=db, asset_id=asset_id, user_id=user_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
