from sqlalchemy.orm import Session
from typing import Optional, List, Dict, Any
from datetime import date

from ledger_metrics.db.core import AssetDB, AssetType, NotFoundError
from ledger_metrics.metrics.assets import asset_allocation, asset_performance
from ledger_metrics.models.asset import AssetCreate, AssetUpdate


def create_db_asset(db: Session, user_id: int, asset_data: AssetCreate) -> AssetDB:
    db_asset = AssetDB(
        **asset_data.model_dump(exclude={"asset_type"}),
        asset_type=AssetType(asset_data.asset_type.value),
        user_id=user_id,
    )
    db.add(db_asset)
    db.commit()
    db.refresh(db_asset)
    return db_asset


def read_db_asset(db: Session, asset_id: int, user_id: int) -> Optional[AssetDB]:
    return db.query(AssetDB).filter(AssetDB.id == asset_id, AssetDB.user_id == user_id).first()


def read_db_assets(db: Session, user_id: int) -> List[AssetDB]:
    return db.query(AssetDB).filter(AssetDB.user_id == user_id).order_by(AssetDB.id).all()


def update_db_asset(db: Session, asset_id: int, user_id: int, asset_updates: AssetUpdate) -> AssetDB:
    db_asset = read_db_asset(db, asset_id, user_id)
    if not db_asset:
        raise NotFoundError(f"Asset with id {asset_id} not found")

    for field, value in asset_updates.model_dump(exclude_unset=True).items():
        if field in ("name", "value") and value is None:
            continue
        setattr(db_asset, field, value)

    db.commit()
    db.refresh(db_asset)
    return db_asset


def delete_db_asset(db: Session, asset_id: int, user_id: int) -> bool:
    db_asset = read_db_asset(db, asset_id, user_id)
    if not db_asset:
        raise NotFoundError(f"Asset with id {asset_id} not found")

    db.delete(db_asset)
    db.commit()
    return True


def get_asset_performance(db: Session, user_id: int, as_of: Optional[date] = None) -> List[Dict[str, Any]]:
    return asset_performance(read_db_assets(db, user_id), as_of or date.today())


def get_asset_allocation(db: Session, user_id: int) -> Dict[str, Any]:
    return asset_allocation(read_db_assets(db, user_id))
