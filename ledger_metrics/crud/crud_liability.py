from sqlalchemy.orm import Session
from typing import Optional, List, Dict, Any

from ledger_metrics.db.core import LiabilityDB, LiabilityType, PaymentFrequency, NotFoundError
from ledger_metrics.metrics.liabilities import liability_summary
from ledger_metrics.models.liability import LiabilityCreate, LiabilityUpdate


def create_db_liability(db: Session, user_id: int, liability_data: LiabilityCreate) -> LiabilityDB:
    db_liability = LiabilityDB(
        **liability_data.model_dump(exclude={"liability_type", "payment_frequency"}),
        liability_type=LiabilityType(liability_data.liability_type.value),
        payment_frequency=(
            PaymentFrequency(liability_data.payment_frequency.value)
            if liability_data.payment_frequency else None
        ),
        user_id=user_id,
    )
    db.add(db_liability)
    db.commit()
    db.refresh(db_liability)
    return db_liability


def read_db_liability(db: Session, liability_id: int, user_id: int) -> Optional[LiabilityDB]:
    return db.query(LiabilityDB).filter(LiabilityDB.id == liability_id, LiabilityDB.user_id == user_id).first()


def read_db_liabilities(db: Session, user_id: int) -> List[LiabilityDB]:
    return db.query(LiabilityDB).filter(LiabilityDB.user_id == user_id).order_by(LiabilityDB.id).all()


def update_db_liability(db: Session, liability_id: int, user_id: int, liability_updates: LiabilityUpdate) -> LiabilityDB:
    db_liability = read_db_liability(db, liability_id, user_id)
    if not db_liability:
        raise NotFoundError(f"Liability with id {liability_id} not found")

    for field, value in liability_updates.model_dump(exclude_unset=True).items():
        if field == "payment_frequency" and value:
            setattr(db_liability, field, PaymentFrequency(value.value))
        elif field in ("name", "amount") and value is None:
            continue
        else:
            setattr(db_liability, field, value)

    db.commit()
    db.refresh(db_liability)
    return db_liability


def delete_db_liability(db: Session, liability_id: int, user_id: int) -> bool:
    db_liability = read_db_liability(db, liability_id, user_id)
    if not db_liability:
        raise NotFoundError(f"Liability with id {liability_id} not found")

    db.delete(db_liability)
    db.commit()
    return True


def get_liability_summary(db: Session, user_id: int) -> Dict[str, Any]:
    return liability_summary(read_db_liabilities(db, user_id))
