"""
KPI history storage.

Rows are append-only. Types listed in KPI_DAILY_UPSERT_TYPES are written
with find-or-update-today semantics; every other type gets a new row per
calculation. The find-then-write is not locked, so two same-day requests
for an upsert type can still both insert.
"""
from sqlalchemy.orm import Session
from typing import Any, Optional, List
from datetime import date
from decimal import Decimal

from ledger_metrics import config
from ledger_metrics.db.core import KPIDB
from ledger_metrics.logging_config import get_logger
from ledger_metrics.metrics.kpi import KPI_TYPES
from ledger_metrics.metrics.primitives import to_decimal

logger = get_logger(__name__)

KPI_VALUE_PLACES = Decimal("0.0001")
# kpis.value is DECIMAL(20, 4): at most 16 integer digits
KPI_VALUE_LIMIT = Decimal(10) ** 16


def uses_daily_upsert(kpi_type: str) -> bool:
    return kpi_type in config.KPI_DAILY_UPSERT_TYPES


def record_kpi(
    db: Session,
    user_id: int,
    kpi_type: str,
    value: Any,
    today: Optional[date] = None,
    upsert: Optional[bool] = None,
) -> KPIDB:
    """Store a computed KPI value under the write policy of its type."""
    if kpi_type not in KPI_TYPES:
        raise ValueError(f"Unknown KPI type '{kpi_type}'")

    today = today or date.today()
    value = to_decimal(value)
    if not value.is_finite() or abs(value) >= KPI_VALUE_LIMIT:
        raise ValueError(f"{kpi_type} value {value} is outside the storable range")
    value = value.quantize(KPI_VALUE_PLACES)
    if upsert is None:
        upsert = uses_daily_upsert(kpi_type)

    db_kpi = None
    if upsert:
        db_kpi = db.query(KPIDB).filter(
            KPIDB.user_id == user_id,
            KPIDB.kpi_type == kpi_type,
            KPIDB.date == today
        ).order_by(KPIDB.id.desc()).first()

    if db_kpi:
        db_kpi.value = value
        logger.debug(f"Updated {kpi_type} for user {user_id} on {today}: {value}")
    else:
        db_kpi = KPIDB(user_id=user_id, kpi_type=kpi_type, value=value, date=today)
        db.add(db_kpi)
        logger.debug(f"Recorded {kpi_type} for user {user_id} on {today}: {value}")

    db.commit()
    db.refresh(db_kpi)
    return db_kpi


def read_latest_kpi(
    db: Session,
    user_id: int,
    kpi_type: str,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> Optional[KPIDB]:
    """Most recent row of a type, optionally inside a date window. Same-day ties go to the newest row."""
    query = db.query(KPIDB).filter(KPIDB.user_id == user_id, KPIDB.kpi_type == kpi_type)
    if start_date:
        query = query.filter(KPIDB.date >= start_date)
    if end_date:
        query = query.filter(KPIDB.date <= end_date)
    return query.order_by(KPIDB.date.desc(), KPIDB.id.desc()).first()


def read_kpi_history(db: Session, user_id: int, kpi_type: str, limit: Optional[int] = None) -> List[KPIDB]:
    """The last ``limit`` rows of a type, oldest first."""
    limit = limit or config.KPI_HISTORY_LIMIT
    rows = db.query(KPIDB).filter(
        KPIDB.user_id == user_id,
        KPIDB.kpi_type == kpi_type
    ).order_by(KPIDB.date.desc(), KPIDB.id.desc()).limit(limit).all()
    return list(reversed(rows))


def read_kpis(
    db: Session,
    user_id: int,
    kpi_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[KPIDB]:
    query = db.query(KPIDB).filter(KPIDB.user_id == user_id)
    if kpi_type:
        query = query.filter(KPIDB.kpi_type == kpi_type)
    if start_date:
        query = query.filter(KPIDB.date >= start_date)
    if end_date:
        query = query.filter(KPIDB.date <= end_date)
    return query.order_by(KPIDB.date, KPIDB.id).offset(skip).limit(limit).all()
