"""
Runtime settings, read once from the environment at import time.
"""
import os
from dotenv import load_dotenv
from decimal import Decimal

# Load environment variables from .env file
load_dotenv()


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///ledger_metrics.db")
SQL_ECHO = os.getenv("SQL_ECHO", "false").lower() == "true"

# Create missing tables on application startup (alembic is the source of truth in production)
CREATE_TABLES = os.getenv("CREATE_TABLES", "true").lower() == "true"

# KPI types written with find-or-update-today semantics; every other type appends a row per calculation
KPI_DAILY_UPSERT_TYPES = frozenset(
    kpi_type.strip()
    for kpi_type in os.getenv("KPI_DAILY_UPSERT_TYPES", "fi_index").split(",")
    if kpi_type.strip()
)

# Number of rows returned as historical_data by the KPI endpoints
KPI_HISTORY_LIMIT = int(os.getenv("KPI_HISTORY_LIMIT", "12"))

DEFAULT_WITHDRAWAL_RATE = Decimal(os.getenv("DEFAULT_WITHDRAWAL_RATE", "4"))
