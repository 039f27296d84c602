from contextlib import asynccontextmanager

from fastapi import FastAPI

from ledger_metrics import config
from ledger_metrics.db.core import Base, engine
from ledger_metrics.logging_config import setup_logging
from ledger_metrics.routers.accounts import router as accounts_router
from ledger_metrics.routers.assets import router as assets_router
from ledger_metrics.routers.budgets import router as budgets_router
from ledger_metrics.routers.categories import router as categories_router
from ledger_metrics.routers.dashboard import router as dashboard_router
from ledger_metrics.routers.goals import router as goals_router
from ledger_metrics.routers.kpis import router as kpis_router
from ledger_metrics.routers.liabilities import router as liabilities_router
from ledger_metrics.routers.transactions import router as transactions_router

logger = setup_logging()


@asynccontextmanager
async def lifespan(_: FastAPI):
    if config.CREATE_TABLES:
        Base.metadata.create_all(bind=engine)
        logger.info("Database tables ensured")
    yield


app = FastAPI(title="Ledger Metrics API", lifespan=lifespan)

app.include_router(accounts_router)
app.include_router(categories_router)
app.include_router(transactions_router)
app.include_router(budgets_router)
app.include_router(assets_router)
app.include_router(liabilities_router)
app.include_router(goals_router)
app.include_router(kpis_router)
app.include_router(dashboard_router)


@app.get("/")
def read_root():
    return "Server is running."
