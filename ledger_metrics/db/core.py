from typing import Optional
from sqlalchemy import create_engine, ForeignKey, Index, UniqueConstraint, Boolean, String, Text, DECIMAL, DateTime, Date
from sqlalchemy.types import Enum
from sqlalchemy.orm import sessionmaker, DeclarativeBase, Mapped, relationship, mapped_column
from datetime import datetime, date
from decimal import Decimal
import datetime as dt
import enum

from ledger_metrics.config import DATABASE_URL, SQL_ECHO
from ledger_metrics.metrics.goals import goal_progress


class NotFoundError(Exception):
    pass


class Base(DeclarativeBase):
    pass


# ===== ENUMS =====
# str-valued so the response schemas accept members directly

class TransactionType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    TRANSFER = "TRANSFER"


class CategoryType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"
    BOTH = "BOTH"


class AccountType(str, enum.Enum):
    CHECKING = "CHECKING"
    SAVINGS = "SAVINGS"
    INVESTMENT = "INVESTMENT"
    CREDIT = "CREDIT"
    LOAN = "LOAN"
    MORTGAGE = "MORTGAGE"
    RETIREMENT = "RETIREMENT"
    OTHER = "OTHER"


class BudgetPeriod(str, enum.Enum):
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class AssetType(str, enum.Enum):
    STOCK = "STOCK"
    BOND = "BOND"
    CASH = "CASH"
    REAL_ESTATE = "REAL_ESTATE"
    CRYPTO = "CRYPTO"
    OTHER = "OTHER"


class LiabilityType(str, enum.Enum):
    MORTGAGE = "MORTGAGE"
    CAR_LOAN = "CAR_LOAN"
    STUDENT_LOAN = "STUDENT_LOAN"
    CREDIT_CARD = "CREDIT_CARD"
    PERSONAL_LOAN = "PERSONAL_LOAN"
    OTHER = "OTHER"


class PaymentFrequency(str, enum.Enum):
    WEEKLY = "WEEKLY"
    BI_WEEKLY = "BI-WEEKLY"
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    ANNUALLY = "ANNUALLY"


class GoalStatus(str, enum.Enum):
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    PAUSED = "PAUSED"


# ===== TABLES =====

class UserDB(Base):
    __tablename__ = "users"

    __table_args__ = (
        UniqueConstraint("email", name="uq_user_email"),
        UniqueConstraint("username", name="uq_user_username"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    username: Mapped[str] = mapped_column(String(100), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(100))
    last_name: Mapped[Optional[str]] = mapped_column(String(100))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    # Relationships
    accounts = relationship("AccountDB", back_populates="user")
    transactions = relationship("TransactionDB", back_populates="user")
    budgets = relationship("BudgetDB", back_populates="user")
    assets = relationship("AssetDB", back_populates="user")
    liabilities = relationship("LiabilityDB", back_populates="user")
    goals = relationship("GoalDB", back_populates="user")
    kpis = relationship("KPIDB", back_populates="user")


class CategoryDB(Base):
    __tablename__ = "categories"

    __table_args__ = (
        UniqueConstraint("user_id", "name", name="uq_user_category_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    category_type: Mapped[CategoryType] = mapped_column(Enum(CategoryType), default=CategoryType.EXPENSE)
    parent_category_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id"))

    # Relationship to self for subcategories
    parent = relationship("CategoryDB", remote_side=[id], back_populates="children")
    children = relationship("CategoryDB", back_populates="parent")

    transactions = relationship("TransactionDB", back_populates="category")
    budgets = relationship("BudgetDB", back_populates="category")


class AccountDB(Base):
    __tablename__ = "accounts"

    __table_args__ = (
        # Prevent duplicate account names per user
        UniqueConstraint("user_id", "account_name", name="uq_user_account_name"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    account_name: Mapped[str] = mapped_column(String(255), nullable=False)
    account_type: Mapped[AccountType] = mapped_column(Enum(AccountType))
    institution_name: Mapped[Optional[str]] = mapped_column(String(255))
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)

    # Balance = initial_balance + signed sum of the account's transactions
    initial_balance: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), default=Decimal("0.00"))
    balance: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), default=Decimal("0.00"))
    balance_last_updated: Mapped[Optional[datetime]] = mapped_column(DateTime)
    # Last refresh from an external institution connection
    last_sync: Mapped[Optional[datetime]] = mapped_column(DateTime)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("UserDB", back_populates="accounts")
    transactions = relationship("TransactionDB", back_populates="account")


class TransactionDB(Base):
    __tablename__ = "transactions"

    __table_args__ = (
        Index("idx_transactions_user_date", "user_id", "transaction_date"),
        Index("idx_transactions_user_account", "user_id", "account_id"),
        Index("idx_transactions_user_category", "user_id", "category_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    account_id: Mapped[int] = mapped_column(ForeignKey("accounts.id"))
    category_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id"))

    transaction_date: Mapped[date] = mapped_column(Date, nullable=False)
    # Always stored non-negative; the sign comes from transaction_type
    amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), nullable=False)
    transaction_type: Mapped[TransactionType] = mapped_column(Enum(TransactionType))
    description: Mapped[Optional[str]] = mapped_column(String(500))
    notes: Mapped[Optional[str]] = mapped_column(Text)

    is_recurring: Mapped[bool] = mapped_column(Boolean, default=False)
    recurrence_pattern: Mapped[Optional[str]] = mapped_column(String(50))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("UserDB", back_populates="transactions")
    account = relationship("AccountDB", back_populates="transactions")
    category = relationship("CategoryDB", back_populates="transactions")


class BudgetDB(Base):
    __tablename__ = "budgets"

    __table_args__ = (
        # One budget per category, period and start date
        UniqueConstraint("user_id", "category_id", "period", "start_date", name="uq_user_budget_category_period"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"))

    amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), nullable=False)
    period: Mapped[BudgetPeriod] = mapped_column(Enum(BudgetPeriod), default=BudgetPeriod.MONTHLY)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[Optional[date]] = mapped_column(Date)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user = relationship("UserDB", back_populates="budgets")
    category = relationship("CategoryDB", back_populates="budgets")


class AssetDB(Base):
    __tablename__ = "assets"

    __table_args__ = (
        Index("idx_assets_user_type", "user_id", "asset_type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    asset_type: Mapped[AssetType] = mapped_column(Enum(AssetType))
    value: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), nullable=False)

    # Performance inputs; assets without them are left out of performance reports
    acquisition_date: Mapped[Optional[date]] = mapped_column(Date)
    acquisition_price: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(15, 4))
    current_price: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(15, 4))
    quantity: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(18, 6))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserDB", back_populates="assets")


class LiabilityDB(Base):
    __tablename__ = "liabilities"

    __table_args__ = (
        Index("idx_liabilities_user_type", "user_id", "liability_type"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    liability_type: Mapped[LiabilityType] = mapped_column(Enum(LiabilityType))
    amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), nullable=False)
    interest_rate: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(7, 4))  # annual percent, e.g. 5.25
    payment_amount: Mapped[Optional[Decimal]] = mapped_column(DECIMAL(15, 2))
    payment_frequency: Mapped[Optional[PaymentFrequency]] = mapped_column(Enum(PaymentFrequency))

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserDB", back_populates="liabilities")


class GoalDB(Base):
    __tablename__ = "goals"

    __table_args__ = (
        Index("idx_goals_user_status", "user_id", "status"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    target_amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), nullable=False)
    current_amount: Mapped[Decimal] = mapped_column(DECIMAL(15, 2), default=Decimal("0.00"))
    currency: Mapped[str] = mapped_column(String(3), default="USD")
    deadline: Mapped[Optional[date]] = mapped_column(Date)
    # Free-form goal category, e.g. emergency_fund or home_purchase
    category: Mapped[Optional[str]] = mapped_column(String(50))
    priority: Mapped[int] = mapped_column(default=1)
    status: Mapped[GoalStatus] = mapped_column(Enum(GoalStatus), default=GoalStatus.ACTIVE)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    user = relationship("UserDB", back_populates="goals")

    @property
    def progress_percentage(self) -> float:
        return goal_progress(self.current_amount, self.target_amount)


class KPIDB(Base):
    """
    Append-only history of computed KPI values, one row per calculation
    (or per day for the types configured for daily upsert).
    """
    __tablename__ = "kpis"

    __table_args__ = (
        Index("idx_kpis_user_type_date", "user_id", "kpi_type", "date"),
    )

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"))

    kpi_type: Mapped[str] = mapped_column(String(50), nullable=False)
    value: Mapped[Decimal] = mapped_column(DECIMAL(20, 4), nullable=False)
    date: Mapped[dt.date] = mapped_column(Date, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    user = relationship("UserDB", back_populates="kpis")


engine = create_engine(DATABASE_URL, echo=SQL_ECHO)
session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)


# Dependency to get the database session
def get_db():
    database = session_local()
    try:
        yield database
    finally:
        database.close()
