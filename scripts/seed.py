import sys
import os
import random
from sqlalchemy.orm import Session
from datetime import date, timedelta
from decimal import Decimal
from faker import Faker

# Add the project root to the Python path
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from ledger_metrics.db.core import (
    Base,
    engine,
    session_local,
    UserDB,
    AccountDB,
    CategoryDB,
    TransactionDB,
    BudgetDB,
    AssetDB,
    LiabilityDB,
    GoalDB,
    KPIDB,
    AccountType,
    CategoryType,
    TransactionType,
    BudgetPeriod,
    AssetType,
    LiabilityType,
    PaymentFrequency,
    GoalStatus,
)
from ledger_metrics.metrics.cashflow import account_balance
from ledger_metrics.metrics.kpi import NET_WORTH
from ledger_metrics.metrics.periods import shift_months

fake = Faker()

USER_COUNT = 3
HISTORY_MONTHS = 12

EXPENSE_CATEGORIES = ["Housing", "Groceries", "Restaurants", "Transportation", "Utilities", "Entertainment", "Shopping"]


def money(low: float, high: float) -> Decimal:
    return Decimal(str(round(random.uniform(low, high), 2)))


def seed_user(db: Session, index: int, today: date):
    user = UserDB(
        email=fake.unique.email(),
        username=fake.unique.user_name(),
        first_name=fake.first_name(),
        last_name=fake.last_name(),
    )
    db.add(user)
    db.flush()

    # 1. Categories
    salary = CategoryDB(user_id=user.id, name="Salary", category_type=CategoryType.INCOME)
    db.add(salary)
    categories = {}
    for name in EXPENSE_CATEGORIES:
        category = CategoryDB(user_id=user.id, name=name, category_type=CategoryType.EXPENSE)
        db.add(category)
        categories[name] = category
    db.flush()

    # 2. Accounts
    checking = AccountDB(
        user_id=user.id, account_name=f"Main Checking {index}", account_type=AccountType.CHECKING,
        institution_name=fake.company(), initial_balance=money(1000, 5000),
    )
    savings = AccountDB(
        user_id=user.id, account_name=f"Emergency Fund {index}", account_type=AccountType.SAVINGS,
        institution_name=fake.company(), initial_balance=money(5000, 20000),
    )
    db.add_all([checking, savings])
    db.flush()

    # 3. Transactions: monthly paycheck and rent (recurring series) plus random spending
    transactions = []
    paycheck = money(4000, 7000)
    rent = money(1200, 2200)
    for months_back in range(HISTORY_MONTHS - 1, -1, -1):
        month_start = shift_months(today, -months_back).replace(day=1)
        transactions.append(TransactionDB(
            user_id=user.id, account_id=checking.id, category_id=salary.id,
            transaction_date=month_start, amount=paycheck,
            transaction_type=TransactionType.INCOME, description="Payroll Deposit",
        ))
        transactions.append(TransactionDB(
            user_id=user.id, account_id=checking.id, category_id=categories["Housing"].id,
            transaction_date=month_start + timedelta(days=2), amount=rent,
            transaction_type=TransactionType.EXPENSE, description="Rent Payment",
        ))
        for _ in range(random.randint(8, 20)):
            day = month_start + timedelta(days=random.randint(0, 27))
            if day > today:
                continue
            name = random.choice(EXPENSE_CATEGORIES[1:])
            transactions.append(TransactionDB(
                user_id=user.id, account_id=checking.id, category_id=categories[name].id,
                transaction_date=day, amount=money(5, 250),
                transaction_type=TransactionType.EXPENSE, description=fake.company(),
            ))
        transactions.append(TransactionDB(
            user_id=user.id, account_id=checking.id,
            transaction_date=month_start + timedelta(days=5), amount=money(200, 600),
            transaction_type=TransactionType.TRANSFER, description="Transfer to savings",
        ))
    transactions = [t for t in transactions if t.transaction_date <= today]
    db.add_all(transactions)

    checking.balance = account_balance(checking.initial_balance, transactions)
    savings.balance = savings.initial_balance

    # 4. Budgets for part of the spending categories
    month_start = today.replace(day=1)
    for name in random.sample(EXPENSE_CATEGORIES, k=4):
        db.add(BudgetDB(
            user_id=user.id, category_id=categories[name].id, amount=money(150, 800),
            period=BudgetPeriod.MONTHLY, start_date=shift_months(month_start, -6),
        ))
    db.add(BudgetDB(
        user_id=user.id, category_id=categories["Entertainment"].id, amount=money(1200, 3000),
        period=BudgetPeriod.YEARLY, start_date=date(today.year, 1, 1), end_date=date(today.year, 12, 31),
    ))

    # 5. Assets
    assets = [
        (AssetType.STOCK, "Index Fund", Decimal("120"), Decimal("100")),
        (AssetType.BOND, "Treasury ETF", Decimal("98"), Decimal("60")),
        (AssetType.CRYPTO, "Bitcoin", Decimal("30000"), Decimal("0.2")),
    ]
    for asset_type, name, acquisition_price, quantity in assets:
        current_price = acquisition_price * Decimal(str(round(random.uniform(0.8, 1.6), 2)))
        db.add(AssetDB(
            user_id=user.id, name=name, asset_type=asset_type,
            value=(current_price * quantity).quantize(Decimal("0.01")),
            acquisition_date=fake.date_between(start_date="-5y", end_date="-1y"),
            acquisition_price=acquisition_price, current_price=current_price, quantity=quantity,
        ))
    db.add(AssetDB(user_id=user.id, name="Cash Reserve", asset_type=AssetType.CASH, value=savings.balance))

    # 6. Liabilities
    db.add_all([
        LiabilityDB(
            user_id=user.id, name="Car Loan", liability_type=LiabilityType.CAR_LOAN,
            amount=money(8000, 20000), interest_rate=Decimal("6.5"),
            payment_amount=money(300, 450), payment_frequency=PaymentFrequency.MONTHLY,
        ),
        LiabilityDB(
            user_id=user.id, name="Student Loan", liability_type=LiabilityType.STUDENT_LOAN,
            amount=money(10000, 40000), interest_rate=Decimal("4.2"),
            payment_amount=money(120, 200), payment_frequency=PaymentFrequency.BI_WEEKLY,
        ),
    ])

    # 7. Goals
    db.add(GoalDB(
        user_id=user.id, name="Emergency Fund", target_amount=Decimal("25000"),
        current_amount=savings.balance, status=GoalStatus.ACTIVE,
        deadline=date(today.year + 1, 12, 31), category="emergency_fund", priority=1,
    ))

    # 8. Monthly net worth history
    net_worth = money(20000, 60000)
    for months_back in range(HISTORY_MONTHS, 0, -1):
        db.add(KPIDB(
            user_id=user.id, kpi_type=NET_WORTH, value=net_worth,
            date=shift_months(today, -months_back),
        ))
        net_worth += money(-500, 2000)

    db.commit()


def seed_database(user_count: int = USER_COUNT):
    """
    Fills the database with sample ledger data for several users.
    """
    Base.metadata.create_all(bind=engine)
    db: Session = session_local()

    try:
        # Check if data exists to prevent duplicate seeding
        if db.query(UserDB).count() > 0:
            print("Database appears to be already seeded. Exiting.")
            return

        today = date.today()
        for i in range(user_count):
            print(f"--- Seeding user {i + 1}/{user_count} ---")
            seed_user(db, i, today)

        print("Successfully seeded database.")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    seed_database()
