"""create ledger, analytics and kpi history tables

Revision ID: 3f1c2a9b7d40
Revises: 
Create Date: 2026-10-19 09:12:44.518203

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c2a9b7d40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('username', sa.String(100), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('email', name='uq_user_email'),
        sa.UniqueConstraint('username', name='uq_user_username'),
    )
    op.create_table(
        'categories',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('category_type', sa.Enum('INCOME', 'EXPENSE', 'BOTH', name='categorytype'), nullable=True),
        sa.Column('parent_category_id', sa.Integer, sa.ForeignKey('categories.id'), nullable=True),
        sa.UniqueConstraint('user_id', 'name', name='uq_user_category_name'),
    )
    op.create_table(
        'accounts',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('account_name', sa.String(255), nullable=False),
        sa.Column('account_type', sa.Enum('CHECKING', 'SAVINGS', 'INVESTMENT', 'CREDIT', 'LOAN', 'MORTGAGE', 'RETIREMENT', 'OTHER', name='accounttype'), nullable=False),
        sa.Column('institution_name', sa.String(255), nullable=True),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('is_active', sa.Boolean, nullable=False),
        sa.Column('initial_balance', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('balance', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('balance_last_updated', sa.DateTime, nullable=True),
        sa.Column('last_sync', sa.DateTime, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('user_id', 'account_name', name='uq_user_account_name'),
    )
    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('account_id', sa.Integer, sa.ForeignKey('accounts.id'), nullable=False),
        sa.Column('category_id', sa.Integer, sa.ForeignKey('categories.id'), nullable=True),
        sa.Column('transaction_date', sa.Date, nullable=False),
        sa.Column('amount', sa.DECIMAL(15, 2), nullable=False),  # non-negative; sign from transaction_type
        sa.Column('transaction_type', sa.Enum('INCOME', 'EXPENSE', 'TRANSFER', name='transactiontype'), nullable=False),
        sa.Column('description', sa.String(500), nullable=True),
        sa.Column('notes', sa.Text, nullable=True),
        sa.Column('is_recurring', sa.Boolean, nullable=False),
        sa.Column('recurrence_pattern', sa.String(50), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_transactions_user_date', 'transactions', ['user_id', 'transaction_date'])
    op.create_index('idx_transactions_user_account', 'transactions', ['user_id', 'account_id'])
    op.create_index('idx_transactions_user_category', 'transactions', ['user_id', 'category_id'])
    op.create_table(
        'budgets',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('category_id', sa.Integer, sa.ForeignKey('categories.id'), nullable=False),
        sa.Column('amount', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('period', sa.Enum('MONTHLY', 'YEARLY', name='budgetperiod'), nullable=False),
        sa.Column('start_date', sa.Date, nullable=False),
        sa.Column('end_date', sa.Date, nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
        sa.UniqueConstraint('user_id', 'category_id', 'period', 'start_date', name='uq_user_budget_category_period'),
    )
    op.create_table(
        'assets',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('asset_type', sa.Enum('STOCK', 'BOND', 'CASH', 'REAL_ESTATE', 'CRYPTO', 'OTHER', name='assettype'), nullable=False),
        sa.Column('value', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('acquisition_date', sa.Date, nullable=True),
        sa.Column('acquisition_price', sa.DECIMAL(15, 4), nullable=True),
        sa.Column('current_price', sa.DECIMAL(15, 4), nullable=True),
        sa.Column('quantity', sa.DECIMAL(18, 6), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_assets_user_type', 'assets', ['user_id', 'asset_type'])
    op.create_table(
        'liabilities',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('liability_type', sa.Enum('MORTGAGE', 'CAR_LOAN', 'STUDENT_LOAN', 'CREDIT_CARD', 'PERSONAL_LOAN', 'OTHER', name='liabilitytype'), nullable=False),
        sa.Column('amount', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('interest_rate', sa.DECIMAL(7, 4), nullable=True),  # annual percent
        sa.Column('payment_amount', sa.DECIMAL(15, 2), nullable=True),
        sa.Column('payment_frequency', sa.Enum('WEEKLY', 'BI_WEEKLY', 'MONTHLY', 'QUARTERLY', 'ANNUALLY', name='paymentfrequency'), nullable=True),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_liabilities_user_type', 'liabilities', ['user_id', 'liability_type'])
    op.create_table(
        'goals',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('target_amount', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('current_amount', sa.DECIMAL(15, 2), nullable=False),
        sa.Column('currency', sa.String(3), nullable=False),
        sa.Column('deadline', sa.Date, nullable=True),
        sa.Column('category', sa.String(50), nullable=True),
        sa.Column('priority', sa.Integer, nullable=False),
        sa.Column('status', sa.Enum('ACTIVE', 'COMPLETED', 'CANCELLED', 'PAUSED', name='goalstatus'), nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
        sa.Column('updated_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_goals_user_status', 'goals', ['user_id', 'status'])
    op.create_table(
        'kpis',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.Integer, sa.ForeignKey('users.id'), nullable=False),
        sa.Column('kpi_type', sa.String(50), nullable=False),
        sa.Column('value', sa.DECIMAL(20, 4), nullable=False),
        sa.Column('date', sa.Date, nullable=False),
        sa.Column('created_at', sa.DateTime, nullable=True),
    )
    op.create_index('idx_kpis_user_type_date', 'kpis', ['user_id', 'kpi_type', 'date'])


def downgrade() -> None:
    op.drop_index('idx_kpis_user_type_date', table_name='kpis')
    op.drop_table('kpis')
    op.drop_index('idx_goals_user_status', table_name='goals')
    op.drop_table('goals')
    op.drop_index('idx_liabilities_user_type', table_name='liabilities')
    op.drop_table('liabilities')
    op.drop_index('idx_assets_user_type', table_name='assets')
    op.drop_table('assets')
    op.drop_table('budgets')
    op.drop_index('idx_transactions_user_category', table_name='transactions')
    op.drop_index('idx_transactions_user_account', table_name='transactions')
    op.drop_index('idx_transactions_user_date', table_name='transactions')
    op.drop_table('transactions')
    op.drop_table('accounts')
    op.drop_table('categories')
    op.drop_table('users')
