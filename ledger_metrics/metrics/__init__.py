"""
Financial metrics and projection engine.

Every function here is pure: it works on records that were already fetched
(ORM rows or any object exposing the same attributes) and never touches the
database or the clock.
"""
from .primitives import percentage, growth_rate, annualized_return, signed_amount, sum_where
from .periods import period_key
from .kpi import net_worth, savings_rate, freedom_number, fi_index, health_score
from .budgets import evaluate_budget_performance, recommend_budgets
from .assets import asset_performance, asset_allocation
from .liabilities import liability_summary, project_payoff
from .recurring import detect_recurring
from .goals import recommend_goals
from .summary import financial_summary
from .categorize import match_category
