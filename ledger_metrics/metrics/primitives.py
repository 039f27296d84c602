"""
Metric primitives shared by every calculator.

Amounts are stored non-negative on every ledger record; the sign of a
transaction is derived from its type here and nowhere else.
"""
import enum
import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Iterable, Optional


ZERO = Decimal("0.00")
CENT = Decimal("0.01")

# Ceiling for annualized returns, in percent (a 10,000x gain per year)
MAX_ANNUALIZED_RETURN = 1_000_000.0
MAX_YEARLY_LOG_GROWTH = math.log1p(MAX_ANNUALIZED_RETURN / 100)

INCOME = "income"
EXPENSE = "expense"
TRANSFER = "transfer"


def to_decimal(value: Any) -> Decimal:
    """Coerce a numeric value (Decimal, int, float, str, None) into a Decimal."""
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_money(value: Any) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def round_half_up(value: float) -> int:
    """Round .5 away from zero for positives, the way dashboards display intervals."""
    return int(math.floor(value + 0.5))


def kind_of(value: Any) -> Optional[str]:
    """Normalise an enum member or plain string to its lowercase value."""
    if value is None:
        return None
    if isinstance(value, enum.Enum):
        value = value.value
    return str(value).lower()


def is_income(transaction: Any) -> bool:
    return kind_of(transaction.transaction_type) == INCOME


def is_expense(transaction: Any) -> bool:
    return kind_of(transaction.transaction_type) == EXPENSE


def signed_amount(transaction: Any) -> Decimal:
    """Income adds, expense subtracts, transfers leave the balance untouched."""
    amount = to_decimal(transaction.amount)
    kind = kind_of(transaction.transaction_type)
    if kind == INCOME:
        return amount
    if kind == EXPENSE:
        return -amount
    return ZERO


def sum_where(
    records: Iterable[Any],
    predicate: Optional[Callable[[Any], bool]] = None,
    field: str = "amount",
) -> Decimal:
    """Sum ``field`` over the records matching ``predicate``. The caller supplies the sign."""
    total = ZERO
    for record in records:
        if predicate is None or predicate(record):
            total += to_decimal(getattr(record, field))
    return total


def percentage(part: Any, whole: Any) -> float:
    """``part / whole * 100``; a non-positive denominator yields 0 instead of an error."""
    whole = to_decimal(whole)
    if whole <= 0:
        return 0.0
    return float(to_decimal(part) / whole * 100)


def growth_rate(current: Any, previous: Any) -> float:
    previous = to_decimal(previous)
    return percentage(to_decimal(current) - previous, previous)


def annualized_return(current_value: Any, acquisition_value: Any, holding_years: float) -> float:
    """
    Compound yearly return in percent. Worked out in log space so that very
    short holding periods cannot overflow; results are capped at
    ``MAX_ANNUALIZED_RETURN``.
    """
    acquisition_value = to_decimal(acquisition_value)
    if holding_years <= 0 or acquisition_value <= 0:
        return 0.0
    growth = float(to_decimal(current_value) / acquisition_value)
    if growth <= 0:
        # total loss; negative ratios have no real root
        return -100.0
    yearly_log_growth = math.log(growth) / holding_years
    if yearly_log_growth >= MAX_YEARLY_LOG_GROWTH:
        return MAX_ANNUALIZED_RETURN
    return math.expm1(yearly_log_growth) * 100
