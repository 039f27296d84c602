"""
Whole-portfolio snapshot: balances grouped by account, asset and liability
type next to the recorded net worth and savings rate history.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List

from ledger_metrics.metrics.primitives import ZERO, kind_of, to_decimal


SUMMARY_HISTORY_POINTS = 12


def totals_by_type(records: Iterable[Any], type_field: str, value_field: str) -> List[Dict[str, Any]]:
    """Sum ``value_field`` per lowercase ``type_field``, in first-seen order."""
    totals: Dict[str, Decimal] = {}
    for record in records:
        record_type = kind_of(getattr(record, type_field))
        totals[record_type] = totals.get(record_type, ZERO) + to_decimal(getattr(record, value_field))
    return [{"type": record_type, "total": total} for record_type, total in totals.items()]


def history_points(rows: Iterable[Any]) -> List[Dict[str, Any]]:
    return [{"date": row.date, "value": to_decimal(row.value)} for row in rows]


def financial_summary(
    accounts: Iterable[Any],
    assets: Iterable[Any],
    liabilities: Iterable[Any],
    net_worth_rows: Iterable[Any],
    savings_rate_rows: Iterable[Any],
) -> Dict[str, Any]:
    return {
        "account_balances": totals_by_type(accounts, "account_type", "balance"),
        "asset_allocation": totals_by_type(assets, "asset_type", "value"),
        "liability_breakdown": totals_by_type(liabilities, "liability_type", "amount"),
        "net_worth_history": history_points(net_worth_rows),
        "savings_rate_history": history_points(savings_rate_rows),
    }
