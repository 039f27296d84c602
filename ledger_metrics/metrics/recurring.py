"""
Heuristic detection of recurring transactions.

Transactions sharing a signature (description, amount, type) are candidates
when they occur at least three times; a candidate is recurring only when
every gap between consecutive occurrences sits within two days of the mean
gap. Irregular recurring bills are missed on purpose.
"""
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Tuple

from ledger_metrics.metrics.primitives import kind_of, round_half_up, to_decimal


MIN_OCCURRENCES = 3
INTERVAL_TOLERANCE_DAYS = 2

# (low, high, label), inclusive bounds on the mean gap in days
RECURRENCE_PATTERNS = (
    (28, 31, "monthly"),
    (13, 15, "bi-weekly"),
    (6, 8, "weekly"),
    (89, 92, "quarterly"),
    (364, 366, "annually"),
)


def recurrence_signature(transaction: Any) -> Tuple[Any, Any, Any]:
    return (
        transaction.description,
        to_decimal(transaction.amount),
        kind_of(transaction.transaction_type),
    )


def recurrence_pattern(average_interval: float) -> str:
    for low, high, label in RECURRENCE_PATTERNS:
        if low <= average_interval <= high:
            return label
    return f"every {round_half_up(average_interval)} days"


def day_gaps(transactions: List[Any]) -> List[int]:
    return [
        (current.transaction_date - previous.transaction_date).days
        for previous, current in zip(transactions, transactions[1:])
    ]


def is_consistent(gaps: List[int], average_interval: float, tolerance: int = INTERVAL_TOLERANCE_DAYS) -> bool:
    return all(abs(gap - average_interval) <= tolerance for gap in gaps)


def detect_recurring(
    transactions: Iterable[Any],
    min_occurrences: int = MIN_OCCURRENCES,
) -> List[Dict[str, Any]]:
    """Find likely recurring series among transactions not already marked recurring."""
    groups: "OrderedDict[Tuple[Any, Any, Any], List[Any]]" = OrderedDict()
    ordered = sorted(
        (t for t in transactions if not t.is_recurring),
        key=lambda t: t.transaction_date,
    )
    for transaction in ordered:
        groups.setdefault(recurrence_signature(transaction), []).append(transaction)

    potential = []
    for (description, amount, transaction_type), group in groups.items():
        if len(group) < min_occurrences:
            continue

        gaps = day_gaps(group)
        average_interval = sum(gaps) / len(gaps)
        if not is_consistent(gaps, average_interval):
            continue

        potential.append({
            "description": description,
            "amount": amount,
            "transaction_type": transaction_type,
            "occurrences": len(group),
            "average_interval": round_half_up(average_interval),
            "pattern": recurrence_pattern(average_interval),
            "last_date": group[-1].transaction_date,
            "transaction_ids": [t.id for t in group],
        })

    return potential
