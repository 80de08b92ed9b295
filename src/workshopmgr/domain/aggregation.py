"""Generic grouped-aggregation primitives.

Every report is some variation of "group records by a key, sum an amount,
sort, keep the top few"; these helpers are that pipeline, parameterized by
key and amount functions.
"""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Callable, Hashable, Iterable, Optional, Sequence, TypeVar

T = TypeVar("T")
K = TypeVar("K", bound=Hashable)

TOP_N = 5


@dataclass(frozen=True)
class GroupTotal:
    """Summed amount and record count for one group."""

    key: Any
    total: Decimal
    count: int
    label: Optional[str] = None


def group_by(items: Iterable[T], key: Callable[[T], K]) -> dict[K, list[T]]:
    """Partition items by key, keeping first-seen key order."""
    groups: dict[K, list[T]] = defaultdict(list)
    for item in items:
        groups[key(item)].append(item)
    return dict(groups)


def sum_amounts(items: Iterable[T], amount: Callable[[T], Decimal]) -> Decimal:
    """Sum of an amount over items; Decimal zero when empty."""
    return sum((amount(item) for item in items), Decimal("0"))


def group_totals(
    items: Iterable[T],
    key: Callable[[T], K],
    amount: Callable[[T], Decimal],
    label: Optional[Callable[[K], str]] = None,
) -> list[GroupTotal]:
    """Group, sum and count, sorted by total descending.

    Ties are broken by the group's label (or key) so results are stable.
    """
    totals = [
        GroupTotal(
            key=group_key,
            total=sum_amounts(group, amount),
            count=len(group),
            label=label(group_key) if label is not None else None,
        )
        for group_key, group in group_by(items, key).items()
    ]
    return sorted(
        totals,
        key=lambda row: (-row.total, str(row.label if row.label is not None else row.key)),
    )


def top_n(totals: Sequence[GroupTotal], n: int = TOP_N) -> list[GroupTotal]:
    """First ``n`` groups of an already sorted total list."""
    return list(totals[:n])
