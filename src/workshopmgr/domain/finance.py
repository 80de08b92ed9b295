"""Financial aggregation over payments, costs, quotes and registrations.

All functions are pure reductions of the arrays passed in; nothing is
cached and inputs are never modified.
"""

from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence, TypeVar

from dateutil.relativedelta import relativedelta

from workshopmgr.domain.aggregation import GroupTotal, group_by, group_totals, sum_amounts
from workshopmgr.domain.entities import (
    Location,
    OperationalCost,
    Payment,
    PaymentMethod,
    Quote,
    QuoteStatus,
    Registration,
    Supplier,
    Workshop,
)

T = TypeVar("T")

CENT = Decimal("0.01")

# Virtual stamp duty ("imposta di bollo") added to quotes above the threshold
STAMP_DUTY_THRESHOLD = Decimal("77.00")
STAMP_DUTY_AMOUNT = Decimal("2.00")

NO_WORKSHOP_LABEL = "Other income"


class Period(str, Enum):
    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


@dataclass(frozen=True)
class MethodTotals:
    """Amounts per payment method plus their grand total."""

    by_method: dict[PaymentMethod, Decimal]
    grand_total: Decimal


@dataclass(frozen=True)
class QuoteTotals:
    base: Decimal
    stamp_duty: Decimal
    total: Decimal

    @property
    def has_stamp_duty(self) -> bool:
        return self.stamp_duty > 0


@dataclass(frozen=True)
class WorkshopPerformance:
    """Revenue and cost of one workshop, per participant."""

    workshop_id: str
    name: str
    participants: int
    revenue: Decimal
    cost: Decimal
    profit: Decimal
    revenue_per_participant: Decimal
    profit_per_participant: Decimal


@dataclass(frozen=True)
class Statistics:
    minimum: Decimal
    average: Decimal
    maximum: Decimal


def to_cents(value: Decimal) -> Decimal:
    """Round to two decimals, half up."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def totals_by_method(
    records: Iterable[T],
    method: Callable[[T], PaymentMethod] = lambda record: record.method,
    amount: Callable[[T], Decimal] = lambda record: record.amount,
) -> MethodTotals:
    """Sum payments (or costs) per method.

    Every method gets a bucket, zero when unused; the grand total is the sum
    of the buckets.
    """
    grouped = group_by(records, method)
    by_method = {
        payment_method: sum_amounts(grouped.get(payment_method, []), amount)
        for payment_method in PaymentMethod
    }
    return MethodTotals(by_method=by_method, grand_total=sum(by_method.values(), Decimal("0")))


def period_range(period: Period, today: Optional[date] = None) -> tuple[date, date]:
    """First and last day of the calendar period containing ``today``."""
    today = today or date.today()
    if period == Period.MONTH:
        start = today.replace(day=1)
        return start, start + relativedelta(months=1, days=-1)
    if period == Period.QUARTER:
        start = today.replace(month=3 * ((today.month - 1) // 3) + 1, day=1)
        return start, start + relativedelta(months=3, days=-1)
    start = today.replace(month=1, day=1)
    return start, today.replace(month=12, day=31)


def filter_by_date(
    records: Iterable[T],
    start_date: Optional[date],
    end_date: Optional[date],
    date_of: Callable[[T], date],
) -> list[T]:
    """Records whose date falls within the inclusive bounds (None = open)."""
    return [
        record
        for record in records
        if (start_date is None or date_of(record) >= start_date)
        and (end_date is None or date_of(record) <= end_date)
    ]


def total_in_period(
    records: Iterable[T],
    period: Period,
    date_of: Callable[[T], date],
    amount: Callable[[T], Decimal] = lambda record: record.amount,
    today: Optional[date] = None,
) -> Decimal:
    """Sum of amounts dated within the current month, quarter or year."""
    start, end = period_range(period, today)
    return sum_amounts(filter_by_date(records, start, end, date_of), amount)


def totals_by_month(
    records: Iterable[T],
    date_of: Callable[[T], date],
    amount: Callable[[T], Decimal] = lambda record: record.amount,
) -> list[GroupTotal]:
    """Totals per ``YYYY-MM`` period, oldest first."""
    totals = group_totals(records, key=lambda record: date_of(record).strftime("%Y-%m"), amount=amount)
    return sorted(totals, key=lambda row: row.key)


def cost_category_label(cost: OperationalCost) -> str:
    return f"{cost.category} / {cost.sub_category}" if cost.sub_category else cost.category


def cost_totals_by_category(costs: Iterable[OperationalCost]) -> list[GroupTotal]:
    """Costs grouped by category and sub-category, largest first."""
    return group_totals(costs, key=cost_category_label, amount=lambda cost: cost.amount)


def payment_totals_by_workshop(
    payments: Iterable[Payment], workshops: Sequence[Workshop]
) -> list[GroupTotal]:
    """Payments grouped by workshop, largest first.

    Payments with no workshop, or for a workshop that no longer exists, share
    a single "Other income" group.
    """
    names = {workshop.id: workshop.name for workshop in workshops}
    return group_totals(
        payments,
        key=lambda payment: payment.workshop_id if payment.workshop_id in names else None,
        amount=lambda payment: payment.amount,
        label=lambda workshop_id: names.get(workshop_id, NO_WORKSHOP_LABEL),
    )


def cost_totals_by_supplier(
    costs: Iterable[OperationalCost], suppliers: Sequence[Supplier]
) -> list[GroupTotal]:
    """Costs with a supplier grouped by supplier, largest first."""
    names = {supplier.id: supplier.name for supplier in suppliers}
    return group_totals(
        (cost for cost in costs if cost.supplier_id),
        key=lambda cost: cost.supplier_id,
        amount=lambda cost: cost.amount,
        label=lambda supplier_id: names.get(supplier_id, supplier_id),
    )


def revenue_by_location(
    payments: Iterable[Payment],
    workshops: Sequence[Workshop],
    locations: Sequence[Location],
) -> list[GroupTotal]:
    """Workshop payments grouped by the workshop's location, largest first."""
    location_of = {workshop.id: workshop.location_id for workshop in workshops}
    names = {location.id: location.name for location in locations}
    return group_totals(
        (payment for payment in payments if payment.workshop_id in location_of),
        key=lambda payment: location_of[payment.workshop_id],
        amount=lambda payment: payment.amount,
        label=lambda location_id: names.get(location_id, location_id),
    )


def net_profit(payments: Iterable[Payment], costs: Iterable[OperationalCost]) -> Decimal:
    """Total payments minus total costs."""
    return sum_amounts(payments, lambda payment: payment.amount) - sum_amounts(
        costs, lambda cost: cost.amount
    )


def quote_conversion_rate(quotes: Iterable[Quote]) -> float:
    """Percentage of decided quotes that were approved.

    Quotes still in ``sent`` state are undecided and left out; with no
    decided quote the rate is 0.
    """
    approved = rejected = 0
    for quote in quotes:
        if quote.status == QuoteStatus.APPROVED:
            approved += 1
        elif quote.status == QuoteStatus.REJECTED:
            rejected += 1
    decided = approved + rejected
    if decided == 0:
        return 0.0
    return approved / decided * 100


def split_in_cents(amount: Decimal, parts: int) -> list[Decimal]:
    """Split an amount into ``parts`` shares of whole cents.

    Leftover cents go one each to the first shares, so the shares always add
    up to the amount rounded to cents.
    """
    cents = int(to_cents(amount) / CENT)
    base, leftover = divmod(cents, parts)
    return [(base + (1 if index < leftover else 0)) * CENT for index in range(parts)]


def allocated_costs(costs: Iterable[OperationalCost]) -> dict[str, Decimal]:
    """Cost per workshop; a cost linked to several workshops is split evenly."""
    allocation: dict[str, Decimal] = {}
    for cost in costs:
        if not cost.workshop_ids:
            continue
        shares = split_in_cents(cost.amount, len(cost.workshop_ids))
        for workshop_id, share in zip(cost.workshop_ids, shares):
            allocation[workshop_id] = allocation.get(workshop_id, Decimal("0")) + share
    return allocation


def workshop_performance(
    workshops: Sequence[Workshop],
    payments: Iterable[Payment],
    costs: Iterable[OperationalCost],
    registrations: Iterable[Registration],
) -> list[WorkshopPerformance]:
    """Per-participant revenue and profit of every workshop with participants.

    Workshops nobody registered to are left out instead of dividing by zero.
    """
    participants = {
        workshop_id: len(regs)
        for workshop_id, regs in group_by(registrations, lambda reg: reg.workshop_id).items()
    }
    revenue = {
        workshop_id: sum_amounts(group, lambda payment: payment.amount)
        for workshop_id, group in group_by(payments, lambda payment: payment.workshop_id).items()
    }
    cost = allocated_costs(costs)

    rows = []
    for workshop in workshops:
        count = participants.get(workshop.id, 0)
        if count == 0:
            continue
        workshop_revenue = revenue.get(workshop.id, Decimal("0"))
        workshop_cost = to_cents(cost.get(workshop.id, Decimal("0")))
        profit = workshop_revenue - workshop_cost
        rows.append(
            WorkshopPerformance(
                workshop_id=workshop.id,
                name=workshop.name,
                participants=count,
                revenue=workshop_revenue,
                cost=workshop_cost,
                profit=profit,
                revenue_per_participant=to_cents(workshop_revenue / count),
                profit_per_participant=to_cents(profit / count),
            )
        )
    return rows


def statistics(values: Sequence[Decimal]) -> Optional[Statistics]:
    """Minimum, average and maximum of the values, or None when empty."""
    if not values:
        return None
    return Statistics(
        minimum=min(values),
        average=to_cents(sum(values, Decimal("0")) / len(values)),
        maximum=max(values),
    )


def quote_totals(amount: Decimal) -> QuoteTotals:
    """Displayed quote total, with stamp duty when above the threshold."""
    stamp_duty = STAMP_DUTY_AMOUNT if amount > STAMP_DUTY_THRESHOLD else Decimal("0")
    return QuoteTotals(base=amount, stamp_duty=stamp_duty, total=amount + stamp_duty)
