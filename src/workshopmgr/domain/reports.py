"""Dashboard and report tables built from store snapshots."""

import csv
import dataclasses
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from io import StringIO
from pathlib import Path
from typing import Optional, Sequence, Union

from workshopmgr.database.base import Database
from workshopmgr.domain.aggregation import GroupTotal, top_n
from workshopmgr.domain.entities import ParentStatus, PaymentMethod, Snapshot
from workshopmgr.domain.finance import (
    MethodTotals,
    Period,
    Statistics,
    WorkshopPerformance,
    cost_totals_by_category,
    cost_totals_by_supplier,
    filter_by_date,
    net_profit,
    payment_totals_by_workshop,
    quote_conversion_rate,
    revenue_by_location,
    statistics,
    to_cents,
    total_in_period,
    totals_by_method,
    totals_by_month,
    workshop_performance,
)

logger = logging.getLogger(__name__)

CSV_DELIMITER = ";"
CSV_ENCODING = "utf-8-sig"

REPORT_NAMES: tuple[str, ...] = (
    "methods",
    "cost-categories",
    "workshops",
    "suppliers",
    "locations",
    "monthly",
    "performance",
)


@dataclass(frozen=True)
class ReportTable:
    """A titled table of already formatted cells."""

    title: str
    headers: tuple[str, ...]
    rows: tuple[tuple[str, ...], ...]


@dataclass(frozen=True)
class Dashboard:
    """Headline figures for the home screen."""

    active_workshops: int
    active_clients: int
    children: int
    registrations: int
    revenue_this_month: Decimal
    revenue_this_quarter: Decimal
    revenue_this_year: Decimal
    costs_this_month: Decimal
    costs_this_year: Decimal
    net_profit: Decimal
    quote_conversion_rate: float
    payment_methods: MethodTotals


def format_amount(value: Decimal) -> str:
    return f"{to_cents(value):.2f}"


def render_csv(table: ReportTable) -> str:
    """Render a table as semicolon separated values, every cell quoted."""
    output = StringIO()
    writer = csv.writer(
        output, delimiter=CSV_DELIMITER, quoting=csv.QUOTE_ALL, lineterminator="\n"
    )
    writer.writerow(table.headers)
    writer.writerows(table.rows)
    return output.getvalue()


def _totals_table(title: str, key_header: str, totals: Sequence[GroupTotal]) -> ReportTable:
    return ReportTable(
        title=title,
        headers=(key_header, "Total", "Count"),
        rows=tuple(
            (str(row.label if row.label is not None else row.key), format_amount(row.total), str(row.count))
            for row in totals
        ),
    )


class ReportService:
    """Service for dashboard figures and report tables.

    Every report reads one snapshot of the store and reduces it with the
    pure functions of the finance module.
    """

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db

    def _snapshot(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> Snapshot:
        """Load a snapshot with payments and costs limited to a date range."""
        snapshot = self.db.load_snapshot()
        if start_date is None and end_date is None:
            return snapshot
        return dataclasses.replace(
            snapshot,
            payments=tuple(
                filter_by_date(snapshot.payments, start_date, end_date, lambda p: p.payment_date)
            ),
            costs=tuple(filter_by_date(snapshot.costs, start_date, end_date, lambda c: c.date)),
        )

    def dashboard(self, today: Optional[date] = None) -> Dashboard:
        """Compute headline figures relative to ``today``."""
        today = today or date.today()
        snapshot = self.db.load_snapshot()

        def payment_total(period: Period) -> Decimal:
            return total_in_period(snapshot.payments, period, lambda p: p.payment_date, today=today)

        def cost_total(period: Period) -> Decimal:
            return total_in_period(snapshot.costs, period, lambda c: c.date, today=today)

        return Dashboard(
            active_workshops=sum(
                1 for w in snapshot.workshops if w.start_date <= today <= w.end_date
            ),
            active_clients=sum(1 for p in snapshot.parents if p.status == ParentStatus.ACTIVE),
            children=len(snapshot.children),
            registrations=len(snapshot.registrations),
            revenue_this_month=payment_total(Period.MONTH),
            revenue_this_quarter=payment_total(Period.QUARTER),
            revenue_this_year=payment_total(Period.YEAR),
            costs_this_month=cost_total(Period.MONTH),
            costs_this_year=cost_total(Period.YEAR),
            net_profit=net_profit(snapshot.payments, snapshot.costs),
            quote_conversion_rate=quote_conversion_rate(snapshot.quotes),
            payment_methods=totals_by_method(snapshot.payments),
        )

    def payment_methods(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> MethodTotals:
        return totals_by_method(self._snapshot(start_date, end_date).payments)

    def top_costs_by_category(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[GroupTotal]:
        return top_n(cost_totals_by_category(self._snapshot(start_date, end_date).costs))

    def top_payments_by_workshop(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[GroupTotal]:
        snapshot = self._snapshot(start_date, end_date)
        return top_n(payment_totals_by_workshop(snapshot.payments, snapshot.workshops))

    def top_costs_by_supplier(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[GroupTotal]:
        snapshot = self._snapshot(start_date, end_date)
        return top_n(cost_totals_by_supplier(snapshot.costs, snapshot.suppliers))

    def revenue_by_location(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[GroupTotal]:
        snapshot = self._snapshot(start_date, end_date)
        return revenue_by_location(snapshot.payments, snapshot.workshops, snapshot.locations)

    def monthly_balance(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[tuple[str, Decimal, Decimal]]:
        """Revenue and costs per ``YYYY-MM`` period, oldest first."""
        snapshot = self._snapshot(start_date, end_date)
        revenue = {
            row.key: row.total
            for row in totals_by_month(snapshot.payments, lambda p: p.payment_date)
        }
        costs = {row.key: row.total for row in totals_by_month(snapshot.costs, lambda c: c.date)}
        zero = Decimal("0")
        return [
            (month, revenue.get(month, zero), costs.get(month, zero))
            for month in sorted(set(revenue) | set(costs))
        ]

    def workshop_performance(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> tuple[list[WorkshopPerformance], Optional[Statistics], Optional[Statistics]]:
        """Per-workshop profitability.

        Returns:
            The rows, then min/avg/max statistics of revenue per participant
            and of profit per participant (None when no workshop qualifies)
        """
        snapshot = self._snapshot(start_date, end_date)
        rows = workshop_performance(
            snapshot.workshops, snapshot.payments, snapshot.costs, snapshot.registrations
        )
        return (
            rows,
            statistics([row.revenue_per_participant for row in rows]),
            statistics([row.profit_per_participant for row in rows]),
        )

    def build_table(
        self,
        report: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> ReportTable:
        """Build one of the named report tables.

        Args:
            report: One of ``REPORT_NAMES``
            start_date: Optional start date filter for payments and costs
            end_date: Optional end date filter for payments and costs

        Raises:
            ValueError: If the report name is unknown
        """
        if report == "methods":
            totals = self.payment_methods(start_date, end_date)
            rows = [
                (method.value, format_amount(totals.by_method[method])) for method in PaymentMethod
            ]
            rows.append(("total", format_amount(totals.grand_total)))
            return ReportTable("Payments by method", ("Method", "Total"), tuple(rows))
        if report == "cost-categories":
            return _totals_table(
                "Top costs by category", "Category", self.top_costs_by_category(start_date, end_date)
            )
        if report == "workshops":
            return _totals_table(
                "Top payments by workshop", "Workshop", self.top_payments_by_workshop(start_date, end_date)
            )
        if report == "suppliers":
            return _totals_table(
                "Top costs by supplier", "Supplier", self.top_costs_by_supplier(start_date, end_date)
            )
        if report == "locations":
            return _totals_table(
                "Revenue by location", "Location", self.revenue_by_location(start_date, end_date)
            )
        if report == "monthly":
            return ReportTable(
                "Monthly balance",
                ("Month", "Revenue", "Costs", "Net"),
                tuple(
                    (month, format_amount(revenue), format_amount(cost), format_amount(revenue - cost))
                    for month, revenue, cost in self.monthly_balance(start_date, end_date)
                ),
            )
        if report == "performance":
            rows, _, _ = self.workshop_performance(start_date, end_date)
            return ReportTable(
                "Workshop performance",
                (
                    "Workshop",
                    "Participants",
                    "Revenue",
                    "Cost",
                    "Profit",
                    "Revenue per participant",
                    "Profit per participant",
                ),
                tuple(
                    (
                        row.name,
                        str(row.participants),
                        format_amount(row.revenue),
                        format_amount(row.cost),
                        format_amount(row.profit),
                        format_amount(row.revenue_per_participant),
                        format_amount(row.profit_per_participant),
                    )
                    for row in rows
                ),
            )
        raise ValueError(f"Unknown report '{report}'. Choose from: {', '.join(REPORT_NAMES)}")

    def export_csv(self, table: ReportTable, path: Union[str, Path]) -> Path:
        """Write a report table to a CSV file (UTF-8 with BOM).

        Returns:
            The written path
        """
        path = Path(path)
        with open(path, "w", encoding=CSV_ENCODING, newline="") as f:
            f.write(render_csv(table))
        logger.info("Exported '%s' (%d rows) to %s", table.title, len(table.rows), path)
        return path
