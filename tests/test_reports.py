"""Tests for dashboard figures and report tables."""

import pytest
from datetime import date
from decimal import Decimal

from workshopmgr.domain.entities import ExistingClient, PaymentMethod, QuoteStatus
from workshopmgr.domain.reports import REPORT_NAMES, ReportTable, render_csv


@pytest.fixture
def ledger(billing_service, sample_parent, sample_child, sample_workshop, sample_supplier, registration_service):
    """A month of activity around the sample workshop."""
    registration_service.register_child(sample_child.id, [sample_workshop.id])
    billing_service.record_payment(
        sample_parent.id, Decimal("80.00"), date(2024, 10, 1), PaymentMethod.CARD, workshop_id=sample_workshop.id
    )
    billing_service.record_payment(sample_parent.id, Decimal("20.00"), date(2024, 9, 15), PaymentMethod.CASH)
    billing_service.record_cost(
        "Affitto", Decimal("40.00"), date(2024, 10, 8), supplier_id=sample_supplier.id,
        workshop_ids=[sample_workshop.id],
    )
    billing_service.record_cost("Materiali", Decimal("15.50"), date(2024, 8, 1))
    for status in (QuoteStatus.APPROVED, QuoteStatus.REJECTED, QuoteStatus.SENT):
        quote_id = billing_service.create_quote(
            ExistingClient(parent_id=sample_parent.id), "Festa", Decimal("100"), date(2024, 9, 1)
        )
        billing_service.set_quote_status(quote_id, status)


class TestDashboard:
    def test_empty_store(self, report_service):
        dashboard = report_service.dashboard(today=date(2024, 10, 10))

        assert dashboard.active_workshops == 0
        assert dashboard.net_profit == Decimal("0")
        assert dashboard.quote_conversion_rate == 0.0
        assert dashboard.payment_methods.grand_total == Decimal("0")

    def test_figures(self, report_service, ledger):
        dashboard = report_service.dashboard(today=date(2024, 10, 10))

        assert dashboard.active_workshops == 1
        assert dashboard.active_clients == 1
        assert dashboard.children == 1
        assert dashboard.registrations == 1
        assert dashboard.revenue_this_month == Decimal("80.00")
        assert dashboard.revenue_this_quarter == Decimal("80.00")
        assert dashboard.revenue_this_year == Decimal("100.00")
        assert dashboard.costs_this_month == Decimal("40.00")
        assert dashboard.costs_this_year == Decimal("55.50")
        assert dashboard.net_profit == Decimal("44.50")
        assert dashboard.quote_conversion_rate == pytest.approx(50.0)
        assert dashboard.payment_methods.by_method[PaymentMethod.CARD] == Decimal("80.00")

    def test_workshop_not_active_after_end(self, report_service, ledger):
        assert report_service.dashboard(today=date(2024, 10, 23)).active_workshops == 0


class TestReportTables:
    def test_methods_table_has_total_row(self, report_service, ledger):
        table = report_service.build_table("methods")

        assert table.headers == ("Method", "Total")
        assert table.rows[-1] == ("total", "100.00")
        assert ("card", "80.00") in table.rows

    def test_period_filter(self, report_service, ledger):
        table = report_service.build_table("methods", start_date=date(2024, 9, 1), end_date=date(2024, 9, 30))
        assert table.rows[-1] == ("total", "20.00")

    def test_workshops_table(self, report_service, ledger):
        table = report_service.build_table("workshops")

        assert table.rows == (("Piccoli Chef", "80.00", "1"), ("Other income", "20.00", "1"))

    def test_suppliers_and_locations(self, report_service, ledger):
        assert report_service.build_table("suppliers").rows == (("Comune di Milano", "40.00", "1"),)
        assert report_service.build_table("locations").rows == (("Palestra Comunale", "80.00", "1"),)

    def test_monthly_balance(self, report_service, ledger):
        table = report_service.build_table("monthly")

        assert table.rows == (
            ("2024-08", "0.00", "15.50", "-15.50"),
            ("2024-09", "20.00", "0.00", "20.00"),
            ("2024-10", "80.00", "40.00", "40.00"),
        )

    def test_performance(self, report_service, ledger):
        rows, revenue_stats, profit_stats = report_service.workshop_performance()

        assert len(rows) == 1
        assert rows[0].revenue_per_participant == Decimal("80.00")
        assert rows[0].profit_per_participant == Decimal("40.00")
        assert revenue_stats.average == Decimal("80.00")
        assert profit_stats.maximum == Decimal("40.00")

        table = report_service.build_table("performance")
        assert table.rows[0][:2] == ("Piccoli Chef", "1")

    def test_every_report_builds(self, report_service, ledger):
        for name in REPORT_NAMES:
            assert report_service.build_table(name).title

    def test_unknown_report(self, report_service):
        with pytest.raises(ValueError, match="Unknown report"):
            report_service.build_table("weekly")


class TestCsvExport:
    def test_render_csv_quotes_every_cell(self):
        table = ReportTable("T", ("Category", "Total"), (("Affitto; sala", "40.00"), ('Say "hi"', "1.00")))

        assert render_csv(table) == (
            '"Category";"Total"\n'
            '"Affitto; sala";"40.00"\n'
            '"Say ""hi""";"1.00"\n'
        )

    def test_export_writes_bom(self, report_service, ledger, tmp_path):
        path = report_service.export_csv(report_service.build_table("methods"), tmp_path / "methods.csv")

        raw = path.read_bytes()
        assert raw.startswith(b"\xef\xbb\xbf")
        assert raw.decode("utf-8-sig").splitlines()[0] == '"Method";"Total"'
