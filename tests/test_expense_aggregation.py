from datetime import datetime
from unittest import mock

from django.test import SimpleTestCase

from finance.lib import expenses as expense_lib
from finance.lib.expenses import FUEL_CHARGING
from .helpers import d, expense

NOW = datetime(2024, 3, 15, 9, 0)


class ExpenseTotalsTests(SimpleTestCase):
    def test_minor_units_become_major(self):
        entries = [expense(d("2024-03-01"), 1250), expense(d("2024-03-02"), 99)]
        self.assertAlmostEqual(expense_lib.total_expenses(entries), 13.49)

    def test_category_distribution_largest_first(self):
        entries = [
            expense(d("2024-03-01"), 1000, "parking"),
            expense(d("2024-03-02"), 3000, FUEL_CHARGING),
            expense(d("2024-03-03"), 1000, "parking"),
        ]
        rows = expense_lib.category_distribution(entries)
        self.assertEqual([r["expense_type"] for r in rows], [FUEL_CHARGING, "parking"])
        self.assertAlmostEqual(rows[0]["percentage"], 0.6)

    def test_overview_for_month(self):
        entries = [
            expense(d("2024-03-01"), 1000),
            expense(d("2024-03-01"), 500),
            expense(d("2024-03-10"), 1500),
            expense(d("2024-02-28"), 9999),
        ]
        overview = expense_lib.expense_overview(entries, "monthly", NOW)
        self.assertEqual(overview["total"], 30)
        self.assertEqual(overview["tracked_days"], 2)
        self.assertEqual(overview["average_per_day"], 15)
        self.assertEqual(overview["entry_count"], 3)

    def test_overview_without_entries(self):
        overview = expense_lib.expense_overview([], "weekly", NOW)
        self.assertEqual(overview["total"], 0)
        self.assertEqual(overview["average_per_day"], 0)
        self.assertEqual(overview["categories"], [])

    def test_monthly_expense_totals(self):
        buckets = expense_lib.monthly_expense_totals([expense(d("2024-02-10"), 2000)], months=3, now=NOW)
        self.assertEqual([b["total"] for b in buckets], [0, 20, 0])

    @mock.patch("finance.lib.grouping.local_now", return_value=NOW)
    def test_monthly_expense_totals_default_to_now(self, _now):
        buckets = expense_lib.monthly_expense_totals([expense(d("2024-02-10"), 2000)])
        self.assertEqual(len(buckets), 6)
        self.assertEqual([b["total"] for b in buckets[:2]], [0, 20])
        self.assertEqual(expense_lib.monthly_expense_totals([])[0]["total"], 0)


class FuelConsumptionTests(SimpleTestCase):
    def test_quantity_is_amount_over_rate(self):
        entries = [
            expense(d("2024-03-01"), 2250, FUEL_CHARGING, rate=45, unit="kwh", vehicle="v1"),
            expense(d("2024-03-02"), 1500, FUEL_CHARGING, rate=150, unit="litre", vehicle="v2"),
            expense(d("2024-03-03"), 1000, FUEL_CHARGING),
        ]
        result = expense_lib.fuel_consumption(entries)
        self.assertEqual(result["entries_with_rate"], 2)
        self.assertEqual(result["entry_count"], 3)
        self.assertEqual(
            [(row["unit"], row["quantity"]) for row in result["rows"]],
            [("kwh", 50.0), ("litre", 10.0)],
        )

    def test_scoped_to_vehicle(self):
        entries = [
            expense(d("2024-03-01"), 2250, FUEL_CHARGING, rate=45, unit="kwh", vehicle="v1"),
            expense(d("2024-03-02"), 1500, FUEL_CHARGING, rate=150, unit="litre", vehicle="v2"),
        ]
        result = expense_lib.fuel_consumption(entries, vehicle_profile_id="v2")
        self.assertEqual([row["unit"] for row in result["rows"]], ["litre"])

    def test_rate_label(self):
        self.assertEqual(
            expense_lib.format_expense_rate(expense(d("2024-03-01"), 100, FUEL_CHARGING, rate=45, unit="kwh")),
            "45p/kWh",
        )
        self.assertEqual(expense_lib.format_expense_rate(expense(d("2024-03-01"), 100)), "—")
