from datetime import date, datetime
from decimal import Decimal
from unittest import mock

from django.test import SimpleTestCase, TestCase

from finance.dashboard import build_dashboard, resolve_timeframe_key
from finance.lib.odometer import MILES
from finance.models import Expense, Income, Odometer
from .helpers import d, expense, income, make_user, odometer

NOW = datetime(2024, 3, 20, 12, 0)


class BuildDashboardTests(SimpleTestCase):
    def _build(self, **overrides):
        options = {"timeframe": "monthly", "now": NOW, "currency": "GBP", "unit": "km"}
        options.update(overrides)
        return build_dashboard(
            [income(d("2024-03-02"), "Uber", 150), income(d("2024-03-02"), "Lyft", 50),
             income(d("2024-02-10"), "Uber", 80)],
            [expense(d("2024-03-02"), 4000, "fuel_charging", rate=40, unit="kwh")],
            [odometer(d("2024-03-02"), 1000, 1250)],
            **options,
        )

    def test_panels(self):
        data = self._build()
        self.assertEqual(data["income"]["timeframeTotal"], 200)
        self.assertEqual(data["income"]["recentDays"][0]["breakdown"][0], {"platform": "Uber", "amount": 150.0})
        self.assertEqual(len(data["income"]["monthlyTotals"]), 6)
        self.assertEqual(data["expenses"]["total"], 40)
        self.assertEqual(data["expenses"]["categories"][0]["label"], "Fuel / Charging")
        self.assertEqual(data["expenses"]["fuelConsumption"]["rows"][0]["quantity"], 100)
        self.assertAlmostEqual(data["expenses"]["fuelCostPerDistance"], 40 / 250)
        self.assertEqual(data["profitability"]["netProfit"], 160)
        self.assertEqual(data["profitability"]["display"]["netProfit"], "£160.00")
        self.assertEqual(data["driving"]["distanceThisMonth"], 250)
        self.assertEqual(data["driving"]["display"]["costPerDistance"], "£0.16/km")

    def test_ratios_follow_the_display_unit(self):
        data = self._build(unit=MILES)
        self.assertAlmostEqual(data["driving"]["distanceThisMonth"], 250 * 0.621371)
        self.assertAlmostEqual(data["driving"]["costPerDistance"], 0.16 / 0.621371)
        self.assertTrue(data["driving"]["display"]["costPerDistance"].endswith("/mi"))

    def test_no_odometer_logs_shows_em_dash(self):
        data = build_dashboard([], [], [], timeframe="weekly", now=NOW, currency="USD", unit="km")
        self.assertIsNone(data["driving"]["profitPerDistance"])
        self.assertEqual(data["driving"]["display"]["profitPerDistance"], "—")
        self.assertIsNone(data["expenses"]["fuelCostPerDistance"])

    def test_unknown_timeframe_falls_back_to_monthly(self):
        self.assertEqual(resolve_timeframe_key("nonsense"), "monthly")
        self.assertEqual(resolve_timeframe_key("yearToDate"), "yearToDate")


class DashboardViewTests(TestCase):
    def setUp(self):
        self.user = make_user()
        self.client.force_login(self.user)

    @mock.patch("finance.views.local_now", return_value=NOW)
    def test_uses_profile_preferences(self, _now):
        profile = self.user.profile
        profile.currency = "EUR"
        profile.unit_system = "imperial"
        profile.save()
        Income.objects.create(user=self.user, platform="Uber", amount=Decimal("100"), date=date(2024, 3, 2))
        Expense.objects.create(user=self.user, expense_type="parking", amount_minor=1000, paid_at=date(2024, 3, 2))
        Odometer.objects.create(user=self.user, date=date(2024, 3, 2), start_reading=0, end_reading=100)

        data = self.client.get("/api/dashboard?timeframe=monthly").json()
        self.assertEqual(data["currency"], "EUR")
        self.assertEqual(data["driving"]["unit"], "miles")
        self.assertEqual(data["profitability"]["display"]["netProfit"], "€90.00")
        self.assertEqual(data["income"]["monthTotal"], 100)
