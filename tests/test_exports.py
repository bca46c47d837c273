from datetime import date
from decimal import Decimal

from django.test import TestCase

from finance.models import Expense, Income, VehicleProfile
from .helpers import make_user


class CsvExportTests(TestCase):
    def setUp(self):
        self.user = make_user()
        self.client.force_login(self.user)
        self.vehicle = VehicleProfile.objects.create(user=self.user, label="Leaf", vehicle_type="EV")
        self.income = Income.objects.create(user=self.user, platform="Uber", amount=Decimal("42.5"),
                                            date=date(2024, 1, 5))
        self.expense = Expense.objects.create(
            user=self.user, expense_type="fuel_charging", amount_minor=2250, paid_at=date(2024, 1, 6),
            unit_rate_minor=45, unit_rate_unit="kwh", vehicle_profile=self.vehicle,
            notes='Said "hi" to the attendant',
        )

    def _lines(self, response):
        return response.content.decode("utf-8").splitlines()

    def test_income_export(self):
        response = self.client.get("/api/export/incomes")
        self.assertEqual(response["Content-Type"], "text/csv; charset=utf-8")
        self.assertEqual(response["Content-Disposition"], 'attachment; filename="gigfin-income-export.csv"')
        lines = self._lines(response)
        self.assertEqual(lines[0], '"Date","Platform","Amount","Created At","Entry ID"')
        self.assertTrue(lines[1].startswith('"2024-01-05","Uber","42.50",'))
        self.assertTrue(lines[1].endswith(f'"{self.income.id}"'))

    def test_expense_export_quotes_and_escapes(self):
        lines = self._lines(self.client.get("/api/export/expenses"))
        self.assertEqual(
            lines[0],
            '"Date","Expense type","Amount","Unit rate minor","Unit rate unit","Vehicle label",'
            '"Notes","Details JSON","Created At","Entry ID"',
        )
        self.assertTrue(lines[1].startswith(
            '"2024-01-06","fuel_charging","22.50","45","kwh","Leaf","Said ""hi"" to the attendant","",'
        ))

    def test_combined_export_is_newest_first(self):
        response = self.client.get("/api/export/all")
        self.assertEqual(response["Content-Disposition"], 'attachment; filename="gigfin-data-export.csv"')
        lines = self._lines(response)
        self.assertTrue(lines[0].startswith('"Type","Date","Platform / Expense type","Amount"'))
        self.assertTrue(lines[1].startswith('"Expense","2024-01-06","fuel_charging","22.50","Leaf"'))
        self.assertTrue(lines[2].startswith('"Income","2024-01-05","Uber","42.50","","",'))

    def test_exports_only_contain_own_rows(self):
        Income.objects.create(user=make_user("other"), platform="Bolt", amount=Decimal("1"), date=date(2024, 1, 7))
        self.assertEqual(len(self._lines(self.client.get("/api/export/incomes"))), 2)
