import uuid
from datetime import date
from decimal import Decimal

from django.test import TestCase

from finance.models import ChargingVendor, Expense, Income, Odometer, VehicleProfile
from .helpers import JsonClientMixin, make_user


class ApiTestCase(JsonClientMixin, TestCase):
    def setUp(self):
        self.user = make_user()
        self.client.force_login(self.user)


class AuthGuardTests(JsonClientMixin, TestCase):
    def test_every_entry_route_needs_a_session(self):
        for path in ("/api/incomes", "/api/expenses", "/api/odometers",
                     "/api/vehicle-profiles", "/api/charging-vendors",
                     "/api/export/all", "/api/dashboard", "/api/logs/incomes"):
            self.assertEqual(self.client.get(path).status_code, 401, path)
        response = self.post_json("/api/incomes", {"platform": "Uber", "amount": 5, "date": "2024-01-01"})
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json(), {"error": "Unauthorized"})
        self.assertFalse(Income.objects.exists())


class IncomeApiTests(ApiTestCase):
    def test_create_returns_201_with_location(self):
        response = self.post_json("/api/incomes", {"platform": "  Uber   Eats ", "amount": 42.5, "date": "2024-01-05"})
        self.assertEqual(response.status_code, 201)
        body = response.json()
        self.assertEqual(body["platform"], "Uber Eats")
        self.assertEqual(body["amount"], 42.5)
        self.assertEqual(body["date"], "2024-01-05")
        self.assertEqual(response["Location"], f"/api/incomes?id={body['id']}")

    def test_invalid_payload_is_400_with_fields(self):
        response = self.post_json("/api/incomes", {"platform": "", "amount": -3, "date": "yesterday"})
        self.assertEqual(response.status_code, 400)
        body = response.json()
        self.assertEqual(body["error"], "Invalid payload")
        self.assertEqual(set(body["fields"]), {"platform", "amount", "date"})

    def test_malformed_json_is_400(self):
        response = self.client.post("/api/incomes", data="{nope", content_type="application/json")
        self.assertEqual(response.status_code, 400)

    def test_list_is_newest_first_and_owner_scoped(self):
        Income.objects.create(user=self.user, platform="A", amount=Decimal("1"), date=date(2024, 1, 1))
        Income.objects.create(user=self.user, platform="B", amount=Decimal("1"), date=date(2024, 1, 2))
        Income.objects.create(user=make_user("other"), platform="C", amount=Decimal("1"), date=date(2024, 1, 3))
        self.assertEqual([row["platform"] for row in self.client.get("/api/incomes").json()], ["B", "A"])

    def test_patch_updates_only_sent_fields(self):
        entry = Income.objects.create(user=self.user, platform="Uber", amount=Decimal("10"), date=date(2024, 1, 1))
        response = self.patch_json("/api/incomes", {"id": str(entry.id), "amount": 12.25})
        self.assertEqual(response.status_code, 200)
        entry.refresh_from_db()
        self.assertEqual(entry.amount, Decimal("12.25"))
        self.assertEqual(entry.platform, "Uber")

    def test_patch_and_delete_of_someone_elses_entry_is_404(self):
        foreign = Income.objects.create(user=make_user("other"), platform="X", amount=Decimal("1"), date=date(2024, 1, 1))
        self.assertEqual(self.patch_json("/api/incomes", {"id": str(foreign.id), "amount": 99}).status_code, 404)
        self.assertEqual(self.delete_json("/api/incomes", {"id": str(foreign.id)}).status_code, 404)
        self.assertEqual(self.delete_json("/api/incomes", {"id": str(uuid.uuid4())}).status_code, 404)
        self.assertTrue(Income.objects.filter(pk=foreign.pk).exists())

    def test_malformed_id_is_400(self):
        self.assertEqual(self.delete_json("/api/incomes", {"id": "not-a-uuid"}).status_code, 400)

    def test_delete_returns_id(self):
        entry = Income.objects.create(user=self.user, platform="Uber", amount=Decimal("10"), date=date(2024, 1, 1))
        self.client.get("/api/incomes")                           # warm the cache
        response = self.delete_json("/api/incomes", {"id": str(entry.id)})
        self.assertEqual(response.json(), {"id": str(entry.id)})
        self.assertEqual(self.client.get("/api/incomes").json(), [])

    def test_get_single_entry(self):
        entry = Income.objects.create(user=self.user, platform="Uber", amount=Decimal("10"), date=date(2024, 1, 1))
        self.assertEqual(self.client.get(f"/api/incomes?id={entry.id}").json()["platform"], "Uber")


class ExpenseApiTests(ApiTestCase):
    def test_fuel_expense_keeps_rate_pair_and_embeds_vehicle(self):
        vehicle = VehicleProfile.objects.create(user=self.user, label="Leaf", vehicle_type="EV")
        response = self.post_json("/api/expenses", {
            "expenseType": "fuel_charging", "amountMinor": 2250, "paidAt": "2024-03-01",
            "unitRateMinor": 45, "unitRateUnit": "kwh", "vehicleProfileId": str(vehicle.id),
            "detailsJson": {"vendor": "Ionity"},
        })
        self.assertEqual(response.status_code, 201, response.content)
        body = response.json()
        self.assertEqual((body["unitRateMinor"], body["unitRateUnit"]), (45, "kwh"))
        self.assertEqual(body["vehicle"], {"id": str(vehicle.id), "label": "Leaf", "vehicleType": "EV"})
        self.assertEqual(body["detailsJson"], '{"vendor": "Ionity"}')

    def test_rate_is_cleared_for_non_fuel_types(self):
        response = self.post_json("/api/expenses", {
            "expenseType": "parking", "amountMinor": 300, "paidAt": "2024-03-01",
            "unitRateMinor": 45, "unitRateUnit": "kwh",
        })
        self.assertEqual(response.status_code, 201)
        self.assertIsNone(response.json()["unitRateMinor"])
        self.assertIsNone(response.json()["unitRateUnit"])

    def test_half_a_rate_pair_is_rejected(self):
        response = self.post_json("/api/expenses", {
            "expenseType": "fuel_charging", "amountMinor": 300, "paidAt": "2024-03-01", "unitRateMinor": 45,
        })
        self.assertEqual(response.status_code, 400)

    def test_fractional_minor_units_are_rounded(self):
        response = self.post_json("/api/expenses", {"expenseType": "tolls", "amountMinor": 250.5, "paidAt": "2024-03-01"})
        self.assertEqual(response.json()["amountMinor"], 251)

    def test_someone_elses_vehicle_is_rejected(self):
        foreign = VehicleProfile.objects.create(user=make_user("other"), label="Nope", vehicle_type="EV")
        response = self.post_json("/api/expenses", {
            "expenseType": "tolls", "amountMinor": 250, "paidAt": "2024-03-01", "vehicleProfileId": str(foreign.id),
        })
        self.assertEqual(response.status_code, 400)
        self.assertIn("vehicleProfileId", response.json()["fields"])
        self.assertFalse(Expense.objects.exists())

    def test_unknown_type_is_rejected(self):
        response = self.post_json("/api/expenses", {"expenseType": "snacks", "amountMinor": 250, "paidAt": "2024-03-01"})
        self.assertEqual(response.status_code, 400)


class OdometerApiTests(ApiTestCase):
    def test_distance_is_reported(self):
        response = self.post_json("/api/odometers", {"date": "2024-03-01", "startReading": 1000, "endReading": 1250})
        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.json()["distance"], 250)

    def test_negative_distance_is_rejected(self):
        response = self.post_json("/api/odometers", {"date": "2024-03-01", "startReading": 1250, "endReading": 1000})
        self.assertEqual(response.status_code, 400)
        self.assertIn("endReading", response.json()["fields"])
        self.assertFalse(Odometer.objects.exists())


class VehicleProfileApiTests(ApiTestCase):
    def _create(self, label, is_default=False):
        return self.post_json("/api/vehicle-profiles", {"label": label, "vehicleType": "EV", "isDefault": is_default}).json()

    def test_only_one_default(self):
        first = self._create("Leaf", True)
        second = self._create("Zoe", True)
        defaults = VehicleProfile.objects.filter(user=self.user, is_default=True)
        self.assertEqual([str(v.id) for v in defaults], [second["id"]])
        self.assertFalse(VehicleProfile.objects.get(pk=first["id"]).is_default)

    def test_deleting_the_default_promotes_nothing(self):
        self._create("Spare")
        default = self._create("Leaf", True)
        self.delete_json("/api/vehicle-profiles", {"id": default["id"]})
        self.assertEqual(VehicleProfile.objects.filter(user=self.user, is_default=True).count(), 0)
        self.assertEqual(VehicleProfile.objects.filter(user=self.user).count(), 1)

    def test_deleting_a_vehicle_detaches_its_logs(self):
        vehicle = self._create("Leaf")
        self.post_json("/api/expenses", {"expenseType": "tolls", "amountMinor": 100, "paidAt": "2024-03-01",
                                         "vehicleProfileId": vehicle["id"]})
        self.assertEqual(self.client.get("/api/expenses").json()[0]["vehicle"]["label"], "Leaf")

        self.delete_json("/api/vehicle-profiles", {"id": vehicle["id"]})
        row = self.client.get("/api/expenses").json()[0]
        self.assertIsNone(row["vehicleProfileId"])
        self.assertIsNone(row["vehicle"])


class ChargingVendorApiTests(ApiTestCase):
    def test_create_and_rate_alias(self):
        response = self.post_json("/api/charging-vendors", {"label": "Ionity", "rate": 69, "unitRateUnit": "kwh"})
        self.assertEqual(response.status_code, 201)
        vendor = response.json()
        self.assertEqual(vendor["unitRateMinor"], 69)

        self.patch_json("/api/charging-vendors", {"id": vendor["id"], "unitRateMinor": 79})
        self.assertEqual(ChargingVendor.objects.get(pk=vendor["id"]).unit_rate_minor, 79)

    def test_only_kwh(self):
        response = self.post_json("/api/charging-vendors", {"label": "Shell", "unitRateMinor": 150, "unitRateUnit": "litre"})
        self.assertEqual(response.status_code, 400)
