from datetime import date
from decimal import Decimal

from django.core.cache import cache
from django.core.cache.backends.db import DatabaseCache
from django.test import TestCase

from finance import store
from finance.models import Expense, Income, VehicleProfile
from .helpers import make_user

SHARED_CACHE = {
    "default": {
        "BACKEND": "django.core.cache.backends.db.DatabaseCache",
        "LOCATION": "gigfin_cache",
    }
}


class EntryStoreTests(TestCase):
    def setUp(self):
        self.user = make_user()
        self.other = make_user("other")
        self.entries = store.EntryStore(self.user.pk)

    def test_lists_are_owner_scoped_and_ordered(self):
        Income.objects.create(user=self.user, platform="Uber", amount=Decimal("10"), date=date(2024, 1, 1))
        Income.objects.create(user=self.user, platform="Lyft", amount=Decimal("20"), date=date(2024, 1, 3))
        Income.objects.create(user=self.other, platform="Bolt", amount=Decimal("5"), date=date(2024, 1, 2))
        self.assertEqual([i.platform for i in self.entries.incomes()], ["Lyft", "Uber"])

    def test_reads_come_from_cache_until_invalidated(self):
        Income.objects.create(user=self.user, platform="Uber", amount=Decimal("10"), date=date(2024, 1, 1))
        self.assertEqual(len(self.entries.incomes()), 1)

        # a bulk update bypasses signals, so the cached list is still served
        Income.objects.filter(user=self.user).update(platform="Changed")
        self.assertEqual(self.entries.incomes()[0].platform, "Uber")

        self.entries.invalidate(store.INCOMES)
        self.assertEqual(self.entries.incomes()[0].platform, "Changed")

    def test_saves_invalidate_through_signals(self):
        self.assertEqual(self.entries.incomes(), [])
        Income.objects.create(user=self.user, platform="Uber", amount=Decimal("10"), date=date(2024, 1, 1))
        self.assertEqual(len(self.entries.incomes()), 1)

    def test_vehicle_change_invalidates_dependent_lists(self):
        vehicle = VehicleProfile.objects.create(user=self.user, label="Leaf", vehicle_type="EV")
        Expense.objects.create(user=self.user, expense_type="parking", amount_minor=300,
                               paid_at=date(2024, 1, 1), vehicle_profile=vehicle)
        self.assertEqual(self.entries.expenses()[0].vehicle_profile.label, "Leaf")

        vehicle.label = "Blue Leaf"
        vehicle.save()
        self.assertEqual(self.entries.expenses()[0].vehicle_profile.label, "Blue Leaf")

    def test_invalidation_map(self):
        self.assertEqual(
            set(store.dependents(store.VEHICLE_PROFILES)),
            {store.VEHICLE_PROFILES, store.EXPENSES, store.ODOMETERS},
        )
        self.assertEqual(store.dependents(store.INCOMES), (store.INCOMES,))
        with self.assertRaises(ValueError):
            store.dependents("nope")

    def test_keys_are_per_user(self):
        self.entries.incomes()
        self.assertIsNotNone(cache.get(store.cache_key(self.user.pk, store.INCOMES)))
        self.assertIsNone(cache.get(store.cache_key(self.other.pk, store.INCOMES)))


class SharedCacheTests(TestCase):
    """Two stores on separate cache connections stand in for two worker processes."""

    def setUp(self):
        self.user = make_user()

    def test_write_in_one_worker_is_seen_by_another(self):
        with self.settings(CACHES=SHARED_CACHE):
            other_worker = store.EntryStore(self.user.pk, cache=DatabaseCache("gigfin_cache", {}))
            self.assertEqual(other_worker.incomes(), [])

            Income.objects.create(user=self.user, platform="Uber", amount=Decimal("10"), date=date(2024, 1, 1))
            self.assertEqual(len(other_worker.incomes()), 1)
