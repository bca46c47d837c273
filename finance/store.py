# finance/store.py
# ─────────────────────────────────────────────────────────────────────────────
# 🗄️ Per-user entry store on top of Django's cache framework.
#    Reads load a whole entry list (the aggregators want everything anyway)
#    and keep it under (user, resource). Writes never patch a cached list:
#    a mutation invalidates the resource plus everything listed for it in
#    INVALIDATES, and the next read reloads from the database.
# ─────────────────────────────────────────────────────────────────────────────

import logging

from django.conf import settings
from django.core.cache import cache as default_cache

from .models import ChargingVendor, Expense, Income, Odometer, VehicleProfile

logger = logging.getLogger(__name__)

INCOMES = "incomes"
EXPENSES = "expenses"
ODOMETERS = "odometers"
VEHICLE_PROFILES = "vehicle_profiles"
CHARGING_VENDORS = "charging_vendors"

# 🔗 mutated resource → cached resources that must be dropped
#    (expense and odometer payloads embed the vehicle label)
INVALIDATES = {
    INCOMES: (INCOMES,),
    EXPENSES: (EXPENSES,),
    ODOMETERS: (ODOMETERS,),
    VEHICLE_PROFILES: (VEHICLE_PROFILES, EXPENSES, ODOMETERS),
    CHARGING_VENDORS: (CHARGING_VENDORS,),
}

RESOURCE_FOR_MODEL = {
    Income: INCOMES,
    Expense: EXPENSES,
    Odometer: ODOMETERS,
    VehicleProfile: VEHICLE_PROFILES,
    ChargingVendor: CHARGING_VENDORS,
}

LOADERS = {
    INCOMES: lambda user_id: Income.objects.filter(user_id=user_id).order_by("-date", "-created_at"),
    EXPENSES: lambda user_id: (Expense.objects.filter(user_id=user_id)
                               .select_related("vehicle_profile")
                               .order_by("-paid_at", "-created_at")),
    ODOMETERS: lambda user_id: (Odometer.objects.filter(user_id=user_id)
                                .select_related("vehicle_profile")
                                .order_by("-date", "-created_at")),
    VEHICLE_PROFILES: lambda user_id: VehicleProfile.objects.filter(user_id=user_id).order_by("-created_at"),
    CHARGING_VENDORS: lambda user_id: ChargingVendor.objects.filter(user_id=user_id).order_by("label"),
}


def cache_key(user_id, resource) -> str:
    return f"gigfin:{user_id}:{resource}"


def dependents(resource):
    """Everything a mutation of `resource` makes stale."""
    try:
        return INVALIDATES[resource]
    except KeyError:
        raise ValueError(f"Unknown resource: {resource}")


class EntryStore:
    """Cached, owner-scoped entry lists for one user."""

    def __init__(self, user_id, cache=None, timeout=None):
        self.user_id = user_id
        self.cache = cache or default_cache
        self.timeout = timeout if timeout is not None else settings.GIGFIN["STORE_TIMEOUT"]

    def get(self, resource):
        if resource not in LOADERS:
            raise ValueError(f"Unknown resource: {resource}")
        key = cache_key(self.user_id, resource)
        entries = self.cache.get(key)
        if entries is None:
            entries = list(LOADERS[resource](self.user_id))
            self.cache.set(key, entries, self.timeout)
        return entries

    def invalidate(self, resource):
        stale = dependents(resource)
        self.cache.delete_many([cache_key(self.user_id, name) for name in stale])
        logger.debug("Invalidated %s for user %s", ", ".join(stale), self.user_id)

    # 🧰 convenience accessors
    def incomes(self):
        return self.get(INCOMES)

    def expenses(self):
        return self.get(EXPENSES)

    def odometers(self):
        return self.get(ODOMETERS)

    def vehicle_profiles(self):
        return self.get(VEHICLE_PROFILES)

    def charging_vendors(self):
        return self.get(CHARGING_VENDORS)


def invalidate_for(user_id, resource):
    EntryStore(user_id).invalidate(resource)
