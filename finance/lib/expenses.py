# finance/lib/expenses.py
# ─────────────────────────────────────────────────────────────────────────────
# 💸 Expense aggregation. Entries expose `.paid_at`, `.expense_type`,
#    `.amount_minor` (integer pennies/cents), `.unit_rate_minor`,
#    `.unit_rate_unit` and `.vehicle_profile_id`.
# ─────────────────────────────────────────────────────────────────────────────

from . import grouping
from .timeframes import day_key, entries_for_timeframe, entries_in_month

FUEL_CHARGING = "fuel_charging"

EXPENSE_TYPES = [
    (FUEL_CHARGING, "Fuel / Charging"),
    ("maintenance", "Maintenance / Servicing"),
    ("repairs", "Repairs"),
    ("tyres", "Tyres"),
    ("cleaning", "Cleaning / Car wash"),
    ("insurance", "Insurance"),
    ("road_tax", "Road tax / registration"),
    ("mot", "MOT / inspections"),
    ("parking", "Parking (paid)"),
    ("tolls", "Tolls / bridges / ferries"),
    ("congestion", "Congestion / clean-air charges"),
    ("phone", "Phone / data"),
    ("equipment", "Equipment (mounts, cables, power banks, bags)"),
    ("platform_fees", "Platform fees / subscriptions / cashout fees"),
    ("fines", "Fines / penalties"),
    ("finance", "Finance / lease / loan interest"),
    ("depreciation", "Depreciation / vehicle purchase"),
]

UNIT_RATE_UNITS = [
    ("kwh", "kWh"),
    ("litre", "litre"),
    ("gallon_us", "gallon (US)"),
    ("gallon_imp", "gallon (Imperial)"),
]

_EXPENSE_TYPE_LABELS = dict(EXPENSE_TYPES)
_UNIT_LABELS = dict(UNIT_RATE_UNITS)


def expense_type_label(value) -> str:
    return _EXPENSE_TYPE_LABELS.get(value, value)


def unit_label(value) -> str:
    return _UNIT_LABELS.get(value, value)


def expense_date(entry):
    return entry.paid_at


def expense_amount(entry) -> float:
    """Major currency units (amount_minor / 100)."""
    return (entry.amount_minor or 0) / 100


def expense_category(entry):
    return entry.expense_type


def is_fuel(entry) -> bool:
    return entry.expense_type == FUEL_CHARGING


def total_expenses(entries) -> float:
    return sum(expense_amount(entry) for entry in entries)


def expenses_for_timeframe(entries, key, now):
    return entries_for_timeframe(entries, key, now, expense_date)


def current_month_expenses(entries, now):
    return entries_in_month(entries, now.year, now.month, expense_date)


def category_distribution(entries):
    """[{expense_type, amount, percentage}] sorted by amount, largest first."""
    return grouping.distribution(entries, expense_category, expense_amount, key_name="expense_type")


def monthly_expense_totals(entries, months=6, now=None):
    return grouping.rolling_month_buckets(entries, months, now, expense_date, expense_amount)


def month_options(entries, span=0, now=None):
    return grouping.month_options((expense_date(entry) for entry in entries), span=span, now=now)


def expense_overview(entries, key, now):
    """
    Spend summary for a timeframe:
      total, tracked_days (distinct paid days), average_per_day, categories.
    """
    scoped = expenses_for_timeframe(entries, key, now)
    total = total_expenses(scoped)
    tracked_days = len({day_key(expense_date(entry))[:10] for entry in scoped})
    return {
        "timeframe": key,
        "total": total,
        "tracked_days": tracked_days,
        "average_per_day": total / tracked_days if tracked_days else 0.0,
        "categories": category_distribution(scoped),
        "entry_count": len(scoped),
    }


def has_unit_rate(entry) -> bool:
    return bool(entry.unit_rate_minor) and entry.unit_rate_minor > 0 and bool(entry.unit_rate_unit)


def fuel_consumption(entries, vehicle_profile_id=None):
    """
    Energy/fuel bought per unit, derived as amount_minor / unit_rate_minor.
    Only entries carrying a positive unit rate count.
    """
    totals = {unit: 0.0 for unit, _ in UNIT_RATE_UNITS}
    with_rate = 0
    scoped = [entry for entry in entries
              if vehicle_profile_id in (None, "") or str(entry.vehicle_profile_id) == str(vehicle_profile_id)]
    for entry in scoped:
        if not has_unit_rate(entry):
            continue
        totals[entry.unit_rate_unit] = totals.get(entry.unit_rate_unit, 0.0) + entry.amount_minor / entry.unit_rate_minor
        with_rate += 1
    rows = [
        {"unit": unit, "label": unit_label(unit), "quantity": totals[unit]}
        for unit, _ in UNIT_RATE_UNITS
        if totals[unit] > 0
    ]
    return {"rows": rows, "entries_with_rate": with_rate, "entry_count": len(scoped)}


def format_expense_rate(entry) -> str:
    """'45p/kWh' style unit rate, or an em dash when no rate was recorded."""
    if not entry.unit_rate_minor or not entry.unit_rate_unit:
        return "—"
    return f"{entry.unit_rate_minor}p/{unit_label(entry.unit_rate_unit)}"
