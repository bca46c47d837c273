# finance/logs.py
# ─────────────────────────────────────────────────────────────────────────────
# 📋 The four log views (incomes, expenses, odometers, combined).
#    Each one is a FilterableCollection configured with its own filters and
#    sort keys; the view turns the query string into a TableState and the
#    resulting Page into JSON.
# ─────────────────────────────────────────────────────────────────────────────

from collections import namedtuple

from .lib import expenses as expense_lib
from .lib import income as income_lib
from .lib import grouping
from .lib.collection import ALL, ASC, DESC, FilterableCollection, TableState, match_field
from .lib.odometer import odometer_date, odometer_distance
from .lib.timeframes import day_key

INCOMES = "incomes"
EXPENSES = "expenses"
ODOMETERS = "odometers"
COMBINED = "combined"

LOG_KINDS = (INCOMES, EXPENSES, ODOMETERS, COMBINED)

# A row of the combined log: kind is "income", "expense" or "odometer".
CombinedRow = namedtuple("CombinedRow", ["kind", "date", "entry"])


def _vehicle_of(entry):
    return entry.vehicle_profile_id


def income_collection(page_size):
    # ✅ filters run on raw entries, then rows collapse into daily summaries
    return FilterableCollection(
        date_of=income_lib.income_date,
        filters={"platform": match_field(income_lib.income_platform)},
        sorters={
            "date": lambda summary: summary["date"],
            "total": lambda summary: summary["total"],
        },
        group=income_lib.aggregate_daily_incomes,
        page_size=page_size,
    )


def expense_collection(page_size):
    return FilterableCollection(
        date_of=expense_lib.expense_date,
        filters={
            "type": match_field(expense_lib.expense_category),
            "vehicle": match_field(_vehicle_of),
        },
        sorters={
            "date": lambda entry: (day_key(entry.paid_at), entry.created_at),
            "type": lambda entry: expense_lib.expense_type_label(entry.expense_type),
            "amount": lambda entry: entry.amount_minor,
        },
        page_size=page_size,
    )


def odometer_collection(page_size):
    return FilterableCollection(
        date_of=odometer_date,
        filters={"vehicle": match_field(_vehicle_of)},
        sorters={
            "date": lambda entry: (day_key(entry.date), entry.created_at),
            "distance": odometer_distance,
        },
        page_size=page_size,
    )


def combined_collection(page_size):
    return FilterableCollection(
        date_of=lambda row: row.date,
        filters={
            "type": match_field(lambda row: row.kind),
            # incomes carry no vehicle, so an active vehicle filter drops them
            "vehicle": match_field(lambda row: getattr(row.entry, "vehicle_profile_id", None)),
        },
        sorters={"date": lambda row: (day_key(row.date), row.entry.created_at)},
        page_size=page_size,
    )


COLLECTIONS = {
    INCOMES: income_collection,
    EXPENSES: expense_collection,
    ODOMETERS: odometer_collection,
    COMBINED: combined_collection,
}


def combined_rows(incomes, expenses, odometers):
    """Every entry as a CombinedRow, newest day first then newest created."""
    rows = (
        [CombinedRow("income", entry.date, entry) for entry in incomes]
        + [CombinedRow("expense", entry.paid_at, entry) for entry in expenses]
        + [CombinedRow("odometer", entry.date, entry) for entry in odometers]
    )
    return sorted(rows, key=lambda row: (day_key(row.date), row.entry.created_at), reverse=True)


def state_from_query(query, filter_names):
    """Query string → TableState. Filters accept repeated keys (?platform=a&platform=b)."""
    try:
        page = int(query.get("page", 1))
    except (TypeError, ValueError):
        page = 1

    direction = query.get("direction", DESC)
    filters = {}
    for name in filter_names:
        values = [value for value in query.getlist(name) if value not in ("", ALL)]
        if values:
            filters[name] = values if len(values) > 1 else values[0]

    return TableState(
        month=query.get("month") or ALL,
        filters=filters,
        sort=query.get("sort") or None,
        direction=direction if direction in (ASC, DESC) else DESC,
        page=page,
    )


def _row_json(kind, item):
    if kind == INCOMES:
        return {
            "date": item["date"],
            "total": item["total"],
            "entries": [entry.as_json() for entry in item["entries"]],
            "breakdown": item["breakdown"],
        }
    if kind == COMBINED:
        return {"type": item.kind, "date": day_key(item.date), "entry": item.entry.as_json()}
    return item.as_json()


def _month_options(kind, entries, now):
    if kind == INCOMES:
        return income_lib.month_options(entries, span=12, now=now)
    if kind == EXPENSES:
        return expense_lib.month_options(entries)
    if kind == ODOMETERS:
        return grouping.month_options(odometer_date(entry) for entry in entries)
    return grouping.month_options(row.date for row in entries)


def _filter_options(kind, entries):
    if kind == INCOMES:
        return {"platform": income_lib.platform_options(entries)}
    if kind == EXPENSES:
        return {"type": [{"value": value, "label": label} for value, label in expense_lib.EXPENSE_TYPES]}
    if kind == COMBINED:
        return {"type": ["income", "expense", "odometer"]}
    return {}


def build_log(kind, entries, query, now, page_size):
    """Filter → sort → paginate one log and describe the result as JSON."""
    collection = COLLECTIONS[kind](page_size)
    state = state_from_query(query, list(collection.filters))
    page = collection.apply(entries, state)
    return {
        "kind": kind,
        "items": [_row_json(kind, item) for item in page.items],
        "page": page.page,
        "totalPages": page.total_pages,
        "totalItems": page.total_items,
        "pageSize": page.page_size,
        "hasPrevious": page.has_previous,
        "hasNext": page.has_next,
        "state": {
            "month": state.month,
            "filters": state.filters,
            "sort": state.sort,
            "direction": state.direction,
        },
        "monthOptions": [
            {"key": option["key"], "label": option["label"]}
            for option in _month_options(kind, entries, now)
        ],
        "filterOptions": _filter_options(kind, entries),
    }
