# finance/lib/grouping.py
# 🧮 Shared folding helpers used by the income and expense aggregators.

from .timeframes import local_now, parse_entry_date, shift_month

MONTH_ABBR = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
              "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def month_label(year: int, month: int) -> str:
    """'Jan 2024' style label (month is 1-12)."""
    return f"{MONTH_ABBR[month - 1]} {year}"


def sum_by(entries, key_of, amount_of, key_name="key"):
    """
    Group entries by `key_of(entry)` and sum `amount_of(entry)`.
    Rows come back in first-seen order: [{key_name: ..., "amount": ...}, ...].
    """
    totals = {}
    for entry in entries:
        key = key_of(entry)
        totals[key] = totals.get(key, 0.0) + amount_of(entry)
    return [{key_name: key, "amount": amount} for key, amount in totals.items()]


def distribution(entries, key_of, amount_of, key_name="key"):
    """
    Grouped sums with each group's share of the total.
    Sorted by amount, largest first; equal amounts keep first-seen order.
    """
    rows = sum_by(entries, key_of, amount_of, key_name)
    total = sum(row["amount"] for row in rows)
    for row in rows:
        row["percentage"] = row["amount"] / total if total else 0.0
    return sorted(rows, key=lambda row: row["amount"], reverse=True)


def entry_month(value):
    """(year, month) of a stored date, or None when it cannot be parsed."""
    moment = parse_entry_date(value)
    if moment is None:
        return None
    return moment.year, moment.month


def month_totals_map(entries, date_of, amount_of):
    totals = {}
    for entry in entries:
        parsed = entry_month(date_of(entry))
        if parsed is None:
            continue
        totals[parsed] = totals.get(parsed, 0.0) + amount_of(entry)
    return totals


def rolling_month_buckets(entries, months, now, date_of, amount_of):
    """
    Exactly `months` buckets counting back from now's month (newest first),
    zero-filled where nothing was logged.
    """
    now = now or local_now()
    totals = month_totals_map(entries, date_of, amount_of)
    buckets = []
    for offset in range(max(months, 0)):
        year, month = shift_month(now.year, now.month, -offset)
        buckets.append({
            "label": month_label(year, month),
            "year": year,
            "month": month,
            "total": totals.get((year, month), 0.0),
        })
    return buckets


def calendar_year_buckets(entries, now, date_of, amount_of):
    """Twelve buckets, January to December of now's year."""
    now = now or local_now()
    totals = month_totals_map(entries, date_of, amount_of)
    year = now.year
    return [
        {
            "label": month_label(year, month),
            "year": year,
            "month": month,
            "total": totals.get((year, month), 0.0),
        }
        for month in range(1, 13)
    ]


def month_options(dates, span=0, now=None):
    """
    Distinct months present in `dates` (plus the last `span` months before now),
    newest first: [{"key": "2024-01", "label": "Jan 2024", "year": 2024, "month": 1}].
    """
    seen = {}

    def _add(year, month):
        key = f"{year:04d}-{month:02d}"
        if key not in seen:
            seen[key] = {"key": key, "label": month_label(year, month), "year": year, "month": month}

    for value in dates:
        parsed = entry_month(value)
        if parsed is not None:
            _add(*parsed)
    if now is not None:
        for offset in range(span):
            _add(*shift_month(now.year, now.month, -offset))
    return sorted(seen.values(), key=lambda option: (option["year"], option["month"]), reverse=True)
