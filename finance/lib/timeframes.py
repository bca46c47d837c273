# finance/lib/timeframes.py
# ─────────────────────────────────────────────────────────────────────────────
# 🗓️ Named timeframes → inclusive [start, end] datetime windows.
#    Everything here is pure: callers pass the reference instant `now`.
# ─────────────────────────────────────────────────────────────────────────────

from datetime import date, datetime, time, timedelta

from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

WEEKLY = "weekly"
MONTHLY = "monthly"
YEAR_TO_DATE = "yearToDate"
LAST_12_MONTHS = "last12Months"
TODAY = "today"

TIMEFRAME_OPTIONS = [
    (WEEKLY, "Weekly"),
    (MONTHLY, "Monthly"),
    (YEAR_TO_DATE, "Year to date"),
    (LAST_12_MONTHS, "Last 12 months"),
]

TIMEFRAME_KEYS = {key for key, _ in TIMEFRAME_OPTIONS} | {TODAY}


def local_now() -> datetime:
    """Naive local wall-clock time; the default reference instant."""
    return timezone.localtime().replace(tzinfo=None)


def parse_entry_date(value):
    """
    Turn a stored date into a naive datetime.
    Accepts date, datetime or ISO strings; anything else (or garbage) → None.
    """
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime.combine(value, time.min)
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    try:
        parsed = parse_datetime(text)
        if parsed is not None:
            return parsed.replace(tzinfo=None)
        day = parse_date(text)
    except ValueError:                                         # well-formed but impossible (e.g. Feb 30)
        return None
    if day is None:
        return None
    return datetime.combine(day, time.min)


def day_key(value):
    """Grouping key for a day: ISO date for date objects, the raw text otherwise."""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return "" if value is None else str(value)


def start_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.min)


def end_of_day(moment: datetime) -> datetime:
    return datetime.combine(moment.date(), time.max)


def shift_month(year: int, month: int, delta: int) -> tuple[int, int]:
    """Move (year, month) by `delta` months; month is 1-12."""
    index = year * 12 + (month - 1) + delta
    new_year, new_month0 = divmod(index, 12)
    return new_year, new_month0 + 1


def _naive(now):
    if isinstance(now, datetime):
        return now.replace(tzinfo=None)
    return datetime.combine(now, time.min)


def recent_days_range(days: int, now) -> tuple[datetime, datetime]:
    """Last `days` calendar days including today."""
    now = _naive(now)
    start = start_of_day(now) - timedelta(days=max(days, 1) - 1)
    return start, end_of_day(now)


def resolve_timeframe(key, now):
    """
    Map a timeframe key to an inclusive (start, end) window around `now`.
    Unknown keys → None, meaning "do not filter".
    """
    now = _naive(now)
    if key in (TODAY, WEEKLY):
        return recent_days_range(7, now)
    if key == MONTHLY:
        return datetime(now.year, now.month, 1), end_of_day(now)
    if key == YEAR_TO_DATE:
        return datetime(now.year, 1, 1), end_of_day(now)
    if key == LAST_12_MONTHS:
        year, month = shift_month(now.year, now.month, -11)
        return datetime(year, month, 1), end_of_day(now)
    return None


def filter_between(entries, start, end, date_of):
    """Keep entries whose parsed date lies in [start, end]; unparsable dates are dropped."""
    kept = []
    for entry in entries:
        moment = parse_entry_date(date_of(entry))
        if moment is None:
            continue
        if start <= moment <= end:
            kept.append(entry)
    return kept


def entries_for_timeframe(entries, key, now, date_of):
    window = resolve_timeframe(key, now)
    if window is None:
        return list(entries)
    return filter_between(entries, window[0], window[1], date_of)


def entries_in_month(entries, year: int, month: int, date_of):
    kept = []
    for entry in entries:
        moment = parse_entry_date(date_of(entry))
        if moment is not None and moment.year == year and moment.month == month:
            kept.append(entry)
    return kept
