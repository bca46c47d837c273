# finance/lib/income.py
# ─────────────────────────────────────────────────────────────────────────────
# 💰 Income aggregation: daily rollups, platform shares, monthly series and
#    the small dashboard panels built on top of them.
#    Entries are any objects exposing `.date`, `.platform` and `.amount`.
# ─────────────────────────────────────────────────────────────────────────────

from datetime import timedelta

from . import grouping
from .timeframes import day_key, entries_for_timeframe, entries_in_month, parse_entry_date, start_of_day


def income_date(entry):
    return entry.date


def income_amount(entry) -> float:
    return float(entry.amount or 0)


def income_platform(entry):
    return entry.platform


def sum_by_platform(entries):
    return grouping.sum_by(entries, income_platform, income_amount, key_name="platform")


def total_income(entries) -> float:
    return sum(income_amount(entry) for entry in entries)


def aggregate_daily_incomes(entries):
    """
    One summary per distinct day: {date, total, entries, breakdown}.
    Days are sorted newest first; the breakdown is per platform, largest first.
    """
    by_day = {}
    for entry in entries:
        by_day.setdefault(day_key(income_date(entry)), []).append(entry)

    summaries = []
    for day, rows in by_day.items():
        breakdown = sorted(sum_by_platform(rows), key=lambda row: row["amount"], reverse=True)
        summaries.append({
            "date": day,
            "total": total_income(rows),
            "entries": rows,
            "breakdown": breakdown,
        })
    return sorted(summaries, key=lambda summary: summary["date"], reverse=True)


def platform_distribution(entries):
    """[{platform, amount, percentage}] sorted by amount, largest first."""
    return grouping.distribution(entries, income_platform, income_amount, key_name="platform")


def incomes_for_timeframe(entries, key, now):
    return entries_for_timeframe(entries, key, now, income_date)


def current_month_entries(entries, now):
    return entries_in_month(entries, now.year, now.month, income_date)


def monthly_totals(entries, months=6, now=None):
    """`months` zero-filled buckets counting back from now's month, newest first."""
    return grouping.rolling_month_buckets(entries, months, now, income_date, income_amount)


def yearly_monthly_totals(entries, now=None):
    return grouping.calendar_year_buckets(entries, now, income_date, income_amount)


def month_options(entries, span=12, now=None):
    return grouping.month_options((income_date(entry) for entry in entries), span=span, now=now)


def platform_options(entries):
    return sorted({income_platform(entry) for entry in entries})


def recent_days(summaries, count=3):
    return summaries[:count]


def daily_cadence(summaries, now):
    """
    How regularly income gets logged:
      • longest_streak  – most consecutive calendar days with an entry
      • days_this_week  – logged days within the last 7 days
      • total_logged_days
    """
    days = sorted({
        start_of_day(moment)
        for moment in (parse_entry_date(summary["date"]) for summary in summaries)
        if moment is not None
    })

    best = streak = 0
    previous = None
    for day in days:
        streak = streak + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        best = max(best, streak)
        previous = day

    today = start_of_day(now)
    week_start = today - timedelta(days=6)
    return {
        "longest_streak": best,
        "days_this_week": sum(1 for day in days if week_start <= day <= today),
        "total_logged_days": len(days),
    }


def platform_concentration(distribution, top=3):
    """Share of income taken by the `top` largest platforms."""
    leaders = distribution[:top]
    return {
        "top_platforms": leaders,
        "top_share": sum(row["percentage"] for row in leaders),
        "total_platforms": len(distribution),
    }
