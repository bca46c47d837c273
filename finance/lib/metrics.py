# finance/lib/metrics.py
# ─────────────────────────────────────────────────────────────────────────────
# 📐 Driving-cost ratios and profitability.
#    Every ratio goes through safe_ratio(): a zero or non-finite input gives
#    None ("unavailable") instead of NaN/inf leaking into the dashboard.
# ─────────────────────────────────────────────────────────────────────────────

import math

from . import expenses as expense_lib
from . import income as income_lib
from .odometer import odometer_date, total_distance
from .timeframes import entries_in_month, filter_between, parse_entry_date, resolve_timeframe

UNAVAILABLE = None


def _finite(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


def safe_ratio(numerator, denominator):
    """numerator / denominator, or UNAVAILABLE when that is not a real number."""
    if not _finite(numerator) or not _finite(denominator) or denominator == 0:
        return UNAVAILABLE
    result = numerator / denominator
    return result if math.isfinite(result) else UNAVAILABLE


def fuel_cost_per_distance(expenses, odometers, start, end):
    """
    Fuel/charging spend ÷ distance within [start, end].
    Only fuel expenses paid on a day that also has an odometer log count;
    with no such expense the figure is unavailable rather than zero.
    """
    logs = filter_between(odometers, start, end, odometer_date)
    logged_days = {parse_entry_date(odometer_date(entry)).date() for entry in logs}

    fuel_total = 0.0
    matched = 0
    for entry in filter_between(expenses, start, end, expense_lib.expense_date):
        if not expense_lib.is_fuel(entry):
            continue
        if parse_entry_date(expense_lib.expense_date(entry)).date() in logged_days:
            fuel_total += expense_lib.expense_amount(entry)
            matched += 1

    if not matched:
        return UNAVAILABLE
    return safe_ratio(fuel_total, total_distance(logs))


def fuel_cost_per_distance_for_timeframe(expenses, odometers, key, now):
    window = resolve_timeframe(key, now)
    if window is None:
        return UNAVAILABLE
    return fuel_cost_per_distance(expenses, odometers, *window)


def current_month_odometers(entries, now):
    return entries_in_month(entries, now.year, now.month, odometer_date)


def profit_per_distance(incomes, expenses, odometers, now):
    """(month income - month expenses) ÷ month distance."""
    net = (income_lib.total_income(income_lib.current_month_entries(incomes, now))
           - expense_lib.total_expenses(expense_lib.current_month_expenses(expenses, now)))
    return safe_ratio(net, total_distance(current_month_odometers(odometers, now)))


def income_per_distance(incomes, odometers, now):
    """month income ÷ month distance."""
    income_total = income_lib.total_income(income_lib.current_month_entries(incomes, now))
    return safe_ratio(income_total, total_distance(current_month_odometers(odometers, now)))


def cost_per_distance(expenses, odometers, now):
    """month expenses ÷ month distance."""
    expense_total = expense_lib.total_expenses(expense_lib.current_month_expenses(expenses, now))
    return safe_ratio(expense_total, total_distance(current_month_odometers(odometers, now)))


def driving_stats(incomes, expenses, odometers, now):
    """Everything the driving panel shows for the current month."""
    month_logs = current_month_odometers(odometers, now)
    month_distance = total_distance(month_logs)
    month_income = income_lib.total_income(income_lib.current_month_entries(incomes, now))
    month_expenses = expense_lib.current_month_expenses(expenses, now)
    month_expense_total = expense_lib.total_expenses(month_expenses)
    month_fuel_total = expense_lib.total_expenses([e for e in month_expenses if expense_lib.is_fuel(e)])
    net = month_income - month_expense_total

    return {
        "lifetime_distance": total_distance(odometers),
        "distance_this_month": month_distance,
        "entries_this_month": len(month_logs),
        "average_distance_per_log": month_distance / len(month_logs) if month_logs else 0.0,
        "net_profit": net,
        "cost_per_distance": cost_per_distance(expenses, odometers, now),
        "fuel_spend_per_distance": safe_ratio(month_fuel_total, month_distance),
        "profit_per_distance": profit_per_distance(incomes, expenses, odometers, now),
        "income_per_distance": income_per_distance(incomes, odometers, now),
    }


def profitability(incomes, expenses, key, now):
    """Net profit, margin and expense ratio for a timeframe."""
    income_total = income_lib.total_income(income_lib.incomes_for_timeframe(incomes, key, now))
    expense_total = expense_lib.total_expenses(expense_lib.expenses_for_timeframe(expenses, key, now))
    net = income_total - expense_total
    return {
        "timeframe": key,
        "total_income": income_total,
        "total_expenses": expense_total,
        "net_profit": net,
        "profit_margin": safe_ratio(net, income_total),
        "expense_ratio": safe_ratio(expense_total, income_total),
    }