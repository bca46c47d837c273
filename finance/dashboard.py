# finance/dashboard.py
# ─────────────────────────────────────────────────────────────────────────────
# 📊 Dashboard payload.
#    Everything is recomputed from the user's full entry lists on each call
#    (nothing derived is stored). Raw numbers go out next to their display
#    strings so the client never has to repeat the formatting rules.
# ─────────────────────────────────────────────────────────────────────────────

from .lib import expenses as expense_lib
from .lib import income as income_lib
from .lib import metrics
from .lib.currency import format_currency, format_per_unit
from .lib.odometer import convert_distance, format_distance, per_distance, unit_suffix
from .lib.timeframes import MONTHLY, TIMEFRAME_KEYS, TIMEFRAME_OPTIONS


def resolve_timeframe_key(value, default=MONTHLY):
    """Query-string timeframe → known key (unknown or blank → default)."""
    return value if value in TIMEFRAME_KEYS else default


def _daily_summary_json(summary):
    return {
        "date": summary["date"],
        "total": summary["total"],
        "entries": [entry.as_json() for entry in summary["entries"]],
        "breakdown": summary["breakdown"],
    }


def _monthly_json(buckets):
    return [
        {"label": b["label"], "year": b["year"], "month": b["month"], "total": b["total"]}
        for b in buckets
    ]


def _distribution_json(rows, key_name):
    return [
        {key_name: row[key_name], "amount": row["amount"], "percentage": row["percentage"]}
        for row in rows
    ]


def _driving_json(stats, currency, unit):
    label = unit_suffix(unit)
    ratios = {
        name: per_distance(stats[name], unit)
        for name in ("cost_per_distance", "fuel_spend_per_distance",
                     "profit_per_distance", "income_per_distance")
    }
    return {
        "unit": unit,
        "lifetimeDistance": convert_distance(stats["lifetime_distance"], unit),
        "distanceThisMonth": convert_distance(stats["distance_this_month"], unit),
        "entriesThisMonth": stats["entries_this_month"],
        "averageDistancePerLog": convert_distance(stats["average_distance_per_log"], unit),
        "netProfit": stats["net_profit"],
        "costPerDistance": ratios["cost_per_distance"],
        "fuelSpendPerDistance": ratios["fuel_spend_per_distance"],
        "profitPerDistance": ratios["profit_per_distance"],
        "incomePerDistance": ratios["income_per_distance"],
        "display": {
            "lifetimeDistance": format_distance(stats["lifetime_distance"], unit),
            "distanceThisMonth": format_distance(stats["distance_this_month"], unit),
            "netProfit": format_currency(stats["net_profit"], currency),
            "costPerDistance": format_per_unit(ratios["cost_per_distance"], currency, label),
            "fuelSpendPerDistance": format_per_unit(ratios["fuel_spend_per_distance"], currency, label),
            "profitPerDistance": format_per_unit(ratios["profit_per_distance"], currency, label),
            "incomePerDistance": format_per_unit(ratios["income_per_distance"], currency, label),
        },
    }


def build_dashboard(incomes, expenses, odometers, *, timeframe, now, currency, unit, months=6):
    """
    Assemble every dashboard panel.
      incomes / expenses / odometers – the user's full entry lists
      timeframe – key for the timeframe-scoped panels
      now       – naive local "now"
      currency  – ISO code for display strings
      unit      – odometer display unit (km / miles)
    """
    daily = income_lib.aggregate_daily_incomes(incomes)
    scoped_incomes = income_lib.incomes_for_timeframe(incomes, timeframe, now)
    month_incomes = income_lib.current_month_entries(incomes, now)
    distribution = income_lib.platform_distribution(scoped_incomes)
    concentration = income_lib.platform_concentration(distribution)
    cadence = income_lib.daily_cadence(daily, now)

    overview = expense_lib.expense_overview(expenses, timeframe, now)
    profit = metrics.profitability(incomes, expenses, timeframe, now)
    fuel_cost = per_distance(
        metrics.fuel_cost_per_distance_for_timeframe(expenses, odometers, timeframe, now), unit
    )
    consumption = expense_lib.fuel_consumption(expenses)

    return {
        "timeframe": timeframe,
        "timeframes": [{"key": key, "label": label} for key, label in TIMEFRAME_OPTIONS],
        "currency": currency,
        "income": {
            "total": income_lib.total_income(incomes),
            "timeframeTotal": income_lib.total_income(scoped_incomes),
            "monthTotal": income_lib.total_income(month_incomes),
            "entryCount": len(incomes),
            "recentDays": [_daily_summary_json(s) for s in income_lib.recent_days(daily)],
            "cadence": {
                "longestStreak": cadence["longest_streak"],
                "daysThisWeek": cadence["days_this_week"],
                "totalLoggedDays": cadence["total_logged_days"],
            },
            "platformDistribution": _distribution_json(distribution, "platform"),
            "platformConcentration": {
                "topPlatforms": _distribution_json(concentration["top_platforms"], "platform"),
                "topShare": concentration["top_share"],
                "totalPlatforms": concentration["total_platforms"],
            },
            "monthlyTotals": _monthly_json(income_lib.monthly_totals(incomes, months, now)),
            "yearlyTotals": _monthly_json(income_lib.yearly_monthly_totals(incomes, now)),
        },
        "expenses": {
            "total": overview["total"],
            "trackedDays": overview["tracked_days"],
            "averagePerDay": overview["average_per_day"],
            "entryCount": overview["entry_count"],
            "categories": [
                {
                    "expenseType": row["expense_type"],
                    "label": expense_lib.expense_type_label(row["expense_type"]),
                    "amount": row["amount"],
                    "percentage": row["percentage"],
                }
                for row in overview["categories"]
            ],
            "monthlyTotals": _monthly_json(expense_lib.monthly_expense_totals(expenses, months, now)),
            "fuelConsumption": {
                "rows": consumption["rows"],
                "entriesWithRate": consumption["entries_with_rate"],
                "entryCount": consumption["entry_count"],
            },
            "fuelCostPerDistance": fuel_cost,
        },
        "profitability": {
            "totalIncome": profit["total_income"],
            "totalExpenses": profit["total_expenses"],
            "netProfit": profit["net_profit"],
            "profitMargin": profit["profit_margin"],
            "expenseRatio": profit["expense_ratio"],
            "display": {
                "totalIncome": format_currency(profit["total_income"], currency),
                "totalExpenses": format_currency(profit["total_expenses"], currency),
                "netProfit": format_currency(profit["net_profit"], currency),
            },
        },
        "driving": _driving_json(metrics.driving_stats(incomes, expenses, odometers, now), currency, unit),
    }
