# finance/exports.py
# 📄 CSV builders for the export endpoints. Every cell is double-quoted;
#    embedded quotes are doubled by the csv module.

import csv
from io import StringIO

from .lib.timeframes import day_key

INCOME_HEADER = ["Date", "Platform", "Amount", "Created At", "Entry ID"]

EXPENSE_HEADER = [
    "Date", "Expense type", "Amount", "Unit rate minor", "Unit rate unit",
    "Vehicle label", "Notes", "Details JSON", "Created At", "Entry ID",
]

COMBINED_HEADER = [
    "Type", "Date", "Platform / Expense type", "Amount", "Vehicle label", "Notes",
    "Unit rate minor", "Unit rate unit", "Details JSON", "Created At", "Entry ID",
]

INCOME_FILENAME = "gigfin-income-export.csv"
EXPENSE_FILENAME = "gigfin-expense-export.csv"
COMBINED_FILENAME = "gigfin-data-export.csv"


def _cell(value):
    if value is None:
        return ""
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


def _minor(value):
    return "" if value is None else f"{value / 100:.2f}"


def _vehicle_label(entry):
    return entry.vehicle_profile.label if entry.vehicle_profile_id else ""


def write_csv(header, rows) -> str:
    buffer = StringIO()                                          # 🧰 in-memory text buffer
    writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")
    writer.writerow(header)
    for row in rows:
        writer.writerow([_cell(value) for value in row])
    return buffer.getvalue()


def income_rows(incomes):
    for entry in incomes:
        yield [entry.date, entry.platform, f"{entry.amount:.2f}", entry.created_at, entry.id]


def expense_rows(expenses):
    for entry in expenses:
        yield [
            entry.paid_at,
            entry.expense_type,
            _minor(entry.amount_minor),
            entry.unit_rate_minor,
            entry.unit_rate_unit,
            _vehicle_label(entry),
            entry.notes,
            entry.details_json,
            entry.created_at,
            entry.id,
        ]


def combined_rows(incomes, expenses):
    """Incomes and expenses interleaved, newest day first then newest created."""
    rows = [
        (entry.date, entry.created_at,
         ["Income", entry.date, entry.platform, f"{entry.amount:.2f}", "", "", "", "", "",
          entry.created_at, entry.id])
        for entry in incomes
    ] + [
        (entry.paid_at, entry.created_at,
         ["Expense", entry.paid_at, entry.expense_type, _minor(entry.amount_minor),
          _vehicle_label(entry), entry.notes, entry.unit_rate_minor, entry.unit_rate_unit,
          entry.details_json, entry.created_at, entry.id])
        for entry in expenses
    ]
    rows.sort(key=lambda row: (day_key(row[0]), row[1]), reverse=True)
    return [row for _, _, row in rows]


def income_csv(incomes) -> str:
    return write_csv(INCOME_HEADER, income_rows(incomes))


def expense_csv(expenses) -> str:
    return write_csv(EXPENSE_HEADER, expense_rows(expenses))


def combined_csv(incomes, expenses) -> str:
    return write_csv(COMBINED_HEADER, combined_rows(incomes, expenses))
