# finance/lib/currency.py
# 💷 Supported currencies and display formatting.

DEFAULT_CURRENCY = "GBP"

CURRENCY_CHOICES = [
    ("GBP", "GBP · Pound sterling"),
    ("USD", "USD · US dollar"),
    ("EUR", "EUR · Euro"),
]

_CURRENCY_SYMBOLS = {"GBP": "£", "USD": "$", "EUR": "€"}

UNAVAILABLE_LABEL = "—"


def resolve_currency(value) -> str:
    """Normalise a user-supplied code; anything unknown falls back to GBP."""
    if not isinstance(value, str):
        return DEFAULT_CURRENCY
    code = value.strip().upper()
    return code if code in _CURRENCY_SYMBOLS else DEFAULT_CURRENCY


def currency_symbol(code: str = DEFAULT_CURRENCY) -> str:
    return _CURRENCY_SYMBOLS.get(code, code)


def format_currency(value, code: str = DEFAULT_CURRENCY) -> str:
    """'£1,234.50' / '-£12.00'."""
    amount = float(value)
    sign = "-" if amount < 0 else ""
    return f"{sign}{currency_symbol(code)}{abs(amount):,.2f}"


def format_per_unit(value, code: str, unit_label: str) -> str:
    """'£0.42/km', or an em dash when the ratio is unavailable."""
    if value is None:
        return UNAVAILABLE_LABEL
    return f"{format_currency(value, code)}/{unit_label}"
