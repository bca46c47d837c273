# finance/lib/odometer.py
# 🚗 Odometer helpers: distance per log and km/miles display conversion.

KM = "km"
MILES = "miles"

ODOMETER_UNITS = [(KM, "Kilometres"), (MILES, "Miles")]

MILES_PER_KM = 0.621371

_UNIT_SUFFIX = {KM: "km", MILES: "mi"}


def odometer_distance(entry) -> float:
    """Distance covered by one log (end - start)."""
    return float(entry.end_reading) - float(entry.start_reading)


def total_distance(entries) -> float:
    return sum(odometer_distance(entry) for entry in entries)


def odometer_date(entry):
    return entry.date


def convert_distance(value: float, unit: str = KM) -> float:
    """Readings are stored in km; convert for display."""
    return value if unit == KM else value * MILES_PER_KM


def unit_suffix(unit: str = KM) -> str:
    return _UNIT_SUFFIX.get(unit, unit)


def format_distance(value: float, unit: str = KM) -> str:
    return f"{convert_distance(value, unit):.2f} {unit_suffix(unit)}"


def unit_for_system(unit_system: str) -> str:
    """Profile unit system → odometer display unit."""
    return MILES if unit_system == "imperial" else KM


def per_distance(value, unit: str = KM):
    """A per-km ratio re-expressed per display unit; None stays None."""
    if value is None:
        return None
    return value / convert_distance(1.0, unit)
