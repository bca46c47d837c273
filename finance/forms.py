# finance/forms.py
# ─────────────────────────────────────────────────────────────────────────────
# All the input schemas for the Finance API live here.
# Each form validates one JSON payload *before* it reaches the models:
#   1) IncomeForm          – platform / amount / date
#   2) ExpenseForm         – type, minor-unit amount, optional fuel unit rate
#   3) OdometerForm        – start/end readings (end >= start)
#   4) VehicleProfileForm  – label, fuel type, default flag
#   5) ChargingVendorForm  – per-kWh tariff
#   6) EntryIdForm         – the `id` carried by PATCH/DELETE bodies
# Field names match the camelCase JSON keys the client sends.
# ─────────────────────────────────────────────────────────────────────────────

import json
import math
from decimal import Decimal, ROUND_HALF_UP

from django import forms                                  # ← Django form building blocks
from django.core.exceptions import ValidationError        # ← To raise user-friendly errors

from .lib.expenses import EXPENSE_TYPES, FUEL_CHARGING, UNIT_RATE_UNITS
from .lib.timeframes import parse_entry_date
from .models import (
    CHARGING_VENDOR_UNITS,
    VEHICLE_TYPES,
    ChargingVendor,
    Expense,
    Income,
    Odometer,
    VehicleProfile,
)


def _norm_text(value: str) -> str:
    """Return a neatly spaced version of the text (no double spaces)."""
    return " ".join((value or "").split())


# ─────────────────────────────────────────────────────────────────────────────
# Custom fields
# ─────────────────────────────────────────────────────────────────────────────
class IsoDateField(forms.DateField):
    """Accepts 'YYYY-MM-DD' or a full ISO timestamp and keeps the calendar day."""

    def to_python(self, value):
        if value in self.empty_values:
            return None
        moment = parse_entry_date(value)
        if moment is None:
            raise ValidationError(self.error_messages["invalid"], code="invalid")
        return moment.date()


class MinorUnitsField(forms.FloatField):
    """Whole minor units (pennies/cents); fractional input is rounded."""

    def to_python(self, value):
        number = super().to_python(value)
        if number is None:
            return None
        if not math.isfinite(number):
            raise ValidationError(self.error_messages["invalid"], code="invalid")
        return int(Decimal(str(number)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class OwnedVehicleField(forms.ModelChoiceField):
    """Vehicle id → VehicleProfile; blank means 'no vehicle'."""

    def to_python(self, value):
        if isinstance(value, str) and not value.strip():
            return None
        return super().to_python(value)


class UserScopedForm(forms.Form):
    """Base form: the view passes `user=request.user` so lookups stay scoped."""

    def __init__(self, *args, **kwargs):
        self.user = kwargs.pop("user", None)                      # ← Save logged-in user
        super().__init__(*args, **kwargs)
        if "vehicleProfileId" in self.fields:
            # 🔒 only this user's vehicles are valid choices
            self.fields["vehicleProfileId"].queryset = (
                VehicleProfile.objects.filter(user=self.user) if self.user else VehicleProfile.objects.none()
            )

    def _bind(self, instance):
        if instance.user_id is None:
            instance.user = self.user
        return instance


# ─────────────────────────────────────────────────────────────────────────────
# 1) IncomeForm
# ─────────────────────────────────────────────────────────────────────────────
class IncomeForm(UserScopedForm):
    platform = forms.CharField(max_length=80)
    amount = forms.DecimalField(max_digits=14)
    date = IsoDateField()

    def clean_platform(self):
        platform = _norm_text(self.cleaned_data.get("platform"))
        if not platform:
            raise ValidationError("Platform is required.")
        return platform

    def clean_amount(self):
        amount = self.cleaned_data.get("amount")
        if amount is None or amount <= 0:
            raise ValidationError("Amount must be greater than zero.")
        return amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)

    def save(self, instance=None):
        income = self._bind(instance or Income())
        income.platform = self.cleaned_data["platform"]
        income.amount = self.cleaned_data["amount"]
        income.date = self.cleaned_data["date"]
        income.full_clean()
        income.save()
        return income


# ─────────────────────────────────────────────────────────────────────────────
# 2) ExpenseForm
# ─────────────────────────────────────────────────────────────────────────────
class ExpenseForm(UserScopedForm):
    expenseType = forms.ChoiceField(choices=EXPENSE_TYPES)
    amountMinor = MinorUnitsField(min_value=1)
    paidAt = IsoDateField()
    unitRateMinor = MinorUnitsField(required=False, min_value=1)
    unitRateUnit = forms.ChoiceField(choices=[("", "—")] + UNIT_RATE_UNITS, required=False)
    notes = forms.CharField(required=False, strip=True)
    vehicleProfileId = OwnedVehicleField(queryset=VehicleProfile.objects.none(), required=False)
    detailsJson = forms.Field(required=False)

    def clean_detailsJson(self):
        # ✅ keep strings as sent; objects/lists are serialised
        value = self.cleaned_data.get("detailsJson")
        if not value:
            return None
        if isinstance(value, str):
            return value
        try:
            return json.dumps(value)
        except (TypeError, ValueError):
            raise ValidationError("Details must be JSON serialisable.")

    def clean_notes(self):
        return self.cleaned_data.get("notes") or None

    def clean(self):
        """
        Cross-field rules:
          - unit rate and unit come as a pair
          - only fuel / charging expenses keep a unit rate
        """
        cleaned = super().clean()
        rate = cleaned.get("unitRateMinor")
        unit = cleaned.get("unitRateUnit") or None
        cleaned["unitRateUnit"] = unit

        if cleaned.get("expenseType") != FUEL_CHARGING:
            cleaned["unitRateMinor"] = None
            cleaned["unitRateUnit"] = None
            return cleaned

        if (rate is None) != (unit is None):
            raise ValidationError("Provide both a unit rate and its unit, or neither.")
        return cleaned

    def save(self, instance=None):
        expense = self._bind(instance or Expense())
        expense.expense_type = self.cleaned_data["expenseType"]
        expense.amount_minor = self.cleaned_data["amountMinor"]
        expense.paid_at = self.cleaned_data["paidAt"]
        expense.unit_rate_minor = self.cleaned_data["unitRateMinor"]
        expense.unit_rate_unit = self.cleaned_data["unitRateUnit"]
        expense.notes = self.cleaned_data["notes"]
        expense.vehicle_profile = self.cleaned_data.get("vehicleProfileId")
        expense.details_json = self.cleaned_data["detailsJson"]
        expense.save()                                   # model.save() runs full_clean()
        return expense


# ─────────────────────────────────────────────────────────────────────────────
# 3) OdometerForm
# ─────────────────────────────────────────────────────────────────────────────
class OdometerForm(UserScopedForm):
    date = IsoDateField()
    startReading = forms.FloatField(min_value=0)
    endReading = forms.FloatField(min_value=0)
    vehicleProfileId = OwnedVehicleField(queryset=VehicleProfile.objects.none(), required=False)
    notes = forms.CharField(required=False, strip=True)

    def clean(self):
        cleaned = super().clean()
        start, end = cleaned.get("startReading"), cleaned.get("endReading")
        # ✅ distance can never be negative
        if start is not None and end is not None and end < start:
            self.add_error("endReading", "End reading must be at least the start reading.")
        return cleaned

    def save(self, instance=None):
        log = self._bind(instance or Odometer())
        log.date = self.cleaned_data["date"]
        log.start_reading = self.cleaned_data["startReading"]
        log.end_reading = self.cleaned_data["endReading"]
        log.vehicle_profile = self.cleaned_data.get("vehicleProfileId")
        log.notes = self.cleaned_data.get("notes") or None
        log.save()
        return log


# ─────────────────────────────────────────────────────────────────────────────
# 4) VehicleProfileForm
# ─────────────────────────────────────────────────────────────────────────────
class VehicleProfileForm(UserScopedForm):
    label = forms.CharField(max_length=80)
    vehicleType = forms.ChoiceField(choices=VEHICLE_TYPES)
    isDefault = forms.BooleanField(required=False)

    def clean_label(self):
        label = _norm_text(self.cleaned_data.get("label"))
        if not label:
            raise ValidationError("Label is required.")
        return label

    def save(self, instance=None):
        profile = self._bind(instance or VehicleProfile())
        profile.label = self.cleaned_data["label"]
        profile.vehicle_type = self.cleaned_data["vehicleType"]
        profile.is_default = self.cleaned_data["isDefault"]
        profile.save()                                   # clears the previous default
        return profile


# ─────────────────────────────────────────────────────────────────────────────
# 5) ChargingVendorForm
# ─────────────────────────────────────────────────────────────────────────────
class ChargingVendorForm(UserScopedForm):
    label = forms.CharField(max_length=80)
    unitRateMinor = MinorUnitsField(min_value=1)
    unitRateUnit = forms.ChoiceField(choices=CHARGING_VENDOR_UNITS)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # 🔁 older clients send the rate as `rate`; it wins when present
        if self.is_bound and "rate" in self.data:
            self.data = dict(self.data, unitRateMinor=self.data["rate"])

    def clean_label(self):
        label = _norm_text(self.cleaned_data.get("label"))
        if not label:
            raise ValidationError("Label is required.")
        return label

    def save(self, instance=None):
        vendor = self._bind(instance or ChargingVendor())
        vendor.label = self.cleaned_data["label"]
        vendor.unit_rate_minor = self.cleaned_data["unitRateMinor"]
        vendor.unit_rate_unit = self.cleaned_data["unitRateUnit"]
        vendor.full_clean()
        vendor.save()
        return vendor


# ─────────────────────────────────────────────────────────────────────────────
# 6) EntryIdForm
# ─────────────────────────────────────────────────────────────────────────────
class EntryIdForm(forms.Form):
    id = forms.UUIDField()
