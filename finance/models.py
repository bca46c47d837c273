# finance/models.py

# ✅ Import Django utilities for building models
import uuid                                          # random primary keys (never guessable ids)
from decimal import Decimal                          # accurate money math

from django.conf import settings                     # lets us reference the current User model safely
from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator # to make sure amounts are positive
from django.db import models, transaction            # core Django ORM classes
from django.utils import timezone                    # to give a sensible default date (today)

from .lib.expenses import EXPENSE_TYPES, FUEL_CHARGING, UNIT_RATE_UNITS
from .lib.odometer import odometer_distance

VEHICLE_TYPES = (
    ("EV", "Electric (EV)"),
    ("PETROL", "Petrol"),
    ("DIESEL", "Diesel"),
    ("HYBRID", "Hybrid"),
)

CHARGING_VENDOR_UNITS = (("kwh", "kWh"),)           # vendors only publish per-kWh tariffs


def _iso(value):
    return value.isoformat() if value else None


class VehicleProfile(models.Model):
    """
    A user's vehicle. Expenses and odometer logs may point at one.
    At most one profile per user is the default: saving a default clears the
    previous one. Deleting the default does NOT promote another profile.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    # ✅ Owner (privacy boundary for every query)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="vehicle_profiles",
    )
    label = models.CharField(max_length=80, help_text="e.g., 'Blue Leaf', 'Work Prius'")
    vehicle_type = models.CharField(max_length=6, choices=VEHICLE_TYPES)
    is_default = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user"], name="vehicle_profiles_user_idx"),
            models.Index(fields=["user", "is_default"], name="vehicle_profiles_default_idx"),
        ]

    def __str__(self):
        return f"{self.label} ({self.vehicle_type})"

    def save(self, *args, **kwargs):
        # ✅ One default per user: clear the old default inside the same transaction
        with transaction.atomic():
            if self.is_default:
                (VehicleProfile.objects
                 .filter(user_id=self.user_id, is_default=True)
                 .exclude(pk=self.pk)
                 .update(is_default=False))
            super().save(*args, **kwargs)

    def as_json(self):
        return {
            "id": str(self.id),
            "userId": self.user_id,
            "label": self.label,
            "vehicleType": self.vehicle_type,
            "isDefault": self.is_default,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }

    def as_embed(self):
        """The short form embedded in expense/odometer payloads."""
        return {"id": str(self.id), "label": self.label, "vehicleType": self.vehicle_type}


def _vehicle_embed(entry):
    if not entry.vehicle_profile_id:
        return None
    return entry.vehicle_profile.as_embed()


def _check_vehicle_owner(entry):
    # 🔒 a log can only point at one of its owner's vehicles
    if entry.vehicle_profile_id and entry.user_id and entry.vehicle_profile.user_id != entry.user_id:
        raise ValidationError({"vehicle_profile": "This vehicle does not belong to you."})


class ChargingVendor(models.Model):
    """A saved charging network / tariff (per-kWh rate in minor units)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="charging_vendors",
    )
    label = models.CharField(max_length=80)
    unit_rate_minor = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_rate_unit = models.CharField(max_length=10, choices=CHARGING_VENDOR_UNITS, default="kwh")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["label"]
        indexes = [models.Index(fields=["user", "label"], name="charging_vendors_label_idx")]

    def __str__(self):
        return f"{self.label} • {self.unit_rate_minor}p/{self.unit_rate_unit}"

    def as_json(self):
        return {
            "id": str(self.id),
            "userId": self.user_id,
            "label": self.label,
            "unitRateMinor": self.unit_rate_minor,
            "unitRateUnit": self.unit_rate_unit,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Income(models.Model):
    """
    A single gig-platform payout (always a positive amount).
    Example: 'Uber Eats', 42.50 on 2024-01-05.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="incomes",
    )
    platform = models.CharField(max_length=80, help_text="e.g., Uber Eats, Deliveroo, Lyft")

    # ✅ Always store positive amounts (use Decimal for money)
    amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01"))],
    )
    date = models.DateField(default=timezone.localdate)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-date", "-created_at"]              # newest first in lists
        indexes = [models.Index(fields=["user", "date"], name="income_user_date_idx")]

    def __str__(self):
        return f"{self.platform} • {self.amount} • {self.date}"

    def as_json(self):
        return {
            "id": str(self.id),
            "userId": self.user_id,
            "platform": self.platform,
            "amount": float(self.amount),
            "date": _iso(self.date),
            "createdAt": _iso(self.created_at),
        }


class Expense(models.Model):
    """
    A vehicle-related cost, stored in minor units (pennies/cents).
    Fuel/charging entries may also record the unit rate paid (e.g. 45p/kWh);
    rate and unit always come as a pair and only for fuel_charging.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="expenses",
    )
    expense_type = models.CharField(max_length=20, choices=EXPENSE_TYPES)
    amount_minor = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    paid_at = models.DateField(default=timezone.localdate)
    vehicle_profile = models.ForeignKey(
        VehicleProfile,
        on_delete=models.SET_NULL,                       # deleting a vehicle keeps its history
        null=True,
        blank=True,
        related_name="expenses",
    )
    notes = models.TextField(blank=True, null=True)
    unit_rate_minor = models.PositiveIntegerField(null=True, blank=True)
    unit_rate_unit = models.CharField(max_length=10, choices=UNIT_RATE_UNITS, null=True, blank=True)
    details_json = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-paid_at", "-created_at"]
        indexes = [
            models.Index(fields=["user", "paid_at"], name="expenses_user_paid_at_idx"),
            models.Index(fields=["user", "expense_type"], name="expenses_user_type_idx"),
            models.Index(fields=["vehicle_profile", "paid_at"], name="expenses_vehicle_paid_idx"),
        ]

    def __str__(self):
        return f"{self.expense_type} • {self.amount_minor / 100:.2f} • {self.paid_at}"

    def clean(self):
        # ✅ Rate fields travel together
        if (self.unit_rate_minor is None) != (self.unit_rate_unit in (None, "")):
            raise ValidationError("Unit rate and unit must be provided together.")
        if self.expense_type != FUEL_CHARGING and self.unit_rate_minor is not None:
            raise ValidationError("Unit rates only apply to fuel / charging expenses.")
        _check_vehicle_owner(self)

    def save(self, *args, **kwargs):
        self.full_clean()                                # runs clean() + field validators
        super().save(*args, **kwargs)

    def as_json(self):
        return {
            "id": str(self.id),
            "userId": self.user_id,
            "expenseType": self.expense_type,
            "amountMinor": self.amount_minor,
            "paidAt": _iso(self.paid_at),
            "unitRateMinor": self.unit_rate_minor,
            "unitRateUnit": self.unit_rate_unit,
            "notes": self.notes,
            "vehicleProfileId": str(self.vehicle_profile_id) if self.vehicle_profile_id else None,
            "vehicle": _vehicle_embed(self),
            "detailsJson": self.details_json,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }


class Odometer(models.Model):
    """Start/end readings for one shift. Distance = end - start, never negative."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="odometers",
    )
    date = models.DateField(default=timezone.localdate)
    start_reading = models.FloatField(validators=[MinValueValidator(0)])
    end_reading = models.FloatField(validators=[MinValueValidator(0)])
    vehicle_profile = models.ForeignKey(
        VehicleProfile,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="odometers",
    )
    notes = models.TextField(blank=True, null=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-created_at"]
        indexes = [
            models.Index(fields=["user", "date"], name="odometers_user_date_idx"),
            models.Index(fields=["vehicle_profile", "date"], name="odometers_vehicle_date_idx"),
        ]

    def __str__(self):
        return f"{self.date} • {self.start_reading} → {self.end_reading}"

    @property
    def distance(self):
        return odometer_distance(self)

    def clean(self):
        if (self.start_reading is not None and self.end_reading is not None
                and self.end_reading < self.start_reading):
            raise ValidationError({"end_reading": "End reading must be at least the start reading."})
        _check_vehicle_owner(self)

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)

    def as_json(self):
        return {
            "id": str(self.id),
            "userId": self.user_id,
            "date": _iso(self.date),
            "startReading": self.start_reading,
            "endReading": self.end_reading,
            "distance": self.distance,
            "vehicleProfileId": str(self.vehicle_profile_id) if self.vehicle_profile_id else None,
            "vehicle": _vehicle_embed(self),
            "notes": self.notes,
            "createdAt": _iso(self.created_at),
            "updatedAt": _iso(self.updated_at),
        }
