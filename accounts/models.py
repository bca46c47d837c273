# accounts/models.py
# 🧱 Models for the accounts app: per-user display preferences + TOTP device.

from django.conf import settings                                     # ✅ reference AUTH_USER_MODEL safely
from django.db import models                                         # ✅ base ORM

from finance.lib.currency import CURRENCY_CHOICES, DEFAULT_CURRENCY

UNIT_SYSTEM_CHOICES = [
    ("metric", "Metric (km)"),
    ("imperial", "Imperial (miles)"),
]

VOLUME_UNIT_CHOICES = [
    ("litre", "Litres"),
    ("gallon_us", "US gallons"),
    ("gallon_imp", "Imperial gallons"),
]


class UserProfile(models.Model):
    """
    📄 One profile per user.
    - currency: how we display money
    - unit_system: km or miles for odometer figures
    - volume_unit: preferred fuel volume unit
    """

    # 🔗 link to the user (AUTH_USER_MODEL allows custom User later)
    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,           # ✅ delete profile if user is deleted
        related_name="profile",             # ✅ access via user.profile
        help_text="The user this profile belongs to",
    )

    # 💱 preferred currency code (GBP, USD, EUR)
    currency = models.CharField(
        max_length=3,
        choices=CURRENCY_CHOICES,           # ✅ show nice labels in forms
        default=DEFAULT_CURRENCY,
        help_text="3-letter currency code, e.g., GBP, USD, EUR",
    )
    unit_system = models.CharField(max_length=8, choices=UNIT_SYSTEM_CHOICES, default="metric")
    volume_unit = models.CharField(max_length=10, choices=VOLUME_UNIT_CHOICES, default="litre")

    def __str__(self):
        return f"Profile for {self.user}"

    def as_json(self):
        return {
            "currency": self.currency,
            "unitSystem": self.unit_system,
            "volumeUnit": self.volume_unit,
        }


class TwoFactorDevice(models.Model):
    """
    🔐 A TOTP secret for one user.
    It only guards login once `confirmed` is set (after the user proves
    their authenticator app produces valid codes).
    """

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="two_factor_device",
    )
    secret = models.CharField(max_length=64)
    confirmed = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    confirmed_at = models.DateTimeField(null=True, blank=True)

    def __str__(self):
        state = "confirmed" if self.confirmed else "pending"
        return f"TOTP for {self.user} ({state})"
