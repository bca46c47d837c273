import uuid
from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


EXPENSE_TYPES = [
    ("fuel_charging", "Fuel / Charging"),
    ("maintenance", "Maintenance / Servicing"),
    ("repairs", "Repairs"),
    ("tyres", "Tyres"),
    ("cleaning", "Cleaning / Car wash"),
    ("insurance", "Insurance"),
    ("road_tax", "Road tax / registration"),
    ("mot", "MOT / inspections"),
    ("parking", "Parking (paid)"),
    ("tolls", "Tolls / bridges / ferries"),
    ("congestion", "Congestion / clean-air charges"),
    ("phone", "Phone / data"),
    ("equipment", "Equipment (mounts, cables, power banks, bags)"),
    ("platform_fees", "Platform fees / subscriptions / cashout fees"),
    ("fines", "Fines / penalties"),
    ("finance", "Finance / lease / loan interest"),
    ("depreciation", "Depreciation / vehicle purchase"),
]

UNIT_RATE_UNITS = [
    ("kwh", "kWh"),
    ("litre", "litre"),
    ("gallon_us", "gallon (US)"),
    ("gallon_imp", "gallon (Imperial)"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="VehicleProfile",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("label", models.CharField(help_text="e.g., 'Blue Leaf', 'Work Prius'", max_length=80)),
                ("vehicle_type", models.CharField(choices=[("EV", "Electric (EV)"), ("PETROL", "Petrol"), ("DIESEL", "Diesel"), ("HYBRID", "Hybrid")], max_length=6)),
                ("is_default", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="vehicle_profiles", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["user"], name="vehicle_profiles_user_idx"),
                    models.Index(fields=["user", "is_default"], name="vehicle_profiles_default_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ChargingVendor",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("label", models.CharField(max_length=80)),
                ("unit_rate_minor", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("unit_rate_unit", models.CharField(choices=[("kwh", "kWh")], default="kwh", max_length=10)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="charging_vendors", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["label"],
                "indexes": [models.Index(fields=["user", "label"], name="charging_vendors_label_idx")],
            },
        ),
        migrations.CreateModel(
            name="Income",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("platform", models.CharField(help_text="e.g., Uber Eats, Deliveroo, Lyft", max_length=80)),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal("0.01"))])),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="incomes", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [models.Index(fields=["user", "date"], name="income_user_date_idx")],
            },
        ),
        migrations.CreateModel(
            name="Expense",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("expense_type", models.CharField(choices=EXPENSE_TYPES, max_length=20)),
                ("amount_minor", models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ("paid_at", models.DateField(default=django.utils.timezone.localdate)),
                ("notes", models.TextField(blank=True, null=True)),
                ("unit_rate_minor", models.PositiveIntegerField(blank=True, null=True)),
                ("unit_rate_unit", models.CharField(blank=True, choices=UNIT_RATE_UNITS, max_length=10, null=True)),
                ("details_json", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="expenses", to=settings.AUTH_USER_MODEL)),
                ("vehicle_profile", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="expenses", to="finance.vehicleprofile")),
            ],
            options={
                "ordering": ["-paid_at", "-created_at"],
                "indexes": [
                    models.Index(fields=["user", "paid_at"], name="expenses_user_paid_at_idx"),
                    models.Index(fields=["user", "expense_type"], name="expenses_user_type_idx"),
                    models.Index(fields=["vehicle_profile", "paid_at"], name="expenses_vehicle_paid_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Odometer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                ("start_reading", models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ("end_reading", models.FloatField(validators=[django.core.validators.MinValueValidator(0)])),
                ("notes", models.TextField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="odometers", to=settings.AUTH_USER_MODEL)),
                ("vehicle_profile", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="odometers", to="finance.vehicleprofile")),
            ],
            options={
                "ordering": ["-date", "-created_at"],
                "indexes": [
                    models.Index(fields=["user", "date"], name="odometers_user_date_idx"),
                    models.Index(fields=["vehicle_profile", "date"], name="odometers_vehicle_date_idx"),
                ],
            },
        ),
    ]
