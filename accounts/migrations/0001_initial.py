import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="UserProfile",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("currency", models.CharField(choices=[("GBP", "GBP · Pound sterling"), ("USD", "USD · US dollar"), ("EUR", "EUR · Euro")], default="GBP", help_text="3-letter currency code, e.g., GBP, USD, EUR", max_length=3)),
                ("unit_system", models.CharField(choices=[("metric", "Metric (km)"), ("imperial", "Imperial (miles)")], default="metric", max_length=8)),
                ("volume_unit", models.CharField(choices=[("litre", "Litres"), ("gallon_us", "US gallons"), ("gallon_imp", "Imperial gallons")], default="litre", max_length=10)),
                ("user", models.OneToOneField(help_text="The user this profile belongs to", on_delete=django.db.models.deletion.CASCADE, related_name="profile", to=settings.AUTH_USER_MODEL)),
            ],
        ),
        migrations.CreateModel(
            name="TwoFactorDevice",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("secret", models.CharField(max_length=64)),
                ("confirmed", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("user", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="two_factor_device", to=settings.AUTH_USER_MODEL)),
            ],
        ),
    ]
