# finance/admin.py
# ✅ Register the finance models here (accounts models live in accounts/admin.py)

from django.contrib import admin                          # ← Django admin site
from .models import ChargingVendor, Expense, Income, Odometer, VehicleProfile


@admin.register(Income)
class IncomeAdmin(admin.ModelAdmin):
    list_display  = ("date", "platform", "amount", "user")           # columns in the list
    list_filter   = ("platform", "date")                             # sidebar filter
    search_fields = ("platform", "user__username")                   # search box
    date_hierarchy = "date"                                          # nice date drill-down


@admin.register(Expense)
class ExpenseAdmin(admin.ModelAdmin):
    list_display  = ("paid_at", "expense_type", "amount_minor", "unit_rate_minor", "unit_rate_unit",
                     "vehicle_profile", "user")
    list_filter   = ("expense_type", "paid_at")
    search_fields = ("notes", "user__username")
    date_hierarchy = "paid_at"


@admin.register(Odometer)
class OdometerAdmin(admin.ModelAdmin):
    list_display  = ("date", "start_reading", "end_reading", "vehicle_profile", "user")
    list_filter   = ("date",)
    search_fields = ("notes", "user__username")
    date_hierarchy = "date"


@admin.register(VehicleProfile)
class VehicleProfileAdmin(admin.ModelAdmin):
    list_display  = ("label", "vehicle_type", "is_default", "user")
    list_filter   = ("vehicle_type", "is_default")
    search_fields = ("label", "user__username")


@admin.register(ChargingVendor)
class ChargingVendorAdmin(admin.ModelAdmin):
    list_display  = ("label", "unit_rate_minor", "unit_rate_unit", "user")
    search_fields = ("label", "user__username")
