# finance/urls.py
# ✅ URL routes for the Finance API (mounted under /api/).

from django.urls import path                   # 🔗 path() maps URL patterns to views
from . import views                            # 📦 our class-based views from finance/views.py

# 🏷️ Namespace for reverse(): use 'finance:route_name'
app_name = "finance"

urlpatterns = [
    # ───────────── Entries (CRUD at the collection URL) ─────────────
    path("incomes", views.IncomeCollectionView.as_view(), name="incomes"),
    path("expenses", views.ExpenseCollectionView.as_view(), name="expenses"),
    path("odometers", views.OdometerCollectionView.as_view(), name="odometers"),
    path("vehicle-profiles", views.VehicleProfileCollectionView.as_view(), name="vehicle_profiles"),
    path("charging-vendors", views.ChargingVendorCollectionView.as_view(), name="charging_vendors"),

    # ───────────── CSV exports ─────────────
    path("export/incomes", views.IncomeCsvExportView.as_view(), name="export_incomes"),
    path("export/expenses", views.ExpenseCsvExportView.as_view(), name="export_expenses"),
    path("export/all", views.CombinedCsvExportView.as_view(), name="export_all"),

    # ───────────── Dashboard + logs ─────────────
    path("dashboard", views.DashboardView.as_view(), name="dashboard"),
    path("logs/<str:kind>", views.LogView.as_view(), name="logs"),   # incomes / expenses / odometers / combined
]
