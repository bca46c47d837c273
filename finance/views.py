# finance/views.py
# ─────────────────────────────────────────────────────────────────────────────
# ✅ All JSON views for the Finance app live here.
#    This file includes:
#      • Helpers (user preferences, form errors, CSV responses)
#      • One generic collection view (GET/POST/PATCH/DELETE) + five entities
#      • CSV exports (incomes, expenses, everything)
#      • Dashboard + log views
# ─────────────────────────────────────────────────────────────────────────────

# ===== Standard library imports =============================================
import logging                                              # 📝 module logger

# ===== Django imports ========================================================
from django.conf import settings
from django.core.exceptions import ValidationError          # 🛡️ model-level checks (ownership, pairs)
from django.http import HttpResponse, JsonResponse          # 🌐 JSON bodies + CSV downloads
from django.views import View                               # 🧱 base class for our API views

# ===== Local app imports =====================================================
from accounts.mixins import ApiLoginRequiredMixin, json_error, read_json
from .dashboard import build_dashboard, resolve_timeframe_key
from .exports import (
    COMBINED_FILENAME, EXPENSE_FILENAME, INCOME_FILENAME,
    combined_csv, expense_csv, income_csv,
)
from .forms import (
    ChargingVendorForm, EntryIdForm, ExpenseForm, IncomeForm, OdometerForm, VehicleProfileForm,
)
from .lib.currency import DEFAULT_CURRENCY, resolve_currency
from .lib.odometer import KM, unit_for_system
from .lib.timeframes import local_now
from .logs import EXPENSES, INCOMES, LOG_KINDS, ODOMETERS, build_log, combined_rows
from .models import ChargingVendor, Expense, Income, Odometer, VehicleProfile
from . import store

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# 🔧 HELPERS
# ─────────────────────────────────────────────────────────────────────────────

def _preferences_for(user):
    """(currency code, odometer unit) from the user's profile; defaults when missing."""
    profile = getattr(user, "profile", None)
    if profile is None:
        return DEFAULT_CURRENCY, KM
    return resolve_currency(profile.currency), unit_for_system(profile.unit_system)


def _invalid(errors):
    """400 with the field errors (form.errors or ValidationError)."""
    if isinstance(errors, ValidationError):
        fields = errors.message_dict if hasattr(errors, "error_dict") else {"__all__": errors.messages}
    else:
        fields = {name: list(messages) for name, messages in errors.items()}
    return json_error("Invalid payload", status=400, fields=fields)


def _csv_response(content, filename):
    response = HttpResponse(content, content_type="text/csv; charset=utf-8")   # 📤 CSV content
    response["Content-Disposition"] = f'attachment; filename="{filename}"'     # 💾 download hint
    return response


# ─────────────────────────────────────────────────────────────────────────────
# 📦 COLLECTION VIEWS (CRUD)
#   GET    → full list (or ?id= for one entry)
#   POST   → create, 201 + Location
#   PATCH  → {"id": ..., <fields>} partial update
#   DELETE → {"id": ...}
# ─────────────────────────────────────────────────────────────────────────────

class EntryCollectionView(ApiLoginRequiredMixin, View):
    """Owner-scoped CRUD for one entity at its collection URL."""
    model = None
    form_class = None
    resource = None
    http_method_names = ["get", "post", "patch", "delete"]

    def get_store(self):
        return store.EntryStore(self.request.user.pk)

    def get_queryset(self):
        # 🔒 only ever the caller's rows
        return self.model.objects.filter(user=self.request.user)

    def get_object(self, raw_id):
        """(entry, None) or (None, error response)."""
        id_form = EntryIdForm({"id": raw_id})
        if not id_form.is_valid():
            return None, _invalid(id_form.errors)
        entry = self.get_queryset().filter(pk=id_form.cleaned_data["id"]).first()
        if entry is None:
            return None, json_error("Not found", status=404)
        return entry, None

    def save_form(self, form, instance=None):
        """(entry, None) or (None, error response) when a model check fails."""
        try:
            return form.save(instance=instance), None
        except ValidationError as exc:
            return None, _invalid(exc)

    def get(self, request, *args, **kwargs):
        raw_id = request.GET.get("id")
        if raw_id:
            entry, error = self.get_object(raw_id)
            return error or JsonResponse(entry.as_json())
        entries = self.get_store().get(self.resource)
        return JsonResponse([entry.as_json() for entry in entries], safe=False)

    def post(self, request, *args, **kwargs):
        body = read_json(request)
        if body is None:
            return json_error("Invalid JSON body")
        form = self.form_class(body, user=request.user)
        if not form.is_valid():
            return _invalid(form.errors)
        entry, error = self.save_form(form)
        if error:
            return error
        logger.info("Created %s %s for user %s", self.resource, entry.pk, request.user.pk)
        response = JsonResponse(entry.as_json(), status=201)
        response["Location"] = f"{request.path}?id={entry.pk}"
        return response

    def patch(self, request, *args, **kwargs):
        body = read_json(request)
        if body is None:
            return json_error("Invalid JSON body")
        entry, error = self.get_object(body.get("id"))
        if error:
            return error
        # ✏️ missing fields keep their stored values
        form = self.form_class({**entry.as_json(), **body}, user=request.user)
        if not form.is_valid():
            return _invalid(form.errors)
        entry, error = self.save_form(form, instance=entry)
        if error:
            return error
        logger.info("Updated %s %s for user %s", self.resource, entry.pk, request.user.pk)
        return JsonResponse(entry.as_json())

    def delete(self, request, *args, **kwargs):
        body = read_json(request) or {}
        entry, error = self.get_object(body.get("id") or request.GET.get("id"))
        if error:
            return error
        entry_id = str(entry.pk)
        entry.delete()
        logger.info("Deleted %s %s for user %s", self.resource, entry_id, request.user.pk)
        return JsonResponse({"id": entry_id})


class IncomeCollectionView(EntryCollectionView):
    model = Income
    form_class = IncomeForm
    resource = store.INCOMES


class ExpenseCollectionView(EntryCollectionView):
    model = Expense
    form_class = ExpenseForm
    resource = store.EXPENSES


class OdometerCollectionView(EntryCollectionView):
    model = Odometer
    form_class = OdometerForm
    resource = store.ODOMETERS


class VehicleProfileCollectionView(EntryCollectionView):
    """Saving a default clears the previous one; deleting the default promotes nothing."""
    model = VehicleProfile
    form_class = VehicleProfileForm
    resource = store.VEHICLE_PROFILES


class ChargingVendorCollectionView(EntryCollectionView):
    model = ChargingVendor
    form_class = ChargingVendorForm
    resource = store.CHARGING_VENDORS


# ─────────────────────────────────────────────────────────────────────────────
# 📥 CSV EXPORTS
# ─────────────────────────────────────────────────────────────────────────────

class IncomeCsvExportView(ApiLoginRequiredMixin, View):
    def get(self, request, *args, **kwargs):
        incomes = store.EntryStore(request.user.pk).incomes()
        logger.info("Income export (%d rows) for user %s", len(incomes), request.user.pk)
        return _csv_response(income_csv(incomes), INCOME_FILENAME)


class ExpenseCsvExportView(ApiLoginRequiredMixin, View):
    def get(self, request, *args, **kwargs):
        expenses = store.EntryStore(request.user.pk).expenses()
        logger.info("Expense export (%d rows) for user %s", len(expenses), request.user.pk)
        return _csv_response(expense_csv(expenses), EXPENSE_FILENAME)


class CombinedCsvExportView(ApiLoginRequiredMixin, View):
    """Incomes and expenses in one file, newest first."""
    def get(self, request, *args, **kwargs):
        entries = store.EntryStore(request.user.pk)
        logger.info("Combined export for user %s", request.user.pk)
        return _csv_response(combined_csv(entries.incomes(), entries.expenses()), COMBINED_FILENAME)


# ─────────────────────────────────────────────────────────────────────────────
# 📊 DASHBOARD + LOGS
#   • Aggregates in Python over the cached entry lists.
#   • Nothing derived is written back.
# ─────────────────────────────────────────────────────────────────────────────

class DashboardView(ApiLoginRequiredMixin, View):
    """Every dashboard panel for `?timeframe=` (weekly, monthly, yearToDate, last12Months)."""

    def get(self, request, *args, **kwargs):
        entries = store.EntryStore(request.user.pk)
        currency, unit = _preferences_for(request.user)
        payload = build_dashboard(
            entries.incomes(),
            entries.expenses(),
            entries.odometers(),
            timeframe=resolve_timeframe_key(request.GET.get("timeframe")),
            now=local_now(),
            currency=currency,
            unit=unit,
            months=settings.GIGFIN["MONTHLY_WINDOW"],
        )
        return JsonResponse(payload)


class LogView(ApiLoginRequiredMixin, View):
    """One page of a log: ?month=YYYY-MM&sort=&direction=&page= plus per-log filters."""

    def get(self, request, kind, *args, **kwargs):
        if kind not in LOG_KINDS:
            return json_error("Not found", status=404)

        entries = store.EntryStore(request.user.pk)
        if kind == INCOMES:
            rows = entries.incomes()
        elif kind == EXPENSES:
            rows = entries.expenses()
        elif kind == ODOMETERS:
            rows = entries.odometers()
        else:
            rows = combined_rows(entries.incomes(), entries.expenses(), entries.odometers())

        payload = build_log(kind, rows, request.GET, local_now(), settings.GIGFIN["LOGS_PAGE_SIZE"])
        if kind != INCOMES:
            payload["filterOptions"]["vehicle"] = [
                profile.as_embed() for profile in entries.vehicle_profiles()
            ]
        return JsonResponse(payload)
