# accounts/views.py
# 👤 JSON auth endpoints: signup, login (with optional TOTP), logout, session,
#    password change, display preferences and two-factor enrolment.

import logging

from django.contrib.auth import login, logout, update_session_auth_hash   # ✅ auth helpers
from django.contrib.auth.forms import PasswordChangeForm
from django.forms.forms import NON_FIELD_ERRORS
from django.http import JsonResponse
from django.middleware.csrf import get_token
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from .forms import PreferencesForm, SignupForm, TotpCodeForm, TwoFactorAuthenticationForm
from .mixins import api_login_required, json_error, read_json
from .models import UserProfile
from . import totp

logger = logging.getLogger(__name__)


def _user_json(user):
    return {"id": user.pk, "username": user.username, "email": user.email}


def _profile_for(user):
    # 🧾 safety net in case the post_save signal did not run (e.g. fixtures)
    profile, _ = UserProfile.objects.get_or_create(user=user)
    return profile


def _form_error(form, message="Invalid payload", status=400):
    fields = {name: list(messages) for name, messages in form.errors.items()}
    return json_error(message, status=status, fields=fields)


@require_POST
def signup(request):
    """Create the user and log them straight in."""
    body = read_json(request)
    if body is None:
        return json_error("Invalid JSON body")
    form = SignupForm(body)
    if not form.is_valid():
        return _form_error(form)
    user = form.save()
    login(request, user, backend="django.contrib.auth.backends.ModelBackend")
    logger.info("New account %s", user.pk)
    return JsonResponse({"user": _user_json(user), "preferences": _profile_for(user).as_json()}, status=201)


@require_POST
def login_view(request):
    body = read_json(request)
    if body is None:
        return json_error("Invalid JSON body")
    form = TwoFactorAuthenticationForm(request, data=body)
    if not form.is_valid():
        if form.has_error(NON_FIELD_ERRORS, "two_factor_required"):
            return json_error("Two-factor code required", status=401, twoFactorRequired=True)
        logger.warning("Failed login for %r", body.get("username"))
        if form.has_error(NON_FIELD_ERRORS, "two_factor_invalid"):
            return json_error("Invalid two-factor code", status=401, twoFactorRequired=True)
        return json_error("Invalid credentials", status=401)
    user = form.get_user()
    login(request, user)
    return JsonResponse({"user": _user_json(user), "preferences": _profile_for(user).as_json()})


@require_POST
def logout_view(request):
    logout(request)                            # ✅ clear session
    return JsonResponse({"ok": True})


@require_GET
def session(request):
    """Who is logged in (user is null when nobody is) plus a CSRF token for writes."""
    payload = {"user": None, "csrfToken": get_token(request)}
    if request.user.is_authenticated:
        payload.update({
            "user": _user_json(request.user),
            "preferences": _profile_for(request.user).as_json(),
            "twoFactorEnabled": totp.confirmed_device_for(request.user) is not None,
        })
    return JsonResponse(payload)


@require_POST
@api_login_required
def change_password(request):
    body = read_json(request)
    if body is None:
        return json_error("Invalid JSON body")
    form = PasswordChangeForm(user=request.user, data=body)
    if not form.is_valid():
        return _form_error(form)
    user = form.save()
    update_session_auth_hash(request, user)    # 🔁 keep this session alive
    logger.info("Password changed for user %s", user.pk)
    return JsonResponse({"ok": True})


@require_http_methods(["GET", "PATCH"])
@api_login_required
def preferences(request):
    profile = _profile_for(request.user)
    if request.method == "GET":
        return JsonResponse(profile.as_json())

    body = read_json(request)
    if body is None:
        return json_error("Invalid JSON body")
    form = PreferencesForm(body, profile)
    if not form.is_valid():
        return _form_error(form)
    return JsonResponse(form.save().as_json())


# ─────────────────────────────────────────────────────────────────────────────
# 🔐 TWO-FACTOR
#   setup   → new pending secret + otpauth URI
#   confirm → first valid code switches it on
#   disable → a valid code switches it off
# ─────────────────────────────────────────────────────────────────────────────

@require_GET
@api_login_required
def two_factor_status(request):
    device = totp.device_for(request.user)
    return JsonResponse({
        "enabled": bool(device and device.confirmed),
        "pending": bool(device and not device.confirmed),
    })


@require_POST
@api_login_required
def two_factor_setup(request):
    if totp.confirmed_device_for(request.user) is not None:
        return json_error("Two-factor authentication is already enabled")
    device = totp.start_enrolment(request.user)
    account = request.user.email or request.user.username
    return JsonResponse({
        "secret": device.secret,
        "provisioningUri": totp.provisioning_uri(device, account),
    }, status=201)


def _checked_code(request):
    """(code, None) or (None, error response)."""
    body = read_json(request)
    if body is None:
        return None, json_error("Invalid JSON body")
    form = TotpCodeForm(body)
    if not form.is_valid():
        return None, _form_error(form)
    return form.cleaned_data["code"].strip(), None


@require_POST
@api_login_required
def two_factor_confirm(request):
    code, error = _checked_code(request)
    if error:
        return error
    device = totp.device_for(request.user)
    if device is None:
        return json_error("Start two-factor setup first")
    if device.confirmed:
        return json_error("Two-factor authentication is already enabled")
    if not totp.verify_code(device, code):
        return json_error("Invalid two-factor code")
    totp.confirm(device)
    return JsonResponse({"enabled": True})


@require_POST
@api_login_required
def two_factor_disable(request):
    code, error = _checked_code(request)
    if error:
        return error
    device = totp.confirmed_device_for(request.user)
    if device is None:
        return json_error("Two-factor authentication is not enabled")
    if not totp.verify_code(device, code):
        return json_error("Invalid two-factor code")
    device.delete()
    logger.info("Two-factor disabled for user %s", request.user.pk)
    return JsonResponse({"enabled": False})
