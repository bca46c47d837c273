# accounts/totp.py
# 🔐 TOTP helpers (RFC 6238 via pyotp): secrets, provisioning URIs, code checks.

import logging

import pyotp
from django.conf import settings
from django.utils import timezone

from .models import TwoFactorDevice

logger = logging.getLogger(__name__)


def provisioning_uri(device, account_name):
    """otpauth:// URI the authenticator app scans."""
    return pyotp.TOTP(device.secret).provisioning_uri(
        name=account_name,
        issuer_name=settings.GIGFIN["TOTP_ISSUER"],
    )


def verify_code(device, code) -> bool:
    """True when `code` is valid now (one 30s step of clock drift allowed)."""
    if device is None or not code:
        return False
    code = "".join(str(code).split())
    if not code.isdigit():
        return False
    return pyotp.TOTP(device.secret).verify(code, valid_window=1)


def device_for(user):
    return TwoFactorDevice.objects.filter(user=user).first()


def confirmed_device_for(user):
    return TwoFactorDevice.objects.filter(user=user, confirmed=True).first()


def start_enrolment(user):
    """Fresh unconfirmed secret (replaces any pending one)."""
    device, _ = TwoFactorDevice.objects.update_or_create(
        user=user,
        defaults={"secret": pyotp.random_base32(), "confirmed": False, "confirmed_at": None},
    )
    logger.info("Two-factor enrolment started for user %s", user.pk)
    return device


def confirm(device):
    device.confirmed = True
    device.confirmed_at = timezone.now()
    device.save(update_fields=["confirmed", "confirmed_at"])
    logger.info("Two-factor enabled for user %s", device.user_id)
    return device
