# accounts/forms.py
# ✅ Auth + preferences forms. They validate JSON bodies the same way they
#    would validate a POSTed HTML form.

from django import forms                              # build forms safely
from django.contrib.auth import get_user_model
from django.contrib.auth.forms import AuthenticationForm, UserCreationForm

from finance.lib.currency import CURRENCY_CHOICES
from .models import UNIT_SYSTEM_CHOICES, VOLUME_UNIT_CHOICES, UserProfile
from .totp import confirmed_device_for, verify_code

User = get_user_model()                               # supports custom User if you add one later


class SignupForm(UserCreationForm):
    """
    ✅ Our signup form:
       - Requires a unique email (clean_email)
       - Captures preferred currency and saves it on the user's profile
    """

    # 📧 Make email REQUIRED
    email = forms.EmailField(required=True)

    # 💱 Let the user pick a preferred currency at signup
    currency = forms.ChoiceField(choices=CURRENCY_CHOICES, required=False)

    class Meta(UserCreationForm.Meta):
        model = User
        fields = ("username", "email")

    def clean_email(self):
        # 🧼 Normalize input, then block duplicates (case-insensitive)
        email = (self.cleaned_data.get("email") or "").strip()
        if User.objects.filter(email__iexact=email).exists():
            raise forms.ValidationError("An account with this email already exists.")
        return email

    def save(self, commit=True):
        """💾 Create the User, then store the currency on the auto-created profile."""
        user = super().save(commit=False)
        user.email = self.cleaned_data["email"]
        if commit:
            user.save()
            profile, _ = UserProfile.objects.get_or_create(user=user)
            if self.cleaned_data.get("currency"):
                profile.currency = self.cleaned_data["currency"]
                profile.save(update_fields=["currency"])
        return user


class TwoFactorAuthenticationForm(AuthenticationForm):
    """
    Username + password, plus a TOTP `code` once the account has a confirmed
    authenticator. A missing code is reported separately from a wrong one.
    """

    code = forms.CharField(required=False)

    error_messages = {
        **AuthenticationForm.error_messages,
        "two_factor_required": "A two-factor code is required.",
        "two_factor_invalid": "The two-factor code is not valid.",
    }

    def confirm_login_allowed(self, user):
        super().confirm_login_allowed(user)
        device = confirmed_device_for(user)
        if device is None:
            return
        code = self.cleaned_data.get("code")
        if not code:
            raise forms.ValidationError(self.error_messages["two_factor_required"], code="two_factor_required")
        if not verify_code(device, code):
            raise forms.ValidationError(self.error_messages["two_factor_invalid"], code="two_factor_invalid")


class PreferencesForm(forms.Form):
    """Display preferences; keys the client leaves out keep their current value."""
    currency = forms.ChoiceField(choices=CURRENCY_CHOICES)
    unitSystem = forms.ChoiceField(choices=UNIT_SYSTEM_CHOICES)
    volumeUnit = forms.ChoiceField(choices=VOLUME_UNIT_CHOICES)

    def __init__(self, data, profile):
        self.profile = profile
        super().__init__({**profile.as_json(), **data})

    def save(self):
        self.profile.currency = self.cleaned_data["currency"]
        self.profile.unit_system = self.cleaned_data["unitSystem"]
        self.profile.volume_unit = self.cleaned_data["volumeUnit"]
        self.profile.save()
        return self.profile


class TotpCodeForm(forms.Form):
    code = forms.RegexField(regex=r"^\s*\d{6}\s*$", error_messages={"invalid": "Enter the 6-digit code."})
