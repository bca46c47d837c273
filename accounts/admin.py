# accounts/admin.py
# 🛠️ Admin integration for UserProfile and TwoFactorDevice.

from django.contrib import admin
from .models import TwoFactorDevice, UserProfile


@admin.register(UserProfile)
class UserProfileAdmin(admin.ModelAdmin):
    list_display = ("user", "currency", "unit_system", "volume_unit")
    list_filter = ("currency", "unit_system")
    search_fields = ("user__username",)


@admin.register(TwoFactorDevice)
class TwoFactorDeviceAdmin(admin.ModelAdmin):
    list_display = ("user", "confirmed", "created_at", "confirmed_at")
    list_filter = ("confirmed",)
    search_fields = ("user__username",)
    exclude = ("secret",)                      # never show the shared secret
