# accounts/urls.py
# ✅ Auth API routes (mounted under /api/auth/).

from django.urls import path
from . import views

app_name = "accounts"

urlpatterns = [
    path("signup", views.signup, name="signup"),
    path("login", views.login_view, name="login"),
    path("logout", views.logout_view, name="logout"),
    path("session", views.session, name="session"),
    path("password", views.change_password, name="password"),
    path("preferences", views.preferences, name="preferences"),

    # 🔐 two-factor
    path("two-factor", views.two_factor_status, name="two_factor_status"),
    path("two-factor/setup", views.two_factor_setup, name="two_factor_setup"),
    path("two-factor/confirm", views.two_factor_confirm, name="two_factor_confirm"),
    path("two-factor/disable", views.two_factor_disable, name="two_factor_disable"),
]
