# gigfin/urls.py
# 🗺️ Root URL configuration: admin, auth API and the finance API.

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/", include("accounts.urls")),                # 👤 session + 2FA endpoints
    path("api/", include("finance.urls")),                      # 💷 entries, exports, dashboard, logs
]

handler404 = "gigfin.views.page_not_found_view"
handler500 = "gigfin.views.server_error_view"
