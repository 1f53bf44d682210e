# config/urls.py

from django.contrib import admin
from django.urls import path, include

from . import views

# -------------------------------------------------------------------
# URL CONFIGURATION
# -------------------------------------------------------------------

urlpatterns = [
    # ----------------------------------------------------------------
    # Health & diagnostics
    # ----------------------------------------------------------------
    path("health/", views.health_check_view, name="health_check"),

    # ----------------------------------------------------------------
    # Authentication (django-allauth)
    # ----------------------------------------------------------------
    path("accounts/", include("allauth.urls")),

    # ----------------------------------------------------------------
    # API namespaces
    # ----------------------------------------------------------------
    path("api/core/", include(("core.urls", "core"), namespace="core")),
    path("api/users/", include(("users.urls", "users"), namespace="users")),
    path("api/students/", include(("students.urls", "students"), namespace="students")),
    path("api/admissions/", include(("admissions.urls", "admissions"), namespace="admissions")),
    path("api/billing/", include(("billing.urls", "billing"), namespace="billing")),

    # ----------------------------------------------------------------
    # Admin
    # ----------------------------------------------------------------
    path("admin/", admin.site.urls),
]

# -------------------------------------------------------------------
# Error handlers
# -------------------------------------------------------------------

handler400 = "config.views.handler400"
handler403 = "config.views.handler403"
handler404 = "config.views.handler404"
handler500 = "config.views.handler500"
