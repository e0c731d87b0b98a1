"""URL configuration for StaffHub project."""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("django-admin/", admin.site.urls),
    path("", include("apps.core.urls")),
    path("", include("apps.accounts.urls")),
    path("", include("apps.organizations.urls")),
    path("", include("apps.leave.urls")),
    path("api/admin/", include("apps.notifications.urls")),
]
