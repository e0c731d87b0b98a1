"""URL configuration for core app."""

from django.urls import path, re_path

from . import views

app_name = "core"

urlpatterns = [
    path("", views.HomeView.as_view(), name="home"),
    re_path(r"^(?:dashboard|admin|calendar)(?:/.*)?$", views.LegacyRedirectView.as_view(), name="legacy"),
]
